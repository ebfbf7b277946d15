"""
Match API Routes (program manager view)

Bulk creation of a tournament's matches, fixture generation (bracket,
round-robin, pool play), listing in schedule order, and score/status
updates during play. Placement on fields happens via
the scheduling routes.
"""

import logging
from datetime import date, datetime, time
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import field_validator
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from league_admin.database import get_session
from league_admin.errors import InvalidInput, PersistenceError
from league_admin.models.match import DEFAULT_MATCH_DURATION_MINUTES, MATCH_STATUSES, Match
from league_admin.models.team import Team
from league_admin.models.tournament import Tournament
from league_admin.utils.api_models import ApiModel
from league_admin.utils.match_generation import SeededTeam, generate_fixtures
from league_admin.utils.membership import require_existing_ids

logger = logging.getLogger(__name__)

router = APIRouter()


def _validate_status(v):
    if v is not None and v not in MATCH_STATUSES:
        raise ValueError(f"status must be one of {MATCH_STATUSES}")
    return v


class MatchCreate(ApiModel):
    match_number: Optional[int] = None
    round: Optional[int] = None
    pool: Optional[int] = None
    team1_id: Optional[int] = None
    team2_id: Optional[int] = None
    duration: Optional[int] = None
    status: Optional[str] = None
    score1: Optional[int] = None
    score2: Optional[int] = None

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        return _validate_status(v)


class MatchBulkCreateRequest(ApiModel):
    matches: List[MatchCreate]


class MatchBulkCreateResponse(ApiModel):
    success: bool
    created: int


class TeamSeed(ApiModel):
    id: int
    seed_position: Optional[int] = None


class MatchGenerateRequest(ApiModel):
    format: Optional[str] = None
    teams: Optional[List[TeamSeed]] = None
    pools: Optional[int] = None
    replace: bool = False


class MatchUpdate(ApiModel):
    score1: Optional[int] = None
    score2: Optional[int] = None
    status: Optional[str] = None

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        return _validate_status(v)


class MatchResponse(ApiModel):
    id: int
    tournament_id: int
    match_number: Optional[int] = None
    round: Optional[int] = None
    pool: Optional[int] = None
    team1_id: Optional[int] = None
    team2_id: Optional[int] = None
    field_id: Optional[int] = None
    scheduled_date: Optional[date] = None
    scheduled_time: Optional[time] = None
    duration_minutes: int
    status: str
    score1: Optional[int] = None
    score2: Optional[int] = None
    created_at: datetime


class MatchGenerateResponse(ApiModel):
    success: bool
    format: str
    total_matches: int
    matches: List[MatchResponse]


def schedule_order_key(match: Match):
    """Date, then time (unscheduled last), then match number, then id"""
    return (
        (match.scheduled_date is None, match.scheduled_date or date.max),
        (match.scheduled_time is None, match.scheduled_time or time.max),
        (match.match_number is None, match.match_number or 0),
        match.id,
    )


@router.get("/tournaments/{tournament_id}/matches", response_model=List[MatchResponse])
def list_matches(tournament_id: int, session: Session = Depends(get_session)):
    if not session.get(Tournament, tournament_id):
        raise HTTPException(status_code=404, detail="Tournament not found")

    matches = session.exec(select(Match).where(Match.tournament_id == tournament_id)).all()
    # Sort in Python so nulls land last on every backend
    return [MatchResponse.model_validate(m) for m in sorted(matches, key=schedule_order_key)]


@router.post("/tournaments/{tournament_id}/matches", response_model=MatchBulkCreateResponse, status_code=201)
def create_matches(tournament_id: int, request: MatchBulkCreateRequest, session: Session = Depends(get_session)):
    """Create many unplaced matches at once"""
    if not session.get(Tournament, tournament_id):
        raise HTTPException(status_code=404, detail="Tournament not found")

    team_ids = {t for m in request.matches for t in (m.team1_id, m.team2_id) if t is not None}
    require_existing_ids(session, Team, sorted(team_ids), "team")
    for m in request.matches:
        if m.duration is not None and m.duration <= 0:
            raise InvalidInput("duration must be positive")

    try:
        for m in request.matches:
            session.add(
                Match(
                    tournament_id=tournament_id,
                    match_number=m.match_number,
                    round=m.round,
                    pool=m.pool,
                    team1_id=m.team1_id,
                    team2_id=m.team2_id,
                    duration_minutes=m.duration or DEFAULT_MATCH_DURATION_MINUTES,
                    status=m.status or "unscheduled",
                    score1=m.score1,
                    score2=m.score2,
                )
            )
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        raise PersistenceError(f"Failed to create matches: {e}") from e

    return MatchBulkCreateResponse(success=True, created=len(request.matches))


@router.patch("/matches/{match_id}", response_model=MatchResponse)
def update_match(match_id: int, request: MatchUpdate, session: Session = Depends(get_session)):
    """Record a score and/or status change for one match"""
    match = session.get(Match, match_id)
    if not match:
        raise HTTPException(status_code=404, detail="Match not found")

    update_data = request.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        if field == "status" and value is None:
            continue  # status is not nullable
        setattr(match, field, value)

    session.add(match)
    session.commit()
    session.refresh(match)
    return MatchResponse.model_validate(match)



@router.post(
    "/tournaments/{tournament_id}/matches/generate", response_model=MatchGenerateResponse, status_code=201
)
def generate_matches(tournament_id: int, request: MatchGenerateRequest, session: Session = Depends(get_session)):
    """
    Generate and save the fixture list for a tournament.

    Teams default to the tournament's approved teams ordered by name.
    Existing matches block generation unless `replace` is set; placed
    matches are never replaced.
    """
    if not session.get(Tournament, tournament_id):
        raise HTTPException(status_code=404, detail="Tournament not found")

    if request.teams is None:
        approved = session.exec(
            select(Team)
            .where(Team.tournament_id == tournament_id, Team.roster_status == "Approved")
            .order_by(Team.name, Team.id)
        ).all()
        seeds = [SeededTeam(id=t.id) for t in approved]
    else:
        team_ids = [t.id for t in request.teams]
        if len(set(team_ids)) != len(team_ids):
            raise InvalidInput("Each team may only appear once")
        in_tournament = set(
            session.exec(select(Team.id).where(Team.tournament_id == tournament_id, Team.id.in_(team_ids))).all()
        )
        unknown = [tid for tid in team_ids if tid not in in_tournament]
        if unknown:
            raise InvalidInput(f"Teams not found in tournament {tournament_id}: {unknown}")
        seeds = [SeededTeam(id=t.id, seed_position=t.seed_position) for t in request.teams]

    fixtures = generate_fixtures(request.format, seeds, request.pools)

    existing = session.exec(select(Match).where(Match.tournament_id == tournament_id)).all()
    if existing and not request.replace:
        raise HTTPException(status_code=409, detail="Tournament already has matches")
    if any(m.field_id is not None or m.scheduled_date is not None for m in existing):
        raise HTTPException(status_code=409, detail="Tournament has placed matches; clear the schedule first")

    try:
        for m in existing:
            session.delete(m)
        created = [
            Match(
                tournament_id=tournament_id,
                match_number=f.match_number,
                round=f.round,
                pool=f.pool,
                team1_id=f.team1_id,
                team2_id=f.team2_id,
            )
            for f in fixtures
        ]
        session.add_all(created)
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        raise PersistenceError(f"Failed to save generated matches: {e}") from e

    for m in created:
        session.refresh(m)
    logger.info("Generated %d %s matches for tournament %s", len(created), request.format, tournament_id)
    return MatchGenerateResponse(
        success=True,
        format=request.format,
        total_matches=len(created),
        matches=[MatchResponse.model_validate(m) for m in created],
    )
