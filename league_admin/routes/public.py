"""
Public API endpoints.

No auth required. Serves the published match schedule to the public
schedule page with optional date/field/round/team filters, and takes
team roster submissions for admin review.
"""
import logging
from datetime import datetime
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlmodel import Session, select

from league_admin.database import get_session
from league_admin.models.field import PlayingField
from league_admin.models.match import Match
from league_admin.models.membership import TeamMember
from league_admin.models.team import Team
from league_admin.models.tournament import Tournament
from league_admin.utils.api_models import ApiModel
from league_admin.utils.times import add_minutes, format_clock

logger = logging.getLogger(__name__)

router = APIRouter()

TBD = "TBD"


# ── Response models ──────────────────────────────────────────────────────


class PublicTournament(ApiModel):
    id: int
    name: str
    start_date: str
    end_date: str
    venue: Optional[str] = None
    status: str


class PublicScore(ApiModel):
    team1_score: Optional[int] = None
    team2_score: Optional[int] = None


class PublicMatch(ApiModel):
    id: int
    match_number: Optional[int] = None
    round: Optional[int] = None
    pool: Optional[int] = None
    team1: str
    team2: str
    scheduled_date: str
    scheduled_time: str
    end_time: str
    field: str
    field_location: Optional[str] = None
    duration: int
    status: str
    score: Optional[PublicScore] = None


class ScheduleFilters(ApiModel):
    dates: List[str]
    rounds: List[int]
    fields: List[str]
    teams: List[str]


class PublicScheduleResponse(ApiModel):
    tournament: PublicTournament
    matches: List[PublicMatch]
    matches_by_date: Dict[str, List[PublicMatch]]
    filters: ScheduleFilters
    total_matches: int


class RosterSubmitRequest(ApiModel):
    team_id: Optional[int] = None
    tournament_id: Optional[int] = None


class SubmittedRoster(ApiModel):
    team_id: int
    tournament_id: int
    player_ids: List[int]
    status: str
    submitted_at: datetime


class RosterSubmitResponse(ApiModel):
    message: str
    roster: SubmittedRoster


# ── Helpers ──────────────────────────────────────────────────────────────


def _to_public_match(match: Match, teams: Dict[int, Team], fields: Dict[int, PlayingField]) -> PublicMatch:
    field = fields.get(match.field_id)
    team1 = teams.get(match.team1_id)
    team2 = teams.get(match.team2_id)
    score = None
    if match.score1 is not None or match.score2 is not None:
        score = PublicScore(team1_score=match.score1, team2_score=match.score2)
    return PublicMatch(
        id=match.id,
        match_number=match.match_number,
        round=match.round,
        pool=match.pool,
        team1=team1.name if team1 else TBD,
        team2=team2.name if team2 else TBD,
        scheduled_date=match.scheduled_date.isoformat(),
        scheduled_time=format_clock(match.scheduled_time),
        end_time=format_clock(add_minutes(match.scheduled_time, match.duration_minutes)),
        field=field.name if field else str(match.field_id),
        field_location=field.location if field else None,
        duration=match.duration_minutes,
        status=match.status,
        score=score,
    )


def build_filters(matches: List[PublicMatch]) -> ScheduleFilters:
    """Distinct filter values across the whole published schedule"""
    return ScheduleFilters(
        dates=sorted({m.scheduled_date for m in matches}),
        rounds=sorted({m.round for m in matches if m.round is not None}),
        fields=sorted({m.field for m in matches}),
        teams=sorted({name for m in matches for name in (m.team1, m.team2) if name != TBD}),
    )


def apply_filters(
    matches: List[PublicMatch],
    date: Optional[str] = None,
    field: Optional[str] = None,
    round: Optional[int] = None,
    team: Optional[str] = None,
) -> List[PublicMatch]:
    if date:
        matches = [m for m in matches if m.scheduled_date == date]
    if field:
        matches = [m for m in matches if m.field == field]
    if round is not None:
        matches = [m for m in matches if m.round == round]
    if team:
        needle = team.lower()
        matches = [m for m in matches if needle in m.team1.lower() or needle in m.team2.lower()]
    return matches


# ── Endpoints ────────────────────────────────────────────────────────────


@router.get("/public/schedule", response_model=PublicScheduleResponse)
def get_public_schedule(
    tournament_id: Optional[int] = Query(None, alias="tournamentId"),
    date: Optional[str] = Query(None),
    field: Optional[str] = Query(None),
    round: Optional[int] = Query(None),
    team: Optional[str] = Query(None),
    session: Session = Depends(get_session),
):
    """
    Published schedule for a tournament.

    Only placed matches appear. Filter lists (dates, rounds, fields, teams)
    describe the full published schedule, not the filtered subset.
    """
    if not tournament_id:
        raise HTTPException(status_code=400, detail="Tournament ID is required")

    tournament = session.get(Tournament, tournament_id)
    if not tournament or tournament.status != "Published":
        raise HTTPException(status_code=404, detail="Schedule not yet published")

    placed = session.exec(
        select(Match).where(
            Match.tournament_id == tournament_id,
            Match.scheduled_date.is_not(None),
            Match.scheduled_time.is_not(None),
        )
    ).all()
    teams = {t.id: t for t in session.exec(select(Team).where(Team.tournament_id == tournament_id)).all()}
    fields = {
        f.id: f for f in session.exec(select(PlayingField).where(PlayingField.tournament_id == tournament_id)).all()
    }

    ordered = sorted(placed, key=lambda m: (m.scheduled_date, m.scheduled_time, m.match_number or 0, m.id))
    all_matches = [_to_public_match(m, teams, fields) for m in ordered]
    filtered = apply_filters(all_matches, date=date, field=field, round=round, team=team)

    matches_by_date: Dict[str, List[PublicMatch]] = {}
    for m in filtered:
        matches_by_date.setdefault(m.scheduled_date, []).append(m)

    return PublicScheduleResponse(
        tournament=PublicTournament(
            id=tournament.id,
            name=tournament.name,
            start_date=tournament.start_date.isoformat(),
            end_date=tournament.end_date.isoformat(),
            venue=tournament.venue,
            status=tournament.status,
        ),
        matches=filtered,
        matches_by_date=matches_by_date,
        filters=build_filters(all_matches),
        total_matches=len(filtered),
    )


@router.post("/public/rosters/submit", response_model=RosterSubmitResponse)
def submit_roster(request: RosterSubmitRequest, session: Session = Depends(get_session)):
    """
    Submit a team's current roster for review.

    Re-submitting replaces the previous submission and resets the roster
    status to "Submitted".
    """
    if not request.team_id or not request.tournament_id:
        raise HTTPException(status_code=400, detail="Team ID and Tournament ID are required")

    team = session.get(Team, request.team_id)
    if not team or team.tournament_id != request.tournament_id:
        raise HTTPException(status_code=404, detail="Team not found in tournament")

    player_ids = list(
        session.exec(select(TeamMember.player_id).where(TeamMember.team_id == team.id).order_by(TeamMember.id)).all()
    )
    if not player_ids:
        raise HTTPException(status_code=400, detail="No team members found")

    team.roster_status = "Submitted"
    team.roster_submitted_at = datetime.utcnow()
    team.updated_at = team.roster_submitted_at
    session.add(team)
    session.commit()
    session.refresh(team)
    logger.info("Roster submitted for team %s (%d players)", team.id, len(player_ids))

    return RosterSubmitResponse(
        message="Roster submitted successfully",
        roster=SubmittedRoster(
            team_id=team.id,
            tournament_id=team.tournament_id,
            player_ids=player_ids,
            status=team.roster_status,
            submitted_at=team.roster_submitted_at,
        ),
    )
