from datetime import datetime
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import field_validator
from sqlalchemy import func, or_
from sqlmodel import Session, select

from league_admin.database import get_session
from league_admin.models.membership import TeamMember
from league_admin.models.player import Player
from league_admin.models.team import Team
from league_admin.models.tournament import Tournament
from league_admin.utils.api_models import ApiModel

router = APIRouter()

DEFAULT_SEARCH_LIMIT = 20
MAX_SEARCH_LIMIT = 50


class PlayerCreate(ApiModel):
    full_name: str
    email: Optional[str] = None
    contact_number: Optional[str] = None

    @field_validator("full_name")
    @classmethod
    def validate_full_name(cls, v):
        if not v or not v.strip():
            raise ValueError("fullName is required")
        return v.strip()


class PlayerResponse(ApiModel):
    id: int
    full_name: str
    email: Optional[str] = None
    contact_number: Optional[str] = None
    created_at: datetime


class Affiliation(ApiModel):
    team_name: str
    tournament_name: str


class PlayerSearchResult(ApiModel):
    id: int
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    affiliations: List[Affiliation]


def _affiliations_by_player(session: Session, player_ids: List[int]) -> Dict[int, List[Affiliation]]:
    rows = session.exec(
        select(TeamMember.player_id, Team.name, Tournament.name)
        .join(Team, Team.id == TeamMember.team_id)
        .join(Tournament, Tournament.id == Team.tournament_id)
        .where(TeamMember.player_id.in_(player_ids))
        .order_by(TeamMember.id)
    ).all()
    by_player: Dict[int, List[Affiliation]] = {}
    for player_id, team_name, tournament_name in rows:
        by_player.setdefault(player_id, []).append(
            Affiliation(team_name=team_name or "", tournament_name=tournament_name or "")
        )
    return by_player


@router.get("/players", response_model=List[PlayerSearchResult])
def search_players(
    search: str = Query("", description="Matches name, email or contact number"),
    limit: int = Query(DEFAULT_SEARCH_LIMIT, ge=1),
    session: Session = Depends(get_session),
):
    """
    Player search for roster building.

    Without a search term returns the most recently created players;
    with one, matches are ordered by name. Limit is capped at 50.
    """
    term = search.strip()
    limit = min(limit, MAX_SEARCH_LIMIT)

    query = select(Player)
    if term:
        pattern = f"%{term.lower()}%"
        query = query.where(
            or_(
                func.lower(Player.full_name).like(pattern),
                func.lower(Player.email).like(pattern),
                func.lower(Player.contact_number).like(pattern),
            )
        ).order_by(Player.full_name, Player.id)
    else:
        query = query.order_by(Player.created_at.desc(), Player.id.desc())

    players = session.exec(query.limit(limit)).all()
    if not players:
        return []

    affiliations = _affiliations_by_player(session, [p.id for p in players])
    return [
        PlayerSearchResult(
            id=p.id,
            name=p.full_name,
            email=p.email,
            phone=p.contact_number,
            affiliations=affiliations.get(p.id, []),
        )
        for p in players
    ]


@router.post("/players", response_model=PlayerResponse, status_code=201)
def create_player(request: PlayerCreate, session: Session = Depends(get_session)):
    player = Player(**request.model_dump())
    session.add(player)
    session.commit()
    session.refresh(player)
    return PlayerResponse.model_validate(player)
