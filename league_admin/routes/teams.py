"""
Team Management API Routes
Team registration, roster approval and team roster (player) sync.
"""

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import field_validator
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from league_admin.database import get_session
from league_admin.models.membership import TeamMember
from league_admin.models.player import Player
from league_admin.models.team import ROSTER_STATUSES, Team
from league_admin.models.tournament import Tournament
from league_admin.services.membership_reconciler import reconcile_membership, team_member_store
from league_admin.utils.api_models import ApiModel
from league_admin.utils.membership import ReconcileResponse, require_existing_ids, to_reconcile_response

router = APIRouter()


# ============================================================================
# Request/Response Models
# ============================================================================


class TeamCreateRequest(ApiModel):
    name: str
    contact_email: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if not v or not v.strip():
            raise ValueError("Team name is required")
        return v.strip()


class TeamStatusRequest(ApiModel):
    status: str

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        if v not in ROSTER_STATUSES:
            raise ValueError(f"status must be one of {ROSTER_STATUSES}")
        return v


class TeamResponse(ApiModel):
    id: int
    tournament_id: int
    name: str
    contact_email: Optional[str] = None
    roster_status: str
    roster_submitted_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class TeamMembersRequest(ApiModel):
    player_ids: Optional[List[int]] = None


class TeamMemberResponse(ApiModel):
    id: int
    name: str


# ============================================================================
# Team Endpoints
# ============================================================================


@router.get("/tournaments/{tournament_id}/teams", response_model=List[TeamResponse])
def list_teams(
    tournament_id: int,
    status: Optional[str] = Query(None, description="Filter by roster status"),
    session: Session = Depends(get_session),
):
    """Teams of a tournament ordered by name, optionally filtered by roster status"""
    if not session.get(Tournament, tournament_id):
        raise HTTPException(status_code=404, detail="Tournament not found")

    query = select(Team).where(Team.tournament_id == tournament_id)
    if status:
        query = query.where(Team.roster_status == status)
    teams = session.exec(query.order_by(Team.name, Team.id)).all()
    return [TeamResponse.model_validate(t) for t in teams]


@router.post("/tournaments/{tournament_id}/teams", response_model=TeamResponse, status_code=201)
def create_team(tournament_id: int, request: TeamCreateRequest, session: Session = Depends(get_session)):
    """
    Register a team. New teams start with roster status "Pending".

    Constraints:
    - (tournament_id, name) must be unique
    """
    if not session.get(Tournament, tournament_id):
        raise HTTPException(status_code=404, detail="Tournament not found")

    team = Team(tournament_id=tournament_id, name=request.name, contact_email=request.contact_email)
    try:
        session.add(team)
        session.commit()
        session.refresh(team)
    except IntegrityError:
        session.rollback()
        raise HTTPException(
            status_code=409, detail=f"Team with name '{request.name}' already exists for this tournament"
        )
    return TeamResponse.model_validate(team)


@router.post("/teams/{team_id}/status", response_model=TeamResponse)
def update_team_status(team_id: int, request: TeamStatusRequest, session: Session = Depends(get_session)):
    """Approve or reject a team's roster"""
    team = session.get(Team, team_id)
    if not team:
        raise HTTPException(status_code=404, detail="Team not found")

    team.roster_status = request.status
    team.updated_at = datetime.utcnow()
    session.add(team)
    session.commit()
    session.refresh(team)
    return TeamResponse.model_validate(team)


# ============================================================================
# Team Roster Endpoints
# ============================================================================


@router.get("/teams/{team_id}/members", response_model=List[TeamMemberResponse])
def get_team_members(team_id: int, session: Session = Depends(get_session)):
    if not session.get(Team, team_id):
        raise HTTPException(status_code=404, detail="Team not found")

    rows = session.exec(
        select(Player)
        .join(TeamMember, TeamMember.player_id == Player.id)
        .where(TeamMember.team_id == team_id)
        .order_by(Player.full_name)
    ).all()
    return [TeamMemberResponse(id=p.id, name=p.full_name) for p in rows]


@router.put("/teams/{team_id}/members", response_model=ReconcileResponse)
def set_team_members(team_id: int, request: TeamMembersRequest, session: Session = Depends(get_session)):
    """Replace the team roster with exactly `playerIds` (duplicates ignored)"""
    if not session.get(Team, team_id):
        raise HTTPException(status_code=404, detail="Team not found")

    require_existing_ids(session, Player, request.player_ids or [], "player")
    result = reconcile_membership(team_member_store(session), team_id, request.player_ids)
    return to_reconcile_response(result)
