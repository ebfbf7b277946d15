"""
Coaching Program API Routes
Programs, program coach assignment and program player rosters.
"""

from datetime import date, datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import field_validator
from sqlmodel import Session, select

from league_admin.database import get_session
from league_admin.errors import InvalidInput
from league_admin.models.coach import Coach
from league_admin.models.membership import ProgramCoach, ProgramPlayer
from league_admin.models.player import Player
from league_admin.models.program import Program
from league_admin.services.membership_reconciler import (
    program_coach_store,
    program_player_store,
    reconcile_membership,
)
from league_admin.utils.api_models import ApiModel
from league_admin.utils.membership import ReconcileResponse, require_existing_ids, to_reconcile_response

router = APIRouter()

ROSTER_ACTIONS = {"add": "added", "remove": "removed"}


# ============================================================================
# Request/Response Models
# ============================================================================


class ProgramCreate(ApiModel):
    name: str
    start_date: date
    is_active: Optional[bool] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if not v or not v.strip():
            raise ValueError("Missing required fields: name and startDate")
        return v.strip()


class ProgramResponse(ApiModel):
    id: int
    name: str
    start_date: date
    is_active: bool
    created_at: datetime


class AssignProgramCoachesRequest(ApiModel):
    program_id: Optional[int] = None
    coach_ids: Optional[List[int]] = None


class CoachSummary(ApiModel):
    id: int
    full_name: str
    email: str


class RosterEntry(ApiModel):
    id: str
    name: str


class RosterChangeRequest(ApiModel):
    program_id: Optional[int] = None
    player_id: Optional[int] = None
    action: Optional[str] = None


class RosterSetRequest(ApiModel):
    program_id: Optional[int] = None
    player_ids: Optional[List[int]] = None


def _require_program(session: Session, program_id: Optional[int]) -> Program:
    if not program_id:
        raise InvalidInput("programId is required")
    program = session.get(Program, program_id)
    if not program:
        raise HTTPException(status_code=404, detail="Program not found")
    return program


# ============================================================================
# Program Endpoints
# ============================================================================


@router.get("/coaching/programs", response_model=List[ProgramResponse])
def list_programs(session: Session = Depends(get_session)):
    programs = session.exec(select(Program).order_by(Program.start_date.desc(), Program.id)).all()
    return [ProgramResponse.model_validate(p) for p in programs]


@router.post("/coaching/programs", response_model=ProgramResponse, status_code=201)
def create_program(request: ProgramCreate, session: Session = Depends(get_session)):
    program = Program(
        name=request.name,
        start_date=request.start_date,
        is_active=True if request.is_active is None else request.is_active,
    )
    session.add(program)
    session.commit()
    session.refresh(program)
    return ProgramResponse.model_validate(program)


# ============================================================================
# Program Coaches
# ============================================================================


@router.post("/coaching/programs/assign-coaches", response_model=ReconcileResponse)
def assign_program_coaches(request: AssignProgramCoachesRequest, session: Session = Depends(get_session)):
    """Make the program's coaches exactly `coachIds` (stale assignments removed)"""
    if request.program_id is None or request.coach_ids is None:
        raise InvalidInput("programId and coachIds are required")
    _require_program(session, request.program_id)
    require_existing_ids(session, Coach, request.coach_ids, "coach")

    result = reconcile_membership(program_coach_store(session), request.program_id, request.coach_ids)
    return to_reconcile_response(result)


@router.get("/coaching/programs/{program_id}/coaches", response_model=List[CoachSummary])
def list_program_coaches(program_id: int, session: Session = Depends(get_session)):
    _require_program(session, program_id)
    coaches = session.exec(
        select(Coach)
        .join(ProgramCoach, ProgramCoach.coach_id == Coach.id)
        .where(ProgramCoach.program_id == program_id)
        .order_by(Coach.full_name)
    ).all()
    return [CoachSummary.model_validate(c) for c in coaches]


# ============================================================================
# Program Roster
# ============================================================================


@router.get("/coaching/roster", response_model=List[RosterEntry])
def get_roster(
    program_id: Optional[int] = Query(None, alias="programId"),
    session: Session = Depends(get_session),
):
    """Players on a program's roster, ordered by name"""
    if not program_id:
        raise HTTPException(status_code=400, detail="Missing programId")

    players = session.exec(
        select(Player)
        .join(ProgramPlayer, ProgramPlayer.player_id == Player.id)
        .where(ProgramPlayer.program_id == program_id)
        .order_by(Player.full_name)
    ).all()
    return [RosterEntry(id=str(p.id), name=p.full_name) for p in players]


@router.post("/coaching/roster")
def change_roster(request: RosterChangeRequest, session: Session = Depends(get_session)):
    """Add or remove a single player (idempotent either way)"""
    if not request.program_id or not request.player_id or not request.action:
        raise HTTPException(status_code=400, detail="Missing programId, playerId, or action")
    if request.action not in ROSTER_ACTIONS:
        raise HTTPException(status_code=400, detail="Invalid action. Must be 'add' or 'remove'.")

    _require_program(session, request.program_id)
    require_existing_ids(session, Player, [request.player_id], "player")

    store = program_player_store(session)
    if request.action == "add":
        store.upsert_pairs(request.program_id, [request.player_id])
    else:
        store.delete_pairs(request.program_id, [request.player_id])

    return {"message": f"Player {ROSTER_ACTIONS[request.action]} successfully"}


@router.put("/coaching/roster", response_model=ReconcileResponse)
def set_roster(request: RosterSetRequest, session: Session = Depends(get_session)):
    """Replace the program roster with exactly `playerIds`"""
    _require_program(session, request.program_id)
    require_existing_ids(session, Player, request.player_ids or [], "player")

    result = reconcile_membership(program_player_store(session), request.program_id, request.player_ids)
    return to_reconcile_response(result)
