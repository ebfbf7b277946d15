"""
Coaching Session API Routes
Sessions within a program, session coach assignment and attendance.
"""

import datetime as dt
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import field_validator
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from league_admin.database import get_session
from league_admin.errors import InvalidInput, PersistenceError
from league_admin.models.attendance import ATTENDANCE_STATUSES, Attendance
from league_admin.models.coach import Coach
from league_admin.models.membership import SessionCoach
from league_admin.models.player import Player
from league_admin.models.program import Program
from league_admin.models.training_session import TrainingSession
from league_admin.services.membership_reconciler import reconcile_membership, session_coach_store
from league_admin.utils.api_models import ApiModel
from league_admin.utils.membership import ReconcileResponse, require_existing_ids, to_reconcile_response

router = APIRouter()


class SessionCreate(ApiModel):
    program_id: int
    date: dt.date
    location: str
    type: Optional[str] = None

    @field_validator("location")
    @classmethod
    def validate_location(cls, v):
        if not v or not v.strip():
            raise ValueError("Missing required fields")
        return v.strip()


class SessionResponse(ApiModel):
    id: int
    program_id: int
    date: dt.date
    location: str
    type: Optional[str] = None


class AssignSessionCoachesRequest(ApiModel):
    session_id: Optional[int] = None
    coach_ids: Optional[List[int]] = None


class AttendanceRecord(ApiModel):
    player_id: int
    status: str

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        if v not in ATTENDANCE_STATUSES:
            raise ValueError(f"status must be one of {ATTENDANCE_STATUSES}")
        return v


class AttendanceRequest(ApiModel):
    attendance_data: List[AttendanceRecord]


def _require_session(session: Session, session_id: Optional[int]) -> TrainingSession:
    if not session_id:
        raise InvalidInput("sessionId is required")
    training_session = session.get(TrainingSession, session_id)
    if not training_session:
        raise HTTPException(status_code=404, detail="Session not found")
    return training_session


# ============================================================================
# Session Endpoints
# ============================================================================


@router.get("/coaching/sessions", response_model=List[SessionResponse])
def list_sessions(
    program_id: Optional[int] = Query(None, alias="programId"),
    session: Session = Depends(get_session),
):
    """Sessions of a program, most recent first"""
    if not program_id:
        raise HTTPException(status_code=400, detail="Missing programId query parameter")

    sessions = session.exec(
        select(TrainingSession)
        .where(TrainingSession.program_id == program_id)
        .order_by(TrainingSession.date.desc(), TrainingSession.id.desc())
    ).all()
    return [SessionResponse.model_validate(s) for s in sessions]


@router.post("/coaching/sessions", response_model=SessionResponse, status_code=201)
def create_session(request: SessionCreate, session: Session = Depends(get_session)):
    if not session.get(Program, request.program_id):
        raise HTTPException(status_code=404, detail="Program not found")

    training_session = TrainingSession(**request.model_dump())
    session.add(training_session)
    session.commit()
    session.refresh(training_session)
    return SessionResponse.model_validate(training_session)


@router.delete("/coaching/sessions/{session_id}")
def delete_session(session_id: int, session: Session = Depends(get_session)):
    """Delete a session along with its coach links and attendance"""
    training_session = _require_session(session, session_id)

    try:
        for model in (SessionCoach, Attendance):
            for row in session.exec(select(model).where(model.session_id == session_id)).all():
                session.delete(row)
        session.delete(training_session)
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        raise PersistenceError(f"Failed to delete session: {e}") from e

    return {"message": "Session deleted successfully"}


# ============================================================================
# Session Coaches
# ============================================================================


@router.post("/coaching/sessions/assign-coaches", response_model=ReconcileResponse)
def assign_session_coaches(request: AssignSessionCoachesRequest, session: Session = Depends(get_session)):
    """Make the session's coaches exactly `coachIds` (stale assignments removed)"""
    if request.session_id is None or request.coach_ids is None:
        raise InvalidInput("sessionId and coachIds are required")
    _require_session(session, request.session_id)
    require_existing_ids(session, Coach, request.coach_ids, "coach")

    result = reconcile_membership(session_coach_store(session), request.session_id, request.coach_ids)
    return to_reconcile_response(result)


# ============================================================================
# Attendance
# ============================================================================


@router.get("/coaching/sessions/{session_id}/attendance", response_model=List[AttendanceRecord])
def get_attendance(session_id: int, session: Session = Depends(get_session)):
    _require_session(session, session_id)
    rows = session.exec(
        select(Attendance).where(Attendance.session_id == session_id).order_by(Attendance.id)
    ).all()
    return [AttendanceRecord(player_id=r.player_id, status=r.status) for r in rows]


@router.post("/coaching/sessions/{session_id}/attendance")
def save_attendance(session_id: int, request: AttendanceRequest, session: Session = Depends(get_session)):
    """Upsert one attendance row per player; later duplicates in the payload win"""
    _require_session(session, session_id)
    require_existing_ids(session, Player, [r.player_id for r in request.attendance_data], "player")

    latest = {r.player_id: r.status for r in request.attendance_data}
    try:
        existing = {
            row.player_id: row
            for row in session.exec(select(Attendance).where(Attendance.session_id == session_id)).all()
        }
        for player_id, status in latest.items():
            row = existing.get(player_id)
            if row:
                row.status = status
            else:
                row = Attendance(session_id=session_id, player_id=player_id, status=status)
            session.add(row)
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        raise PersistenceError(f"Failed to save attendance: {e}") from e

    return {"message": "Attendance saved successfully", "saved": len(latest)}
