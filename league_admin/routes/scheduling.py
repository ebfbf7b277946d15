"""
Schedule Assignment API Routes

POST /scheduling/check   - dry run: report conflicts, persist nothing
POST /scheduling/assign  - persist a conflict-free batch and publish
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from league_admin.database import get_session
from league_admin.models.tournament import Tournament
from league_admin.services.conflict_detector import AssignmentCandidate, ConflictRecord
from league_admin.services.schedule_assignment import (
    apply_assignments,
    build_candidates,
    check_batch,
    find_incomplete,
)
from league_admin.utils.api_models import ApiModel

router = APIRouter()


# ============================================================================
# Request/Response Models
# ============================================================================


class MatchPlacement(ApiModel):
    id: int
    scheduled_date: Optional[str] = None
    scheduled_time: Optional[str] = None
    field_id: Optional[int] = None
    duration: Optional[int] = None


class AssignRequest(ApiModel):
    tournament_id: Optional[int] = None
    matches: Optional[List[MatchPlacement]] = None


class ConflictResponse(ApiModel):
    match_ids: List[int]
    reason: str


class CheckResponse(ApiModel):
    conflicts: List[ConflictResponse]
    has_conflicts: bool


class AssignResponse(ApiModel):
    success: bool
    message: str
    assigned_matches: int
    tournament_id: int


def _conflict_payload(conflicts: List[ConflictRecord]) -> List[dict]:
    return [
        ConflictResponse(match_ids=list(c.match_ids), reason=c.reason).model_dump(by_alias=True)
        for c in conflicts
    ]


def _prepare_batch(request: AssignRequest, session: Session):
    """Shared validation for check/assign. Returns (tournament, candidates)."""
    if not request.tournament_id:
        raise HTTPException(status_code=400, detail="Tournament ID is required")

    if not request.matches:
        raise HTTPException(status_code=400, detail="No matches to assign")

    incomplete = find_incomplete(request.matches)
    if incomplete:
        raise HTTPException(
            status_code=400,
            detail={
                "error": "All matches must have date, time, and field assigned",
                "incompleteCount": len(incomplete),
            },
        )

    tournament = session.get(Tournament, request.tournament_id)
    if not tournament:
        raise HTTPException(status_code=404, detail="Tournament not found")

    candidates: List[AssignmentCandidate] = build_candidates(request.matches)
    return tournament, candidates


# ============================================================================
# Endpoints
# ============================================================================


@router.post("/scheduling/check", response_model=CheckResponse)
def check_schedule(request: AssignRequest, session: Session = Depends(get_session)):
    """Report slot collisions for a proposed batch without saving it"""
    tournament, candidates = _prepare_batch(request, session)
    conflicts = check_batch(session, tournament.id, candidates)
    return CheckResponse(
        conflicts=[ConflictResponse(match_ids=list(c.match_ids), reason=c.reason) for c in conflicts],
        has_conflicts=bool(conflicts),
    )


@router.post("/scheduling/assign", response_model=AssignResponse)
def assign_schedule(request: AssignRequest, session: Session = Depends(get_session)):
    """
    Place matches on fields/time slots and publish the schedule.

    Returns:
        400 for missing tournament/matches, incomplete or malformed placements
        404 if the tournament does not exist
        409 with the conflict list if any two matches share field/date/time
    """
    tournament, candidates = _prepare_batch(request, session)

    conflicts = check_batch(session, tournament.id, candidates)
    if conflicts:
        raise HTTPException(
            status_code=409,
            detail={"error": "Scheduling conflicts detected", "conflicts": _conflict_payload(conflicts)},
        )

    assigned = apply_assignments(session, tournament, candidates)
    return AssignResponse(
        success=True,
        message="Schedule published successfully",
        assigned_matches=assigned,
        tournament_id=tournament.id,
    )
