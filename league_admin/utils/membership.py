"""
Helpers shared by the routes that reconcile memberships
(program coaches, session coaches, program rosters, team rosters).
"""
from typing import List, Sequence, Type

from sqlmodel import Session, SQLModel, select

from league_admin.errors import InvalidInput
from league_admin.services.membership_reconciler import ReconcileResult
from league_admin.utils.api_models import ApiModel


class ReconcileResponse(ApiModel):
    success: bool
    owner_id: int
    added: List[int]
    removed: List[int]
    added_count: int
    removed_count: int


def to_reconcile_response(result: ReconcileResult) -> ReconcileResponse:
    return ReconcileResponse(
        success=True,
        owner_id=result.owner_id,
        added=list(result.added),
        removed=list(result.removed),
        added_count=result.added_count,
        removed_count=result.removed_count,
    )


def require_existing_ids(session: Session, model: Type[SQLModel], ids: Sequence[int], label: str) -> None:
    """Raise InvalidInput naming any ids with no `model` row"""
    if not ids:
        return
    wanted = set(ids)
    found = set(session.exec(select(model.id).where(model.id.in_(wanted))).all())
    missing = sorted(wanted - found)
    if missing:
        raise InvalidInput(f"Unknown {label} ids: {missing}")
