"""
Roster / Assignment Reconciler

Brings the persisted membership of one owner (program, session, team) in
line with a desired member list:

    to_remove = persisted - desired
    to_add    = desired - persisted

Removals are applied (and committed) before additions. Each batch is its
own transaction; a failure in the second batch does not undo the first.
The caller must treat any PersistenceError as "not applied".

Rows are keyed uniquely by (owner, member), so a second call with the same
desired list finds nothing to add or remove.
"""

import logging
from dataclasses import dataclass
from typing import Any, Hashable, List, Sequence, Type

from sqlalchemy import delete as sa_delete
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, SQLModel, select

from league_admin.errors import InvalidInput, PersistenceError
from league_admin.models.membership import ProgramCoach, ProgramPlayer, SessionCoach, TeamMember

logger = logging.getLogger(__name__)

# INSERT ... ON CONFLICT DO NOTHING builders, keyed by SQLAlchemy dialect name
INSERT_BY_DIALECT = {"sqlite": sqlite_insert, "postgresql": postgresql_insert}


class MembershipStore:
    """
    Persistence collaborator for one (owner, member) link table.

    Supports lookup by owner, one DELETE for a batch of pairs and one
    INSERT ... ON CONFLICT DO NOTHING for a batch of pairs (SQLite and
    PostgreSQL). Every write commits; SQLAlchemy failures are rolled back
    and re-raised as PersistenceError.
    """

    def __init__(self, session: Session, link_model: Type[SQLModel], owner_column: str, member_column: str):
        self.session = session
        self.link_model = link_model
        self.owner_column = owner_column
        self.member_column = member_column

    @property
    def table_name(self) -> str:
        return self.link_model.__tablename__

    def _owner_attr(self):
        return getattr(self.link_model, self.owner_column)

    def _member_attr(self):
        return getattr(self.link_model, self.member_column)

    def members_of(self, owner_id: Hashable) -> List[Hashable]:
        """Current member ids of `owner_id`, in link creation order"""
        query = (
            select(self._member_attr())
            .where(self._owner_attr() == owner_id)
            .order_by(self.link_model.id)
        )
        try:
            return list(self.session.exec(query).all())
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to read {self.table_name} for owner {owner_id}: {e}") from e

    def delete_pairs(self, owner_id: Hashable, member_ids: Sequence[Hashable]) -> None:
        if not member_ids:
            return
        statement = sa_delete(self.link_model).where(
            self._owner_attr() == owner_id, self._member_attr().in_(list(member_ids))
        )
        try:
            self.session.execute(statement)
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.exception("Delete from %s failed for owner %s", self.table_name, owner_id)
            raise PersistenceError(f"Failed to remove members from {self.table_name}: {e}") from e

    def upsert_pairs(self, owner_id: Hashable, member_ids: Sequence[Hashable]) -> None:
        if not member_ids:
            return
        dialect = self.session.get_bind().dialect.name
        insert = INSERT_BY_DIALECT.get(dialect)
        if insert is None:
            raise PersistenceError(f"Upsert into {self.table_name} is not supported on {dialect}")

        rows = [{self.owner_column: owner_id, self.member_column: m} for m in dict.fromkeys(member_ids)]
        statement = (
            insert(self.link_model.__table__)
            .values(rows)
            .on_conflict_do_nothing(index_elements=[self.owner_column, self.member_column])
        )
        try:
            self.session.execute(statement)
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.exception("Upsert into %s failed for owner %s", self.table_name, owner_id)
            raise PersistenceError(f"Failed to add members to {self.table_name}: {e}") from e


def program_coach_store(session: Session) -> MembershipStore:
    return MembershipStore(session, ProgramCoach, "program_id", "coach_id")


def session_coach_store(session: Session) -> MembershipStore:
    return MembershipStore(session, SessionCoach, "session_id", "coach_id")


def program_player_store(session: Session) -> MembershipStore:
    return MembershipStore(session, ProgramPlayer, "program_id", "player_id")


def team_member_store(session: Session) -> MembershipStore:
    return MembershipStore(session, TeamMember, "team_id", "player_id")


@dataclass(frozen=True)
class MembershipDelta:
    to_add: List[Hashable]
    to_remove: List[Hashable]

    @property
    def is_empty(self) -> bool:
        return not self.to_add and not self.to_remove


@dataclass(frozen=True)
class ReconcileResult:
    owner_id: Hashable
    added: List[Hashable]
    removed: List[Hashable]

    @property
    def added_count(self) -> int:
        return len(self.added)

    @property
    def removed_count(self) -> int:
        return len(self.removed)


def dedupe(member_ids: Sequence[Hashable]) -> List[Hashable]:
    """Drop repeated ids, keeping first occurrence order"""
    return list(dict.fromkeys(member_ids))


def compute_delta(current: Sequence[Hashable], desired: Sequence[Hashable]) -> MembershipDelta:
    """Pure set difference; both outputs follow their source's order"""
    desired_ids = dedupe(desired)
    current_set = set(current)
    desired_set = set(desired_ids)
    return MembershipDelta(
        to_add=[m for m in desired_ids if m not in current_set],
        to_remove=[m for m in dedupe(current) if m not in desired_set],
    )


def validate_reconcile_input(owner_id: Any, desired_member_ids: Any) -> None:
    if owner_id is None or (isinstance(owner_id, str) and not owner_id.strip()):
        raise InvalidInput("owner id is required")
    if not isinstance(desired_member_ids, (list, tuple)):
        raise InvalidInput("member ids must be a list")


def reconcile_membership(
    store: MembershipStore, owner_id: Hashable, desired_member_ids: Sequence[Hashable]
) -> ReconcileResult:
    """
    Make the persisted members of `owner_id` exactly dedupe(desired_member_ids).

    Raises:
        InvalidInput: owner_id missing or desired_member_ids not a list
        PersistenceError: store read/delete/upsert failed (remaining steps skipped)
    """
    validate_reconcile_input(owner_id, desired_member_ids)

    current = store.members_of(owner_id)
    delta = compute_delta(current, desired_member_ids)

    if delta.is_empty:
        return ReconcileResult(owner_id=owner_id, added=[], removed=[])

    store.delete_pairs(owner_id, delta.to_remove)
    store.upsert_pairs(owner_id, delta.to_add)

    logger.info(
        "Reconciled %s for owner %s: +%d -%d",
        store.table_name,
        owner_id,
        len(delta.to_add),
        len(delta.to_remove),
    )
    return ReconcileResult(owner_id=owner_id, added=delta.to_add, removed=delta.to_remove)
