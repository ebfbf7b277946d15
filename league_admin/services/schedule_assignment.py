"""
Schedule Assignment Service

Turns a batch of admin placements (match -> field/date/time) into
AssignmentCandidates, checks them for slot collisions against each other
and against matches already scheduled in the tournament, and persists the
batch when it is clean.

Validation failures raise InvalidInput; database failures raise
PersistenceError. Conflicts are returned, never raised.
"""

import logging
from datetime import datetime
from typing import Any, Hashable, List, Optional, Sequence, Set

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from league_admin.errors import InvalidInput, PersistenceError
from league_admin.models.field import PlayingField
from league_admin.models.match import DEFAULT_MATCH_DURATION_MINUTES, Match
from league_admin.models.tournament import Tournament
from league_admin.services.conflict_detector import AssignmentCandidate, ConflictRecord, detect_conflicts
from league_admin.utils.times import parse_calendar_date, parse_time_of_day

logger = logging.getLogger(__name__)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def find_incomplete(placements: Sequence[Any]) -> List[Any]:
    """Placements missing any of date, time or field"""
    return [
        p
        for p in placements
        if _is_blank(p.scheduled_date) or _is_blank(p.scheduled_time) or _is_blank(p.field_id)
    ]


def build_candidates(placements: Sequence[Any]) -> List[AssignmentCandidate]:
    """
    Parse complete placements into candidates.

    Raises:
        InvalidInput on an unparseable date/time or non-positive duration
    """
    candidates = []
    for p in placements:
        try:
            on_date = parse_calendar_date(p.scheduled_date)
            start = parse_time_of_day(p.scheduled_time)
        except ValueError as e:
            raise InvalidInput(f"Match {p.id}: {e}") from e
        if p.duration is not None and p.duration <= 0:
            raise InvalidInput(f"Match {p.id}: duration must be positive")
        candidates.append(
            AssignmentCandidate(
                match_id=p.id,
                field_id=p.field_id,
                date=on_date,
                start_time=start,
                duration_minutes=p.duration,
            )
        )
    return candidates


def _require_tournament_rows(session: Session, tournament_id: int, candidates: Sequence[AssignmentCandidate]):
    match_ids = [c.match_id for c in candidates]
    if len(set(match_ids)) != len(match_ids):
        raise InvalidInput("Each match may only appear once in a batch")

    matches = session.exec(
        select(Match).where(Match.tournament_id == tournament_id, Match.id.in_(match_ids))
    ).all()
    found = {m.id for m in matches}
    missing = [mid for mid in match_ids if mid not in found]
    if missing:
        raise InvalidInput(f"Matches not found in tournament {tournament_id}: {missing}")

    field_ids = {c.field_id for c in candidates}
    fields = session.exec(
        select(PlayingField).where(PlayingField.tournament_id == tournament_id, PlayingField.id.in_(field_ids))
    ).all()
    unknown_fields = sorted(field_ids - {f.id for f in fields})
    if unknown_fields:
        raise InvalidInput(f"Fields not found in tournament {tournament_id}: {unknown_fields}")

    return {m.id: m for m in matches}


def scheduled_candidates(
    session: Session, tournament_id: int, exclude_match_ids: Set[Hashable]
) -> List[AssignmentCandidate]:
    """Candidates for matches already placed in the tournament, outside the batch"""
    query = (
        select(Match)
        .where(
            Match.tournament_id == tournament_id,
            Match.field_id.is_not(None),
            Match.scheduled_date.is_not(None),
            Match.scheduled_time.is_not(None),
            Match.status != "cancelled",
        )
        .order_by(Match.scheduled_date, Match.scheduled_time, Match.id)
    )
    return [
        AssignmentCandidate(
            match_id=m.id,
            field_id=m.field_id,
            date=m.scheduled_date,
            start_time=m.scheduled_time,
            duration_minutes=m.duration_minutes,
        )
        for m in session.exec(query).all()
        if m.id not in exclude_match_ids
    ]


def check_batch(
    session: Session, tournament_id: int, candidates: Sequence[AssignmentCandidate]
) -> List[ConflictRecord]:
    """
    Conflicts involving at least one batch candidate.

    Batch candidates come first, so conflicts and match ids follow the
    batch order; already-scheduled matches are appended after them.
    """
    _require_tournament_rows(session, tournament_id, candidates)

    batch_ids = {c.match_id for c in candidates}
    pool = list(candidates) + scheduled_candidates(session, tournament_id, batch_ids)
    conflicts = [c for c in detect_conflicts(pool) if batch_ids.intersection(c.match_ids)]

    if conflicts:
        logger.warning(
            "Tournament %s: %d scheduling conflict(s) in batch of %d",
            tournament_id,
            len(conflicts),
            len(candidates),
        )
    return conflicts


def apply_assignments(
    session: Session, tournament: Tournament, candidates: Sequence[AssignmentCandidate]
) -> int:
    """
    Persist a conflict-free batch and publish the tournament.

    Returns:
        Number of matches updated

    Raises:
        PersistenceError if the commit fails (nothing is applied)
    """
    try:
        for candidate in candidates:
            match: Optional[Match] = session.get(Match, candidate.match_id)
            match.field_id = candidate.field_id
            match.scheduled_date = candidate.date
            match.scheduled_time = candidate.start_time
            match.duration_minutes = candidate.duration_minutes or DEFAULT_MATCH_DURATION_MINUTES
            match.status = "scheduled"
            session.add(match)

        tournament.status = "Published"
        tournament.published_at = datetime.utcnow()
        tournament.updated_at = datetime.utcnow()
        session.add(tournament)
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception("Failed to save schedule for tournament %s", tournament.id)
        raise PersistenceError(f"Failed to save schedule assignments: {e}") from e

    logger.info("Published schedule for tournament %s (%d matches)", tournament.id, len(candidates))
    return len(candidates)
