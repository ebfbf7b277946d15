"""
Scheduling Conflict Detector

Pure, deterministic check for a batch of proposed match placements.
Two candidates conflict when they claim the identical
(field_id, date, start_time) key.

- No database access, no mutation
- Conflicts ordered by first appearance of the colliding key
- match_ids inside a conflict keep their input order

Duration is carried on the candidate but does not take part in the
comparison: matches starting at different times on the same field are
never flagged even if their intervals overlap.
"""

from dataclasses import dataclass, field
from datetime import date, time
from typing import Dict, Hashable, List, Optional, Sequence, Tuple

from league_admin.models.match import DEFAULT_MATCH_DURATION_MINUTES
from league_admin.utils.times import add_minutes, format_clock

SlotKey = Tuple[Hashable, date, time]


@dataclass(frozen=True)
class AssignmentCandidate:
    """A proposed placement of a match into a field/date/time slot"""

    match_id: Hashable
    field_id: Hashable
    date: date
    start_time: time
    duration_minutes: Optional[int] = None

    @property
    def slot_key(self) -> SlotKey:
        return (self.field_id, self.date, self.start_time)


@dataclass(frozen=True)
class ConflictRecord:
    """Two or more candidates sharing one slot key"""

    match_ids: Tuple[Hashable, ...]
    reason: str
    field_id: Hashable = field(default=None, compare=False)
    on_date: Optional[date] = field(default=None, compare=False)
    start_time: Optional[time] = field(default=None, compare=False)


def candidate_end_time(candidate: AssignmentCandidate) -> time:
    """End of the candidate's slot (start + duration, default 75 minutes)."""
    duration = candidate.duration_minutes or DEFAULT_MATCH_DURATION_MINUTES
    return add_minutes(candidate.start_time, duration)


def conflict_reason(field_id: Hashable, on_date: date, start_time: time) -> str:
    return f"Multiple matches scheduled on field {field_id} at {on_date.isoformat()} {format_clock(start_time)}"


def detect_conflicts(candidates: Sequence[AssignmentCandidate]) -> List[ConflictRecord]:
    """
    Find every (field, date, start_time) key claimed by more than one match.

    Args:
        candidates: Complete candidates (field, date and start time present)

    Returns:
        One ConflictRecord per colliding key, in first-appearance order.
        Empty list when nothing collides (including empty/single input).
    """
    # dicts preserve insertion order, which gives first-appearance ordering
    claims: Dict[SlotKey, List[Hashable]] = {}
    for candidate in candidates:
        claims.setdefault(candidate.slot_key, []).append(candidate.match_id)

    conflicts: List[ConflictRecord] = []
    for (field_id, on_date, start_time), match_ids in claims.items():
        if len(match_ids) < 2:
            continue
        conflicts.append(
            ConflictRecord(
                match_ids=tuple(match_ids),
                reason=conflict_reason(field_id, on_date, start_time),
                field_id=field_id,
                on_date=on_date,
                start_time=start_time,
            )
        )
    return conflicts
