from datetime import date, datetime, time
from typing import TYPE_CHECKING, Optional

from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from league_admin.models.tournament import Tournament

DEFAULT_MATCH_DURATION_MINUTES = 75
MATCH_STATUSES = ["unscheduled", "scheduled", "in-progress", "completed", "cancelled"]


class Match(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    tournament_id: int = Field(foreign_key="tournament.id", index=True)
    match_number: Optional[int] = None
    round: Optional[int] = None
    pool: Optional[int] = None

    # Teams are optional until the draw is known
    team1_id: Optional[int] = Field(default=None, foreign_key="team.id")
    team2_id: Optional[int] = Field(default=None, foreign_key="team.id")

    # Placement (populated by schedule assignment)
    field_id: Optional[int] = Field(default=None, foreign_key="field.id")
    scheduled_date: Optional[date] = None
    scheduled_time: Optional[time] = None
    duration_minutes: int = Field(default=DEFAULT_MATCH_DURATION_MINUTES)

    status: str = Field(default="unscheduled")  # see MATCH_STATUSES
    score1: Optional[int] = None
    score2: Optional[int] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)

    # Relationships
    tournament: "Tournament" = Relationship(back_populates="matches")
