import datetime as dt
from typing import TYPE_CHECKING, Optional

from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from league_admin.models.program import Program


class TrainingSession(SQLModel, table=True):
    """A single coaching session within a program (named to avoid clashing with sqlmodel.Session)"""

    id: Optional[int] = Field(default=None, primary_key=True)
    program_id: int = Field(foreign_key="program.id", index=True)
    date: dt.date
    location: str
    type: Optional[str] = None  # "training" | "match-day" | ...

    # Relationships
    program: "Program" = Relationship(back_populates="sessions")
