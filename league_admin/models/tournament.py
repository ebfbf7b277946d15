from datetime import date, datetime
from typing import TYPE_CHECKING, List, Optional

from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from league_admin.models.field import PlayingField
    from league_admin.models.match import Match
    from league_admin.models.team import Team

TOURNAMENT_STATUSES = ["Setup", "Active", "Complete", "Published"]


class Tournament(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    start_date: date
    end_date: date
    rules: Optional[str] = None
    venue: Optional[str] = None
    status: str = Field(default="Setup")  # "Setup" | "Active" | "Complete" | "Published"
    published_at: Optional[datetime] = Field(default=None)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow, sa_column_kwargs={"onupdate": datetime.utcnow})

    # Relationships
    fields: List["PlayingField"] = Relationship(back_populates="tournament")
    teams: List["Team"] = Relationship(back_populates="tournament")
    matches: List["Match"] = Relationship(back_populates="tournament")
