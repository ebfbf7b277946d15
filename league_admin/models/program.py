from datetime import date, datetime
from typing import TYPE_CHECKING, List, Optional

from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from league_admin.models.training_session import TrainingSession


class Program(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    start_date: date
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)

    # Relationships
    sessions: List["TrainingSession"] = Relationship(
        back_populates="program", sa_relationship_kwargs={"cascade": "all, delete-orphan"}
    )
