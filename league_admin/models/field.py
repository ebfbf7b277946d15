from typing import TYPE_CHECKING, Optional

from sqlalchemy import UniqueConstraint as SAUniqueConstraint
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from league_admin.models.tournament import Tournament


class PlayingField(SQLModel, table=True):
    """A pitch/field a match can be placed on. Stored in the "field" table."""

    __tablename__ = "field"
    __table_args__ = (SAUniqueConstraint("tournament_id", "name", name="uq_field_tournament_name"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    tournament_id: int = Field(foreign_key="tournament.id", index=True)
    name: str  # "Field 1"
    location: Optional[str] = None  # "Main Complex"

    # Relationships
    tournament: "Tournament" = Relationship(back_populates="fields")
