"""
Link tables for owner -> member memberships.

Every table is keyed uniquely by its (owner, member) pair so that
adding a pair that already exists is a no-op.
"""

from typing import Optional

from sqlalchemy import UniqueConstraint as SAUniqueConstraint
from sqlmodel import Field, SQLModel


class ProgramCoach(SQLModel, table=True):
    __table_args__ = (SAUniqueConstraint("program_id", "coach_id", name="uq_program_coach"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    program_id: int = Field(foreign_key="program.id", index=True)
    coach_id: int = Field(foreign_key="coach.id")


class SessionCoach(SQLModel, table=True):
    __table_args__ = (SAUniqueConstraint("session_id", "coach_id", name="uq_session_coach"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    session_id: int = Field(foreign_key="trainingsession.id", index=True)
    coach_id: int = Field(foreign_key="coach.id")


class ProgramPlayer(SQLModel, table=True):
    __table_args__ = (SAUniqueConstraint("program_id", "player_id", name="uq_program_player"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    program_id: int = Field(foreign_key="program.id", index=True)
    player_id: int = Field(foreign_key="player.id")


class TeamMember(SQLModel, table=True):
    __table_args__ = (SAUniqueConstraint("team_id", "player_id", name="uq_team_member"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    team_id: int = Field(foreign_key="team.id", index=True)
    player_id: int = Field(foreign_key="player.id")
