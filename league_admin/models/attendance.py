from typing import Optional

from sqlalchemy import UniqueConstraint as SAUniqueConstraint
from sqlmodel import Field, SQLModel

ATTENDANCE_STATUSES = ["present", "absent", "late", "excused"]


class Attendance(SQLModel, table=True):
    __table_args__ = (SAUniqueConstraint("session_id", "player_id", name="uq_attendance_session_player"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    session_id: int = Field(foreign_key="trainingsession.id", index=True)
    player_id: int = Field(foreign_key="player.id")
    status: str  # see ATTENDANCE_STATUSES
