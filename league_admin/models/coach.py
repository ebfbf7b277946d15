from datetime import datetime
from typing import Optional

from sqlmodel import Field, SQLModel


class Coach(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    full_name: str
    email: str = Field(unique=True, index=True)  # upsert key
    phone: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
