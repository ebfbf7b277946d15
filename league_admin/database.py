from pathlib import Path
from typing import Generator

from sqlalchemy.engine import Engine, make_url
from sqlmodel import Session, SQLModel, create_engine

from league_admin.config import Settings, settings


def build_engine(config: Settings) -> Engine:
    """Engine for `config.database_url`; file-backed SQLite gets its directory created"""
    connect_args = {}
    if config.is_sqlite:
        connect_args["check_same_thread"] = False
        database = make_url(config.database_url).database
        if database and database != ":memory:":
            Path(database).parent.mkdir(parents=True, exist_ok=True)
    return create_engine(config.database_url, echo=config.sql_echo, connect_args=connect_args)


engine: Engine = build_engine(settings)


def get_session() -> Generator[Session, None, None]:
    """Get database session"""
    with Session(engine) as session:
        yield session


def import_models() -> None:
    """Import all models so they are registered with SQLModel metadata"""
    from league_admin.models.attendance import Attendance  # noqa: F401
    from league_admin.models.coach import Coach  # noqa: F401
    from league_admin.models.field import PlayingField  # noqa: F401
    from league_admin.models.match import Match  # noqa: F401
    from league_admin.models.membership import (  # noqa: F401
        ProgramCoach,
        ProgramPlayer,
        SessionCoach,
        TeamMember,
    )
    from league_admin.models.player import Player  # noqa: F401
    from league_admin.models.program import Program  # noqa: F401
    from league_admin.models.team import Team  # noqa: F401
    from league_admin.models.tournament import Tournament  # noqa: F401
    from league_admin.models.training_session import TrainingSession  # noqa: F401


def init_db() -> None:
    """Initialize database - create all tables"""
    import_models()
    SQLModel.metadata.create_all(engine)
