"""
Runtime settings, read once from the environment (.env honoured).

DATABASE_URL   SQLAlchemy URL                     sqlite:///./league.db
SQL_ECHO       echo SQL statements                false
CORS_ORIGINS   extra comma-separated origins      (none)
LOG_LEVEL      root log level                     INFO
BUILD_HASH     build label for /api/health        git short hash, else a timestamp
"""

import os
import subprocess
from dataclasses import dataclass
from datetime import datetime
from typing import Mapping, Optional, Tuple

from dotenv import load_dotenv

load_dotenv()

DEFAULT_DATABASE_URL = "sqlite:///./league.db"
FRONTEND_ORIGINS = ("http://localhost:3000", "http://127.0.0.1:3000")
TRUTHY = ("true", "1", "yes")


@dataclass(frozen=True)
class Settings:
    database_url: str
    sql_echo: bool
    cors_origins: Tuple[str, ...]
    log_level: str

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


def parse_origins(raw: Optional[str]) -> Tuple[str, ...]:
    """Frontend origins plus any extra ones from a comma-separated list, without repeats"""
    extra = [o.strip() for o in (raw or "").split(",") if o.strip()]
    return tuple(dict.fromkeys([*FRONTEND_ORIGINS, *extra]))


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    env = os.environ if environ is None else environ
    return Settings(
        database_url=env.get("DATABASE_URL", DEFAULT_DATABASE_URL),
        sql_echo=env.get("SQL_ECHO", "false").lower() in TRUTHY,
        cors_origins=parse_origins(env.get("CORS_ORIGINS")),
        log_level=env.get("LOG_LEVEL", "INFO").upper(),
    )


def resolve_build_hash(environ: Optional[Mapping[str, str]] = None) -> str:
    """BUILD_HASH if set, else the checkout's short commit, else a build timestamp"""
    env = os.environ if environ is None else environ
    if env.get("BUILD_HASH"):
        return env["BUILD_HASH"]
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--short", "HEAD"],
            cwd=os.path.dirname(os.path.dirname(__file__)),
            capture_output=True,
            text=True,
            timeout=2,
        )
        if result.returncode == 0 and result.stdout.strip():
            return result.stdout.strip()
    except (OSError, subprocess.SubprocessError):
        pass
    return datetime.now().strftime("%Y%m%d-%H%M%S")


settings = load_settings()
