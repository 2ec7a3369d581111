from __future__ import annotations

import os
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

DEFAULT_DB_URL = "sqlite:///data/litmind.db"


def get_db_url() -> str:
    """Database URL from ``LITMIND_DB_URL``; a local SQLite file otherwise."""
    return os.getenv("LITMIND_DB_URL") or DEFAULT_DB_URL


def _ensure_sqlite_dir(db_url: str) -> None:
    prefix = "sqlite:///"
    if not db_url.startswith(prefix) or db_url.endswith(":memory:"):
        return
    Path(db_url[len(prefix):]).parent.mkdir(parents=True, exist_ok=True)


class SessionProvider:
    """Owns one engine per database URL and hands out short-lived sessions."""

    def __init__(self, db_url: str):
        self.db_url = db_url
        connect_args = {}
        if db_url.startswith("sqlite"):
            _ensure_sqlite_dir(db_url)
            connect_args["check_same_thread"] = False
        self.engine: Engine = create_engine(db_url, future=True, connect_args=connect_args)
        self._factory = sessionmaker(bind=self.engine, expire_on_commit=False, future=True)

    @contextmanager
    def session(self) -> Iterator[Session]:
        session = self._factory()
        try:
            yield session
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()
