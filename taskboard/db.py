# taskboard/db.py
from datetime import datetime, timezone

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

Base = declarative_base()


def utcnow() -> datetime:
    # Guardamos todo en UTC sin tzinfo (SQLite no conserva la zona)
    return datetime.now(timezone.utc).replace(tzinfo=None)


def make_engine(database_url: str):
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    return create_engine(database_url, connect_args=connect_args)


def make_session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db(request: Request):
    """Una sesión por petición; se cierra siempre al terminar."""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
