from __future__ import annotations
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker


class Base(DeclarativeBase):
    pass


def make_engine(database_url: str, timeout_seconds: float | None = None) -> Engine:
    connect_args = {}
    if timeout_seconds and database_url.startswith("postgresql"):
        connect_args["connect_timeout"] = int(timeout_seconds)
    return create_engine(database_url, pool_pre_ping=True, connect_args=connect_args)


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)
