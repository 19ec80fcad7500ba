# minimarket/database.py
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine, Session

from minimarket.core.config import get_settings

settings = get_settings()

# ---------------------------------------------------------
# Document store connection
#
# - sqlite (default, local dev): allow the engine to be shared across
#   FastAPI's threadpool; in-memory URLs share one connection.
# - postgres: enforce sslmode=require and validate pooled connections.
# ---------------------------------------------------------


def build_engine(db_url: str):
    """
    Create a SQLModel engine for `db_url` with dialect-specific options.
    """
    if db_url.startswith("sqlite"):
        kwargs: dict = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in db_url or db_url == "sqlite://":
            kwargs["poolclass"] = StaticPool
        return create_engine(db_url, echo=False, **kwargs)

    # Append sslmode=require if it is not already present
    if db_url.startswith("postgres") and "sslmode=" not in db_url:
        if "?" in db_url:
            db_url = db_url + "&sslmode=require"
        else:
            db_url = db_url + "?sslmode=require"

    return create_engine(db_url, echo=False, pool_pre_ping=True)


engine = build_engine(settings.DATABASE_URL)


def create_db_and_tables() -> None:
    """
    Create all tables defined in SQLModel metadata if they do not exist.

    This is called once on application startup.
    """
    SQLModel.metadata.create_all(engine)


def get_session():
    """
    FastAPI dependency that yields a SQLModel Session.

    Usage:

        from fastapi import Depends

        @router.get("/example")
        def example_endpoint(session: Session = Depends(get_session)):
            ...
    """
    with Session(engine) as session:
        yield session
