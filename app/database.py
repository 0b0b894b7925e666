# app/database.py
from collections.abc import Iterator

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine, Session

from app.core.config import Settings

# Import models so SQLModel metadata is populated before create_all()
from app.models import user as _user_models  # noqa: F401
from app.models import cart as _cart_models  # noqa: F401


# ---------------------------------------------------------
# Engine construction
#
# - Postgres: pooled connections (DB_POOL_SIZE / DB_MAX_OVERFLOW),
#   pool_pre_ping=True to validate connections before using them,
#   optional sslmode appended to the URL.
# - SQLite: used for local development and tests. In-memory URLs
#   share a single connection (StaticPool) so every Session sees
#   the same database. Foreign keys are switched on per connection
#   so cart rows cascade with their user.
# ---------------------------------------------------------


def _with_sslmode(db_url: str, sslmode: str | None) -> str:
    if not sslmode or "sslmode=" in db_url:
        return db_url
    sep = "&" if "?" in db_url else "?"
    return f"{db_url}{sep}sslmode={sslmode}"


def _is_memory_sqlite(db_url: str) -> bool:
    return db_url in ("sqlite://", "sqlite:///:memory:") or "mode=memory" in db_url


def build_engine(settings: Settings) -> Engine:
    """
    Create the process-wide engine (the connection pool handle).
    """
    db_url = settings.DATABASE_URL

    if db_url.startswith("sqlite"):
        kwargs: dict = {"connect_args": {"check_same_thread": False}}
        if _is_memory_sqlite(db_url):
            kwargs["poolclass"] = StaticPool
        engine = create_engine(db_url, echo=settings.DB_ECHO, **kwargs)
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    return create_engine(
        _with_sslmode(db_url, settings.DB_SSLMODE),
        echo=settings.DB_ECHO,
        pool_pre_ping=True,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
    )


def _enable_sqlite_foreign_keys(dbapi_connection, _connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_db_and_tables(engine: Engine) -> None:
    """
    Create all tables defined in SQLModel metadata if they do not exist.

    This is called once on application startup.
    """
    SQLModel.metadata.create_all(engine)


def get_session(request: Request) -> Iterator[Session]:
    """
    FastAPI dependency that yields a SQLModel Session bound to the
    application's engine.

    Usage:

        from fastapi import Depends

        @router.get("/example")
        def example_endpoint(session: Session = Depends(get_session)):
            ...
    """
    with Session(request.app.state.engine) as session:
        yield session
