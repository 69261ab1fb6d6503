"""Async engine and session factory shared by the server and the cleanup CLI.

Pool demand comes from three places: the journey-session load and
write-back that bracket every portal and manage request, the request's own
``get_db`` session for submission reads and writes, and ``/health``.  Each
journey-session call checks a connection out for one short transaction,
so a request holds at most two connections at once and never across an
await on the client.

Pool settings come from the environment:

    PG_POOL_SIZE      persistent connections (default 5)
    PG_MAX_OVERFLOW   extra connections under burst (default 10)
    PG_POOL_TIMEOUT   seconds to wait for a free connection (default 30)
    PG_POOL_RECYCLE   seconds before a connection is replaced; -1 keeps it
    PG_ECHO           "true" logs every statement through sqlalchemy.engine
"""

import os

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from formflow_db.config import get_async_url

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def pool_options() -> dict:
    """Keyword arguments for ``create_async_engine`` read from the environment."""
    return {
        "pool_size": int(os.getenv("PG_POOL_SIZE", "5")),
        "max_overflow": int(os.getenv("PG_MAX_OVERFLOW", "10")),
        "pool_timeout": float(os.getenv("PG_POOL_TIMEOUT", "30")),
        "pool_recycle": int(os.getenv("PG_POOL_RECYCLE", "-1")),
        # Sessions idle between page views; drop dead connections on checkout
        "pool_pre_ping": True,
        "echo": os.getenv("PG_ECHO", "false").lower() == "true",
    }


def get_engine() -> AsyncEngine:
    """The process-wide engine, created on first use."""
    global _engine
    if _engine is None:
        _engine = create_async_engine(get_async_url(), **pool_options())
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Session factory bound to :func:`get_engine`.

    ``expire_on_commit`` is off because the submission service commits and
    then reads ids and timestamps off the same rows.
    """
    global _session_factory
    if _session_factory is None:
        _session_factory = async_sessionmaker(
            bind=get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
        )
    return _session_factory


async def dispose_engine() -> None:
    """Close pooled connections; the next call to :func:`get_engine` starts over."""
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _session_factory = None
