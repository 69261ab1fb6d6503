"""Server-side journey sessions.

The signed cookie (Starlette's ``SessionMiddleware``) carries only a
session id under ``sid``.  Answers and flash messages live in the
``journey_sessions`` table and are handled per request like this:

  1. ``get_session_data`` (a dependency) loads the row's ``data`` into
     ``request.state`` together with a snapshot copy
  2. controllers mutate that dict through ``AnswerStore`` / ``FlashChannel``
  3. ``JourneySessionMiddleware`` writes it back once the handler returns,
     but only when it differs from the snapshot

Requests that never ask for session data never touch the table.
"""

from __future__ import annotations

import copy
import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from formflow_db.engine import get_session_factory
from formflow_db.repository import JourneySessionRepository

logger = logging.getLogger(__name__)

# Cookie key holding the session id
SESSION_ID_KEY = "sid"


class SessionStore:
    """Loads and saves journey-session data, one short transaction per call.

    Args:
        max_age: seconds a session lives after its last write
        session_factory: async session factory; the shared one if omitted
    """

    def __init__(self, max_age: int, session_factory=None) -> None:
        self._max_age = timedelta(seconds=max_age)
        self._factory = session_factory
        self._repo = JourneySessionRepository()

    def _sessions(self):
        factory = self._factory or get_session_factory()
        return factory()

    async def load(self, session_id: str) -> dict[str, Any]:
        """The session's data, or {} when it is unknown or expired."""
        pk = _parse(session_id)
        if pk is None:
            return {}
        async with self._sessions() as db:
            row = await self._repo.get_live(db, pk, datetime.now(timezone.utc))
            return dict(row.data) if row is not None else {}

    async def save(self, session_id: str, data: dict[str, Any]) -> None:
        """Replace the session's data and extend its expiry."""
        pk = _parse(session_id)
        if pk is None:
            raise ValueError(f"Invalid session id {session_id!r}")
        expires_at = datetime.now(timezone.utc) + self._max_age
        async with self._sessions() as db:
            await self._repo.upsert(db, pk, data, expires_at)
            await db.commit()

    async def purge_expired(self) -> int:
        """Delete expired sessions; returns the number removed."""
        async with self._sessions() as db:
            removed = await self._repo.delete_expired(db, datetime.now(timezone.utc))
            await db.commit()
        logger.info("Purged %d expired journey sessions", removed)
        return removed


def _parse(session_id: str) -> uuid.UUID | None:
    try:
        return uuid.UUID(str(session_id))
    except ValueError:
        return None


# ------------------------------------------------------------------
# Per-request wiring
# ------------------------------------------------------------------

async def get_session_data(request: Request) -> dict[str, Any]:
    """The mutable session data for this request, loaded once."""
    state = request.state
    if getattr(state, "journey_session", None) is not None:
        return state.journey_session

    session_id = request.session.get(SESSION_ID_KEY)
    if _parse(session_id) is None:
        session_id = str(uuid.uuid4())
        request.session[SESSION_ID_KEY] = session_id
        data: dict[str, Any] = {}
    else:
        data = await request.app.state.sessions.load(session_id)

    state.journey_session_id = session_id
    state.journey_session = data
    state.journey_session_snapshot = copy.deepcopy(data)
    return data


class JourneySessionMiddleware(BaseHTTPMiddleware):
    """Writes changed session data back after the handler returns."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)

        data = getattr(request.state, "journey_session", None)
        if data is not None and data != request.state.journey_session_snapshot:
            await request.app.state.sessions.save(request.state.journey_session_id, data)
            logger.debug("Saved journey session %s", request.state.journey_session_id)
        return response
