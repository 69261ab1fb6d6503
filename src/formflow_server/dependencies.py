"""FastAPI dependency injection: DB sessions, journey handlers, session wrappers, manage auth.

Each request that touches the database gets a fresh ``AsyncSession`` via
``get_db()``.  Writes are committed by the submission service itself; the
session is rolled back here if the handler raises.
"""

import hmac
from dataclasses import dataclass
from typing import Any, AsyncGenerator, Callable

from fastapi import Depends, Header, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from formflow_db.engine import get_session_factory
from formflow_journeys.answer_store import AnswerStore, FlashChannel
from formflow_journeys.controllers import EditController, ManageController, SaveController
from formflow_journeys.models.schema import JourneyDefinition
from formflow_journeys.service import SubmissionService
from formflow_journeys.store import JourneyStore

from formflow_server.sessions import get_session_data


# ------------------------------------------------------------------
# Database session
# ------------------------------------------------------------------

async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield an async DB session; rollback if the handler fails."""
    factory = get_session_factory()
    async with factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


# ------------------------------------------------------------------
# Store & per-journey handlers: built once in create_app
# ------------------------------------------------------------------

@dataclass
class JourneyHandlers:
    """Everything the routes of one journey need."""

    definition: JourneyDefinition
    service: SubmissionService
    save: SaveController
    edit: EditController | None = None
    manage: ManageController | None = None


def build_handlers(definition: JourneyDefinition, service: SubmissionService) -> JourneyHandlers:
    """Controllers for one journey; manage/edit only if it has a manage route."""
    handlers = JourneyHandlers(
        definition=definition,
        service=service,
        save=SaveController(definition, service),
    )
    if definition.manage_route:
        handlers.edit = EditController(definition, service, definition.manage_route)
        handlers.manage = ManageController(definition, service, definition.manage_route)
    return handlers


def get_store(request: Request) -> JourneyStore:
    return request.app.state.store


def journey_handlers(journey_id: str) -> Callable[[Request], JourneyHandlers]:
    """Dependency resolving the handlers of one journey from ``app.state``."""

    def _resolve(request: Request) -> JourneyHandlers:
        return request.app.state.journeys[journey_id]

    return _resolve


# ------------------------------------------------------------------
# Session wrappers over server-side journey session data
# ------------------------------------------------------------------

def get_answer_store(data: dict[str, Any] = Depends(get_session_data)) -> AnswerStore:
    """Answers for this request's journey session."""
    return AnswerStore(data)


def get_flash(data: dict[str, Any] = Depends(get_session_data)) -> FlashChannel:
    """One-shot messages for this request's journey session."""
    return FlashChannel(data)


# ------------------------------------------------------------------
# Manage auth: X-Manage-Key header
# ------------------------------------------------------------------

async def require_manage_key(
    request: Request,
    x_manage_key: str | None = Header(None, alias="X-Manage-Key"),
) -> None:
    """Check ``X-Manage-Key`` against ``MANAGE_API_KEY`` when one is configured.

    Returns 401 if the header is missing and 403 if it does not match.
    With no key configured the manage routes are open.
    """
    expected: str | None = request.app.state.settings.manage_api_key
    if not expected:
        return
    if not x_manage_key:
        raise HTTPException(status_code=401, detail="X-Manage-Key header is required")
    # Constant-time comparison
    if not hmac.compare_digest(x_manage_key, expected):
        raise HTTPException(status_code=403, detail="Invalid manage key")
