"""Portal endpoints: the create journey.

``build_portal_router`` returns one router per journey.  Every page's base
URL is recomputed from the request path, so the same handlers work
wherever the router is mounted.
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from formflow_journeys.answer_store import AnswerStore, FlashChannel

from formflow_server.dependencies import (
    JourneyHandlers,
    get_answer_store,
    get_db,
    get_flash,
    journey_handlers,
    require_manage_key,
)
from formflow_server.responses import to_response


def _base_url(request: Request, depth: int) -> str:
    """Strip the last ``depth`` path segments from the request path."""
    path = request.url.path.rstrip("/")
    return path.rsplit("/", depth)[0] if depth else path


def build_portal_router(journey_id: str, protected: bool = False) -> APIRouter:
    """Create-journey routes for ``journey_id``; manage-key guarded if ``protected``."""
    dependencies = [Depends(require_manage_key)] if protected else []
    router = APIRouter(tags=[f"portal:{journey_id}"], dependencies=dependencies)
    handlers = journey_handlers(journey_id)

    @router.get("")
    async def start(
        request: Request,
        store: AnswerStore = Depends(get_answer_store),
        h: JourneyHandlers = Depends(handlers),
    ) -> Response:
        return to_response(h.save.start(store, base_url=_base_url(request, 0)))

    @router.get("/check-your-answers")
    async def check_answers(
        request: Request,
        store: AnswerStore = Depends(get_answer_store),
        flash: FlashChannel = Depends(get_flash),
        h: JourneyHandlers = Depends(handlers),
    ) -> Response:
        return to_response(
            h.save.check_answers(store, flash, base_url=_base_url(request, 1))
        )

    @router.post("/check-your-answers")
    async def save(
        request: Request,
        db: AsyncSession = Depends(get_db),
        store: AnswerStore = Depends(get_answer_store),
        flash: FlashChannel = Depends(get_flash),
        h: JourneyHandlers = Depends(handlers),
    ) -> Response:
        """Commit the completed journey."""
        result = await h.save.save(db, store, flash, base_url=_base_url(request, 1))
        return to_response(result)

    @router.get("/success")
    async def success(
        request: Request,
        flash: FlashChannel = Depends(get_flash),
        h: JourneyHandlers = Depends(handlers),
    ) -> Response:
        return to_response(h.save.success(flash, base_url=_base_url(request, 1)))

    @router.get("/{section}/{question}")
    async def show_question(
        section: str,
        question: str,
        request: Request,
        store: AnswerStore = Depends(get_answer_store),
        h: JourneyHandlers = Depends(handlers),
    ) -> Response:
        result = h.save.show_question(
            store, section, question, base_url=_base_url(request, 2),
        )
        return to_response(result)

    @router.post("/{section}/{question}")
    async def submit_question(
        section: str,
        question: str,
        request: Request,
        store: AnswerStore = Depends(get_answer_store),
        h: JourneyHandlers = Depends(handlers),
    ) -> Response:
        """Validate and store one answer (form-encoded body)."""
        form = await request.form()
        result = h.save.submit_question(
            store, section, question, dict(form), base_url=_base_url(request, 2),
        )
        return to_response(result)

    return router
