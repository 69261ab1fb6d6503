"""Manage endpoints: list, detail, soft-delete and single-field edit.

``build_manage_router`` returns one router per journey with a
``manage_route``.  Guarded by ``X-Manage-Key`` when ``MANAGE_API_KEY`` is
configured.
"""

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from formflow_journeys.answer_store import AnswerStore, FlashChannel
from formflow_journeys.constants import DEFAULT_PAGE_LIMIT

from formflow_server.dependencies import (
    JourneyHandlers,
    get_answer_store,
    get_db,
    get_flash,
    journey_handlers,
    require_manage_key,
)
from formflow_server.responses import to_response


def build_manage_router(journey_id: str) -> APIRouter:
    """Back-office routes for the records of ``journey_id``."""
    router = APIRouter(tags=[f"manage:{journey_id}"], dependencies=[Depends(require_manage_key)])
    handlers = journey_handlers(journey_id)

    # ------------------------------------------------------------------
    # List / detail
    # ------------------------------------------------------------------

    @router.get("")
    async def list_submissions(
        limit: int = Query(DEFAULT_PAGE_LIMIT, ge=1, le=500),
        offset: int = Query(0, ge=0),
        db: AsyncSession = Depends(get_db),
        flash: FlashChannel = Depends(get_flash),
        h: JourneyHandlers = Depends(handlers),
    ) -> Response:
        result = await h.manage.list(db, flash, limit=limit, offset=offset)
        return to_response(result)

    @router.get("/{record_id}")
    async def submission_detail(
        record_id: str,
        db: AsyncSession = Depends(get_db),
        flash: FlashChannel = Depends(get_flash),
        h: JourneyHandlers = Depends(handlers),
    ) -> Response:
        return to_response(await h.manage.detail(db, flash, record_id))

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    @router.get("/{record_id}/delete")
    async def confirm_delete(
        record_id: str,
        db: AsyncSession = Depends(get_db),
        h: JourneyHandlers = Depends(handlers),
    ) -> Response:
        return to_response(await h.manage.confirm_delete(db, record_id))

    @router.post("/{record_id}/delete")
    async def delete_submission(
        record_id: str,
        db: AsyncSession = Depends(get_db),
        flash: FlashChannel = Depends(get_flash),
        h: JourneyHandlers = Depends(handlers),
    ) -> Response:
        """Soft-delete; always redirects (list on success, detail on failure)."""
        return to_response(await h.manage.delete(db, flash, record_id))

    # ------------------------------------------------------------------
    # Edit
    # ------------------------------------------------------------------

    @router.get("/{record_id}/edit/{section}/{question}")
    async def edit_question(
        record_id: str,
        section: str,
        question: str,
        db: AsyncSession = Depends(get_db),
        store: AnswerStore = Depends(get_answer_store),
        flash: FlashChannel = Depends(get_flash),
        h: JourneyHandlers = Depends(handlers),
    ) -> Response:
        result = await h.edit.show(db, store, flash, record_id, section, question)
        return to_response(result)

    @router.post("/{record_id}/edit/{section}/{question}")
    async def update_question(
        record_id: str,
        section: str,
        question: str,
        request: Request,
        db: AsyncSession = Depends(get_db),
        store: AnswerStore = Depends(get_answer_store),
        flash: FlashChannel = Depends(get_flash),
        h: JourneyHandlers = Depends(handlers),
    ) -> Response:
        """Validate and write one allow-listed field (form-encoded body)."""
        form = await request.form()
        result = await h.edit.submit(
            db, store, flash, record_id, section, question, dict(form),
        )
        return to_response(result)

    return router
