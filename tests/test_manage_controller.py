"""ManageController tests: list, detail, delete confirmation and soft delete."""

import uuid
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest

from formflow_journeys.answer_store import FlashChannel
from formflow_journeys.constants import (
    DELETE_FAILED_MESSAGE,
    DELETE_SUCCESS_MESSAGE,
    NOT_PROVIDED_TEXT,
)
from formflow_journeys.controllers import ManageController
from formflow_journeys.models import NotFoundResult, RedirectResult, RenderResult
from formflow_journeys.service import SubmissionService

# Reuse mock infrastructure from test_service
from test_service import MockRepository, db_error

MANAGE = "/manage/feedback"


@pytest.fixture
def mock_repo():
    return MockRepository()


@pytest.fixture
def controller(definition, mock_repo):
    service = SubmissionService(definition)
    service._repo = mock_repo
    return ManageController(definition, service, MANAGE)


@pytest.fixture
def flash():
    return FlashChannel({})


@pytest.fixture
def mock_db():
    return AsyncMock()


def _add(repo, name, **kw):
    return repo.add(full_name=name, rating="good", feedback="fine", **kw)


# =====================================================================
# List / detail
# =====================================================================


@pytest.mark.asyncio
async def test_list_newest_first_with_count(controller, mock_repo, flash, mock_db):
    now = datetime.now(timezone.utc)
    _add(mock_repo, "Old", created_at=now - timedelta(days=1))
    _add(mock_repo, "New", created_at=now)
    _add(mock_repo, "Gone", is_deleted=True)

    result = await controller.list(mock_db, flash)

    assert isinstance(result, RenderResult)
    assert result.model["total_count"] == 2
    assert [s["values"]["full_name"] for s in result.model["submissions"]] == ["New", "Old"]
    assert result.model["form_config"]["email_not_provided"] == NOT_PROVIDED_TEXT


@pytest.mark.asyncio
async def test_list_reads_and_clears_banners(controller, flash, mock_db):
    flash.set_success_message(DELETE_SUCCESS_MESSAGE)
    first = await controller.list(mock_db, flash)
    second = await controller.list(mock_db, flash)
    assert first.model["success_message"] == DELETE_SUCCESS_MESSAGE
    assert second.model["success_message"] is None


@pytest.mark.asyncio
async def test_detail_rows_and_edit_links(controller, mock_repo, flash, mock_db):
    row = _add(mock_repo, "Ada")
    result = await controller.detail(mock_db, flash, str(row.id))

    rows = {r["field_name"]: r for r in result.model["rows"]}
    assert list(rows) == ["fullName", "email", "rating", "feedback"]
    assert rows["email"]["display"] == NOT_PROVIDED_TEXT
    assert rows["rating"]["change_link"] == f"{MANAGE}/{row.id}/edit/experience/rating"


@pytest.mark.asyncio
async def test_detail_missing(controller, flash, mock_db):
    result = await controller.detail(mock_db, flash, str(uuid.uuid4()))
    assert isinstance(result, NotFoundResult)


@pytest.mark.asyncio
async def test_detail_of_deleted_record(controller, mock_repo, flash, mock_db):
    row = _add(mock_repo, "Gone", is_deleted=True)
    assert isinstance(await controller.detail(mock_db, flash, str(row.id)), NotFoundResult)


# =====================================================================
# Delete
# =====================================================================


@pytest.mark.asyncio
async def test_confirm_delete(controller, mock_repo, mock_db):
    row = _add(mock_repo, "Ada")
    result = await controller.confirm_delete(mock_db, str(row.id))
    assert result.view == "delete_confirm"
    assert isinstance(await controller.confirm_delete(mock_db, "nope"), NotFoundResult)


@pytest.mark.asyncio
async def test_delete_success(controller, mock_repo, flash, mock_db):
    row = _add(mock_repo, "Ada")
    result = await controller.delete(mock_db, flash, str(row.id))

    assert result == RedirectResult(location=MANAGE)
    assert row.is_deleted is True
    assert flash.pop_messages().success_message == DELETE_SUCCESS_MESSAGE


@pytest.mark.asyncio
async def test_delete_failure_goes_to_detail(controller, mock_repo, flash, mock_db):
    row = _add(mock_repo, "Ada")
    mock_repo.fail_with = db_error()

    result = await controller.delete(mock_db, flash, str(row.id))

    assert result == RedirectResult(location=f"{MANAGE}/{row.id}")
    assert flash.pop_messages().error_message == DELETE_FAILED_MESSAGE
    assert row.is_deleted is False


@pytest.mark.asyncio
async def test_delete_missing_record_goes_to_detail(controller, flash, mock_db):
    record_id = str(uuid.uuid4())
    result = await controller.delete(mock_db, flash, record_id)
    assert result == RedirectResult(location=f"{MANAGE}/{record_id}")
    assert flash.pop_messages().error_message == DELETE_FAILED_MESSAGE
