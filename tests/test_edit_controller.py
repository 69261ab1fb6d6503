"""EditController tests: allow-list, validation, and single-column writes."""

import uuid
from unittest.mock import AsyncMock

import pytest

from formflow_journeys.answer_store import AnswerStore, FlashChannel
from formflow_journeys.controllers import EditController
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
    return EditController(definition, service, MANAGE)


@pytest.fixture
def row(mock_repo):
    return mock_repo.add(
        full_name="Ada Lovelace",
        email="ada@example.com",
        rating="good",
        feedback="Clear and quick.",
    )


@pytest.fixture
def session():
    return {}


@pytest.fixture
def answers(session):
    return AnswerStore(session)


@pytest.fixture
def flash(session):
    return FlashChannel(session)


@pytest.fixture
def mock_db():
    return AsyncMock()


# =====================================================================
# GET
# =====================================================================


@pytest.mark.asyncio
async def test_show_seeds_answers_and_links_to_detail(controller, answers, flash, row, mock_db):
    result = await controller.show(mock_db, answers, flash, str(row.id), "experience", "rating")

    assert isinstance(result, RenderResult)
    assert result.model["question"]["value"] == "good"
    assert result.model["back_link"] == f"{MANAGE}/{row.id}"
    assert result.model["form_action"] == f"{MANAGE}/{row.id}/edit/experience/rating"
    assert "cannot be undone" in result.model["warning_text"]
    assert answers.get("feedback-edit")["wantToProvideEmail"] is True
    assert answers.get("feedback") == {}


@pytest.mark.asyncio
async def test_show_pending_error(controller, answers, flash, row, mock_db):
    flash.set_error_message("Select a rating")
    result = await controller.show(mock_db, answers, flash, str(row.id), "experience", "rating")
    assert result.model["error_message"] == "Select a rating"


@pytest.mark.asyncio
async def test_show_missing_record(controller, answers, flash, mock_db):
    result = await controller.show(mock_db, answers, flash, str(uuid.uuid4()), "experience", "rating")
    assert result == NotFoundResult(message="Feedback submission not found")


@pytest.mark.asyncio
async def test_show_deleted_record(controller, answers, flash, row, mock_db):
    row.is_deleted = True
    result = await controller.show(mock_db, answers, flash, str(row.id), "experience", "rating")
    assert isinstance(result, NotFoundResult)


@pytest.mark.asyncio
async def test_show_field_outside_allow_list(controller, answers, flash, row, mock_db):
    result = await controller.show(mock_db, answers, flash, str(row.id), "personal", "want-email")
    assert isinstance(result, NotFoundResult)


# =====================================================================
# POST
# =====================================================================


@pytest.mark.asyncio
async def test_submit_updates_single_column(controller, answers, flash, row, mock_db):
    result = await controller.submit(
        mock_db, answers, flash, str(row.id), "experience", "rating", {"rating": "poor"},
    )

    assert result == RedirectResult(location=f"{MANAGE}/{row.id}")
    assert row.rating == "poor"
    assert row.full_name == "Ada Lovelace"
    assert flash.pop_messages().success_message == "Feedback updated successfully"


@pytest.mark.asyncio
async def test_submit_blank_required_field_returns_to_question(controller, answers, flash, row, mock_db):
    before = row.updated_at
    result = await controller.submit(
        mock_db, answers, flash, str(row.id), "experience", "rating", {"rating": ""},
    )

    assert result == RedirectResult(location=f"{MANAGE}/{row.id}/edit/experience/rating")
    assert row.rating == "good"
    assert row.updated_at == before
    assert flash.pop_messages().error_message == "Select a rating"


@pytest.mark.asyncio
async def test_submit_field_outside_allow_list(controller, answers, flash, row, mock_db):
    result = await controller.submit(
        mock_db, answers, flash, str(row.id), "personal", "want-email", {"wantToProvideEmail": "maybe"},
    )

    assert result == RedirectResult(location=f"{MANAGE}/{row.id}")
    assert flash.pop_messages().error_message == "Invalid form field"


@pytest.mark.asyncio
async def test_submit_blank_optional_field_clears_column(controller, answers, flash, row, mock_db):
    result = await controller.submit(
        mock_db, answers, flash, str(row.id), "personal", "email", {"email": ""},
    )

    assert result.location == f"{MANAGE}/{row.id}"
    assert row.email is None


@pytest.mark.asyncio
async def test_submit_invalid_optional_field_still_validated(controller, answers, flash, row, mock_db):
    result = await controller.submit(
        mock_db, answers, flash, str(row.id), "personal", "email", {"email": "nope"},
    )

    assert result.location == f"{MANAGE}/{row.id}/edit/personal/email"
    assert row.email == "ada@example.com"


@pytest.mark.asyncio
async def test_submit_missing_record(controller, answers, flash, mock_db):
    result = await controller.submit(
        mock_db, answers, flash, str(uuid.uuid4()), "experience", "rating", {"rating": "poor"},
    )
    assert result == RedirectResult(location=MANAGE)
    assert flash.pop_messages().error_message == "Feedback submission not found"


@pytest.mark.asyncio
async def test_submit_for_record_deleted_during_edit(controller, answers, flash, row, mock_repo, mock_db):
    original = mock_repo.update_fields

    async def deleted_meanwhile(db, record_id, values):
        row.is_deleted = True
        return await original(db, record_id, values)

    mock_repo.update_fields = deleted_meanwhile
    result = await controller.submit(
        mock_db, answers, flash, str(row.id), "experience", "rating", {"rating": "poor"},
    )
    assert result == RedirectResult(location=MANAGE)
    assert flash.pop_messages().error_message == "Feedback submission not found"
    assert row.rating == "good"


@pytest.mark.asyncio
async def test_submit_persistence_error_goes_to_detail(controller, answers, flash, row, mock_repo, mock_db):
    original = mock_repo.update_fields

    async def failing_update(db, record_id, values):
        raise db_error()

    mock_repo.update_fields = failing_update
    try:
        result = await controller.submit(
            mock_db, answers, flash, str(row.id), "experience", "rating", {"rating": "poor"},
        )
    finally:
        mock_repo.update_fields = original

    assert result == RedirectResult(location=f"{MANAGE}/{row.id}")
    assert flash.pop_messages().error_message == "Unable to save changes. Please try again."
    assert row.rating == "good"
