"""SaveController tests: question handling, check answers, commit, success.

Sessions are plain dicts wrapped by AnswerStore / FlashChannel; the DB is
an AsyncMock and the repository the in-memory MockRepository.
"""

from unittest.mock import AsyncMock

import pytest

from formflow_journeys.answer_store import AnswerStore, FlashChannel
from formflow_journeys.constants import SAVE_FAILED_MESSAGE
from formflow_journeys.controllers import SaveController
from formflow_journeys.models import NotFoundResult, RedirectResult, RenderResult
from formflow_journeys.service import SubmissionService

# Reuse mock infrastructure from test_service
from test_service import MockRepository, RecordingNotifier, db_error


# =====================================================================
# Fixtures
# =====================================================================


@pytest.fixture
def mock_repo():
    return MockRepository()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def controller(definition, mock_repo, notifier):
    service = SubmissionService(definition, notifier=notifier)
    service._repo = mock_repo
    return SaveController(definition, service)


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
# Start and questions
# =====================================================================


def test_start_points_at_first_question(controller, answers):
    result = controller.start(answers)
    assert isinstance(result, RenderResult)
    assert result.model["start_url"] == "/feedback/personal/full-name"


def test_show_question_prefills_answer(controller, answers):
    answers.set("feedback", {"fullName": "Ada"})
    result = controller.show_question(answers, "personal", "full-name")

    assert result.view == "question"
    assert result.model["question"]["value"] == "Ada"
    assert result.model["back_link"] == "/feedback"
    assert result.model["form_action"] == "/feedback/personal/full-name"


def test_show_unknown_question_is_not_found(controller, answers):
    assert isinstance(controller.show_question(answers, "personal", "nope"), NotFoundResult)


def test_submit_valid_answer_stores_and_advances(controller, answers):
    result = controller.submit_question(answers, "personal", "want-email", {"wantToProvideEmail": "no"})

    assert result == RedirectResult(location="/feedback/experience/rating")
    assert answers.get("feedback") == {"wantToProvideEmail": False}


def test_submit_invalid_answer_rerenders_with_error(controller, answers, flash):
    result = controller.submit_question(answers, "personal", "full-name", {"fullName": " "})

    assert isinstance(result, RenderResult)
    assert result.status_code == 400
    assert result.model["question"]["error"] == "Enter your full name"
    assert answers.get("feedback") == {}
    # Validation errors never touch the submission flash
    assert flash.peek().error is None


def test_check_answers_lists_active_rows(controller, answers, complete_answers):
    answers.set("feedback", {**complete_answers, "wantToProvideEmail": False})
    result = controller.check_answers(answers, FlashChannel({}))

    rows = [row["field_name"] for s in result.model["sections"] for row in s["rows"]]
    assert rows == ["fullName", "wantToProvideEmail", "rating", "feedback"]
    assert result.model["is_complete"] is True
    assert result.model["sections"][0]["rows"][1]["display"] == "No"


def test_check_answers_reads_and_clears_error(controller, answers, flash):
    flash.set_error(SAVE_FAILED_MESSAGE)
    assert controller.check_answers(answers, flash).model["error"] == SAVE_FAILED_MESSAGE
    assert controller.check_answers(answers, flash).model["error"] is None


# =====================================================================
# Save
# =====================================================================


@pytest.mark.asyncio
async def test_save_incomplete_redirects_to_check_answers(controller, answers, flash, mock_repo, mock_db):
    answers.set("feedback", {"fullName": "Ada"})
    result = await controller.save(mock_db, answers, flash)

    assert result == RedirectResult(location="/feedback/check-your-answers")
    assert mock_repo.rows == {}
    assert answers.get("feedback") == {"fullName": "Ada"}
    assert flash.peek().submitted is False


@pytest.mark.asyncio
async def test_save_success(controller, answers, flash, mock_repo, notifier, mock_db, complete_answers):
    mock_repo.next_id = "abc123"
    answers.set("feedback", complete_answers)

    result = await controller.save(mock_db, answers, flash)

    assert result == RedirectResult(location="/feedback/success")
    outcome = flash.peek()
    assert outcome.reference == "abc123"
    assert outcome.submitted is True
    assert answers.get("feedback") == {}
    assert len(notifier.sent) == 1


@pytest.mark.asyncio
async def test_save_persistence_error_keeps_answers(controller, answers, flash, mock_repo, mock_db, complete_answers):
    mock_repo.fail_with = db_error()
    answers.set("feedback", complete_answers)

    result = await controller.save(mock_db, answers, flash)

    assert result == RedirectResult(location="/feedback/check-your-answers")
    assert flash.peek().error == SAVE_FAILED_MESSAGE
    assert answers.get("feedback") == complete_answers


@pytest.mark.asyncio
async def test_commit_failure_redirects_with_save_error(controller, answers, flash, notifier, mock_db, complete_answers):
    mock_db.commit.side_effect = db_error()
    answers.set("feedback", complete_answers)

    result = await controller.save(mock_db, answers, flash)

    assert result == RedirectResult(location="/feedback/check-your-answers")
    assert flash.peek().error == SAVE_FAILED_MESSAGE
    assert answers.get("feedback") == complete_answers
    assert notifier.sent == []


@pytest.mark.asyncio
async def test_notification_failure_still_succeeds(definition, answers, flash, mock_repo, mock_db, complete_answers):
    service = SubmissionService(definition, notifier=RecordingNotifier(fail=True))
    service._repo = mock_repo
    controller = SaveController(definition, service)
    answers.set("feedback", complete_answers)

    result = await controller.save(mock_db, answers, flash)

    assert result.location == "/feedback/success"
    assert len(mock_repo.rows) == 1


@pytest.mark.asyncio
async def test_second_save_after_commit_does_not_duplicate(controller, answers, flash, mock_repo, mock_db, complete_answers):
    answers.set("feedback", complete_answers)
    await controller.save(mock_db, answers, flash)
    result = await controller.save(mock_db, answers, flash)

    assert result.location == "/feedback/check-your-answers"
    assert len(mock_repo.rows) == 1


# =====================================================================
# Success page
# =====================================================================


def test_success_renders_reference_once(controller, flash):
    flash.store_submission("abc123")

    result = controller.success(flash)
    assert isinstance(result, RenderResult)
    assert result.model["reference"] == "abc123"

    assert controller.success(flash) == RedirectResult(location="/feedback")


def test_success_with_error_goes_to_check_answers(controller, flash):
    flash.set_error("boom")
    assert controller.success(flash) == RedirectResult(location="/feedback/check-your-answers")
    assert flash.peek().error is None


def test_success_without_submission_goes_to_start(controller, flash):
    assert controller.success(flash) == RedirectResult(location="/feedback")
