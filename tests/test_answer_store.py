"""AnswerStore and FlashChannel tests over a plain dict session."""

import pytest

from formflow_journeys.answer_store import AnswerStore, FlashChannel


@pytest.fixture
def session():
    return {}


def test_get_unknown_journey_is_empty(session):
    assert AnswerStore(session).get("feedback") == {}


def test_merge_and_get(session):
    store = AnswerStore(session)
    store.merge("feedback", {"fullName": "Ada"})
    answers = store.merge("feedback", {"rating": "good"})
    assert answers == {"fullName": "Ada", "rating": "good"}
    assert store.get("feedback") == answers


def test_get_returns_a_copy(session):
    store = AnswerStore(session)
    store.set("feedback", {"fullName": "Ada"})
    store.get("feedback")["fullName"] = "changed"
    assert store.get("feedback") == {"fullName": "Ada"}


def test_set_replaces_wholesale(session):
    store = AnswerStore(session)
    store.set("feedback", {"fullName": "Ada", "rating": "good"})
    store.set("feedback", {"rating": "poor"})
    assert store.get("feedback") == {"rating": "poor"}


def test_journeys_are_namespaced(session):
    store = AnswerStore(session)
    store.set("feedback", {"rating": "good"})
    store.set("feedback-edit", {"rating": "poor"})
    store.clear("feedback-edit")
    assert store.get("feedback") == {"rating": "good"}
    assert store.get("feedback-edit") == {}


def test_submission_flash_read_clears(session):
    flash = FlashChannel(session)
    flash.store_submission("abc123")
    assert flash.peek().reference == "abc123"

    outcome = flash.read()
    assert outcome.reference == "abc123"
    assert outcome.submitted is True
    assert outcome.error is None
    assert flash.read().reference is None


def test_error_flash_replaces_submission(session):
    flash = FlashChannel(session)
    flash.store_submission("abc123")
    flash.set_error("boom")
    outcome = flash.read()
    assert outcome.error == "boom"
    assert outcome.submitted is False


def test_manage_messages_pop(session):
    flash = FlashChannel(session)
    flash.set_success_message("saved")
    flash.set_error_message("oops")
    messages = flash.pop_messages()
    assert messages.success_message == "saved"
    assert messages.error_message == "oops"
    assert flash.pop_messages().success_message is None
