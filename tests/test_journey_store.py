"""JourneyStore loading tests.

Validates the bundled feedback and create-a-case definitions and the
store's rejection of broken definition directories.
"""

import pytest

from formflow_journeys.store import JourneyStore


def test_store_loads_feedback(store):
    definition = store.get("feedback")
    assert definition.title == "Local Plans Feedback"
    assert [s.url for s in definition.sections] == ["personal", "experience"]
    assert definition.edit_journey_id == "feedback-edit"


def test_edit_allow_list(definition):
    assert [f.question for f in definition.edit.allowed_fields] == [
        "full-name", "email", "rating", "feedback",
    ]
    assert definition.edit.get_field("email").required is False
    assert definition.edit.get_field("want-email") is None
    assert definition.edit.messages.invalid_field == "Invalid form field"


def test_unknown_journey_raises_key_error(store):
    with pytest.raises(KeyError):
        store.get("nope")


def test_missing_directory(tmp_path):
    with pytest.raises(FileNotFoundError):
        JourneyStore(journey_dir=tmp_path / "missing").load()


def test_duplicate_journey_ids(tmp_path, store):
    source = (store._base / "feedback.yaml").read_text(encoding="utf-8")
    (tmp_path / "a.yaml").write_text(source, encoding="utf-8")
    (tmp_path / "b.yaml").write_text(source, encoding="utf-8")
    with pytest.raises(ValueError, match="Duplicate journey id"):
        JourneyStore(journey_dir=tmp_path).load()


def test_duplicate_field_names_rejected(tmp_path):
    (tmp_path / "bad.yaml").write_text(
        """
id: bad
title: Bad
route: /bad
initial_back_link: /bad
sections:
  - name: S
    url: s
    questions:
      - {display_type: single_line_input, field_name: a, title: A, question: "A?", url: one}
      - {display_type: single_line_input, field_name: a, title: A, question: "A?", url: two}
persistence: {table: feedback_submissions, columns: {}}
edit: {allowed_fields: []}
""",
        encoding="utf-8",
    )
    with pytest.raises(ValueError, match="Duplicate field_name"):
        JourneyStore(journey_dir=tmp_path).load()


def test_store_loads_create_a_case(store):
    definition = store.get("create-a-case")
    assert definition.route == "/create-a-case"
    assert definition.manage_route == "/cases"
    assert definition.requires_manage_key is True
    assert definition.persistence.table == "cases"
    assert definition.persistence.is_persisted("leadContactName")
    assert [d.id for d in store.list_journeys()] == ["create-a-case", "feedback"]


def _write_journey(path, edit_block, route="/bad"):
    path.write_text(
        f"""
id: {path.stem}
title: Bad
route: {route}
initial_back_link: {route}
sections:
  - name: S
    url: s
    questions:
      - {{display_type: single_line_input, field_name: a, title: A, question: "A?", url: one}}
      - {{display_type: boolean, field_name: b, title: B, question: "B?", url: two}}
persistence: {{table: feedback_submissions, columns: {{a: col_a}}}}
edit: {edit_block}
""",
        encoding="utf-8",
    )


def test_editable_question_without_column_rejected(tmp_path):
    _write_journey(tmp_path / "bad.yaml", "{allowed_fields: [{question: two}]}")
    with pytest.raises(ValueError, match="has no persisted column"):
        JourneyStore(journey_dir=tmp_path).load()


def test_editable_question_with_column_accepted(tmp_path):
    _write_journey(tmp_path / "ok.yaml", "{allowed_fields: [{question: one}]}")
    store = JourneyStore(journey_dir=tmp_path)
    store.load()
    assert store.get("ok").edit.get_field("one") is not None


def test_duplicate_routes_rejected(tmp_path):
    _write_journey(tmp_path / "first.yaml", "{allowed_fields: []}", route="/same")
    _write_journey(tmp_path / "second.yaml", "{allowed_fields: []}", route="/same")
    with pytest.raises(ValueError, match="Duplicate route"):
        JourneyStore(journey_dir=tmp_path).load()
