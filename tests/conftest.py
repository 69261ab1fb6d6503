import pytest

from formflow_journeys.journey import Journey
from formflow_journeys.store import JourneyStore

# A complete set of answers for the bundled feedback journey.
COMPLETE_ANSWERS = {
    "fullName": "Ada Lovelace",
    "wantToProvideEmail": True,
    "email": "ada@example.com",
    "rating": "good",
    "feedback": "Clear and quick.",
}


@pytest.fixture(scope="session")
def store():
    """Load the bundled journey definitions once for the test session."""
    s = JourneyStore()
    s.load()
    return s


@pytest.fixture(scope="session")
def definition(store):
    return store.get("feedback")


@pytest.fixture
def journey(definition):
    return Journey(definition, base_url="/feedback")


@pytest.fixture
def complete_answers():
    return dict(COMPLETE_ANSWERS)
