"""Journey modes: whether a journey collects a new response or edits a record.

Navigation targets (back link, next target) are pure functions of the mode.
The ``JourneyMode`` union uses ``kind`` as its discriminator.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class CreateMode(BaseModel):
    """Collect a new response into the session, one question at a time."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["create"] = "create"


class EditMode(BaseModel):
    """Change one field of a persisted record, then return to its detail page."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["edit"] = "edit"
    record_id: str
    detail_url: str


JourneyMode = Annotated[Union[CreateMode, EditMode], Field(discriminator="kind")]
