"""Public model re-exports for formflow_journeys.

Consumers should import from ``formflow_journeys.models`` rather than
reaching into sub-modules directly.
"""

# --- Conditions ---
from formflow_journeys.models.condition import Predicate

# --- Validators ---
from formflow_journeys.models.validator import (
    DateValidator,
    EmailValidator,
    MultiFieldRequiredValidator,
    OptionsValidator,
    RequiredValidator,
    StringValidator,
    Validator,
)

# --- Questions ---
from formflow_journeys.models.question import (
    BaseQuestion,
    BooleanQuestion,
    DateQuestion,
    MultiFieldInputQuestion,
    Option,
    QuestionDefinition,
    RadioQuestion,
    SelectQuestion,
    SingleLineInputQuestion,
    SubField,
    TextEntryQuestion,
    question_mapper,
)

# --- Sections / definitions ---
from formflow_journeys.models.section import Section
from formflow_journeys.models.schema import (
    EditableField,
    EditConfig,
    EditMessages,
    JourneyDefinition,
    PersistenceConfig,
)

# --- Modes ---
from formflow_journeys.models.mode import CreateMode, EditMode, JourneyMode

# --- Session / results ---
from formflow_journeys.models.session import (
    Answers,
    AnswerValue,
    CheckAnswersPage,
    ControllerResult,
    ManageFlash,
    NotFoundResult,
    QuestionPage,
    QuestionPayload,
    RedirectResult,
    RenderResult,
    Submission,
    SubmissionFlash,
    SubmissionRecord,
    SummaryRow,
    SummarySection,
)

__all__ = [
    # Conditions
    "Predicate",
    # Validators
    "DateValidator",
    "EmailValidator",
    "MultiFieldRequiredValidator",
    "OptionsValidator",
    "RequiredValidator",
    "StringValidator",
    "Validator",
    # Questions
    "BaseQuestion",
    "BooleanQuestion",
    "DateQuestion",
    "MultiFieldInputQuestion",
    "Option",
    "QuestionDefinition",
    "RadioQuestion",
    "SelectQuestion",
    "SingleLineInputQuestion",
    "SubField",
    "TextEntryQuestion",
    "question_mapper",
    # Sections / definitions
    "Section",
    "EditableField",
    "EditConfig",
    "EditMessages",
    "JourneyDefinition",
    "PersistenceConfig",
    # Modes
    "CreateMode",
    "EditMode",
    "JourneyMode",
    # Session / results
    "Answers",
    "AnswerValue",
    "CheckAnswersPage",
    "ControllerResult",
    "ManageFlash",
    "NotFoundResult",
    "QuestionPage",
    "QuestionPayload",
    "RedirectResult",
    "RenderResult",
    "Submission",
    "SubmissionFlash",
    "SubmissionRecord",
    "SummaryRow",
    "SummarySection",
]
