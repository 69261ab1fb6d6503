"""Journey constants shared across the SDK.

Route segments, view names and user-facing messages referenced by the
journey, controllers and routes.

Page limits can be overridden via environment variables so deployments can
adjust listings without code changes.
"""

import os

# Segment of the check-your-answers (task list) page under a journey base URL.
CHECK_ANSWERS_SEGMENT = "check-your-answers"

# Segment of the success page under a journey base URL.
SUCCESS_SEGMENT = "success"

# Manage list size.
DEFAULT_PAGE_LIMIT = int(os.getenv("DEFAULT_PAGE_LIMIT", "50"))

# Shown in place of an optional column that was left empty.
NOT_PROVIDED_TEXT = "Not Provided"

# --- Portal messages ---
SAVE_FAILED_MESSAGE = "There was a problem submitting your form. Please try again."

# --- Manage messages ---
DELETE_SUCCESS_MESSAGE = "Form submission deleted successfully"
DELETE_FAILED_MESSAGE = "Failed to delete submission"
RECORD_NOT_FOUND_MESSAGE = "The form submission you are looking for does not exist."

# --- View names understood by the rendering layer ---
VIEW_START = "start"
VIEW_QUESTION = "question"
VIEW_CHECK_ANSWERS = "check_answers"
VIEW_SUCCESS = "success"
VIEW_LIST = "list"
VIEW_DETAIL = "detail"
VIEW_DELETE_CONFIRM = "delete_confirm"
