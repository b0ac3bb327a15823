"""Application-wide constants and configuration values."""

# Sheet names used by the bound Google Form's response workbook.
RESPONSES_SHEET_NAME = "Form Responses 1"
SETUP_SHEET_NAME = "Setup"

# Setup sheet cells holding the deck locations. Labels live in column A.
TEMPLATE_PPTX_CELL = "B2"
TARGET_PPTX_CELL = "B3"
TEMPLATE_PPTX_LABEL = "Template deck (.pptx):"
TARGET_PPTX_LABEL = "Target deck (.pptx):"

# Number of columns read from each response row (header row excluded).
RESPONSE_COLUMN_COUNT = 10

# Literal placeholder tokens found in the template slide. These match the form question titles.
TEACHER_NAME_PLACEHOLDER = "<<Name of the OC Staff member you are praising:>>"
PRAISE_PLACEHOLDER = (
    "<<Why are they so awesome? This will appear in the email to the recipient.>>"
)
FROM_NAME_PLACEHOLDER = "<<YOUR first and last name:>>"

# Property key under which the processed timestamps are persisted
PROCESSED_TIMESTAMPS_KEY = "processedTimestamps"

# Default filenames inside the per-user folders
STATE_FILENAME = "script_properties.json"
DEFAULT_CONFIG_FILENAME = "praise2slides.toml"
DEFAULT_WORKBOOK_FILENAME = "form_responses.xlsx"

# Status string markers returned by the orchestrator
SUCCESS_MARKER = "✅"
FAILURE_MARKER = "❌"

# Seconds between workbook checks in watch mode
DEFAULT_WATCH_INTERVAL = 30.0

# Fallback for get_debug_mode() in utils
DEBUG_MODE_DEFAULT = False  # Hard-coded default
