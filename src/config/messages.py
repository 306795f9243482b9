"""User-facing messages and error strings.

This module centralizes all user-facing messages. Internal detail (model
content, exception text) never goes into these strings.
"""

# Error Messages
ERROR_MISSING_TEXT = "Missing required field 'text' (non-empty string)."
ERROR_INVALID_BODY = "Body must be a non-empty string or a JSON object with field 'text'."
ERROR_VALIDATION_FAILED = "Extracted record is missing mandatory fields: {fields}."
ERROR_INGEST_FAILED = "Internal server error while ingesting. See server logs."
ERROR_LIST_FAILED = "Internal server error while listing entries. See server logs."

# Status Messages
STATUS_SAVED = "Saved entry #{id}: {port} / {terminal} ({operation})."
STATUS_NO_ENTRIES = "No entries yet."

# Body keys accepted by the ingestion operation, in lookup order
TEXT_FIELD_KEYS = ("text", "rawText", "note")
