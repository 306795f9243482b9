"""Ingestion and listing operations - envelope layer between callers and the pipeline."""

import json
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from src.core.exceptions import InputError, ValidationError
from src.core.record_store import RecordStore
from src.core.workflow import ExtractionWorkflow
from src.config.logging_config import get_logger
from src.config.messages import (
    ERROR_INGEST_FAILED,
    ERROR_INVALID_BODY,
    ERROR_LIST_FAILED,
    ERROR_MISSING_TEXT,
    ERROR_VALIDATION_FAILED,
    TEXT_FIELD_KEYS,
)

logger = get_logger(__name__)


class IngestionResponse(BaseModel):
    """Outcome of an ingestion or listing call.

    Attributes:
        status_code: HTTP-equivalent status (201, 200, 400, 422, 500)
        body: Envelope - {"success": True, "entry": {...}},
              {"success": False, "error": "..."} or {"entries": [...]}
    """
    status_code: int = Field(description="HTTP-equivalent status code")
    body: Dict[str, Any] = Field(description="Response envelope")

    @property
    def ok(self) -> bool:
        return self.status_code < 400


def extract_text(body: Any) -> str:
    """Pull the note text out of a request body.

    Accepted shapes:
    - a raw string (or UTF-8 bytes) holding the note itself
    - a string holding a JSON object, treated like the mapping form
    - a mapping with "text" (or "rawText" / "note")

    Args:
        body: Request body

    Returns:
        Note text, untrimmed

    Raises:
        InputError: If no non-empty string text can be found
    """
    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError as e:
            raise InputError(ERROR_INVALID_BODY) from e

    if isinstance(body, str) and body.lstrip().startswith("{"):
        try:
            decoded = json.loads(body)
        except json.JSONDecodeError:
            decoded = None
        if isinstance(decoded, dict):
            body = decoded

    if isinstance(body, str):
        text = body
    elif isinstance(body, dict):
        # First key holding non-blank text
        text = next(
            (body[k] for k in TEXT_FIELD_KEYS if isinstance(body.get(k), str) and body[k].strip()),
            None,
        )
    else:
        raise InputError(ERROR_INVALID_BODY)

    if not isinstance(text, str) or not text.strip():
        raise InputError(ERROR_MISSING_TEXT)

    return text


class IngestionService:
    """Run notes through the extraction workflow and persist the results.

    Maps pipeline outcomes onto response envelopes:
    - InputError -> 400 with the specific message
    - ValidationError (strict policy) -> 422 naming the missing fields
    - anything else, including PersistenceError -> 500 with a generic
      message; the detail is logged, never returned
    """

    def __init__(
        self,
        workflow: Optional[ExtractionWorkflow] = None,
        store: Optional[RecordStore] = None
    ):
        """
        Initialize the service.

        Args:
            workflow: Extraction workflow (defaults to one built from config)
            store: Record store (defaults to the configured JSON file)
        """
        self.workflow = workflow or ExtractionWorkflow()
        self.store = store or RecordStore.from_settings()

    def ingest(self, body: Any) -> IngestionResponse:
        """
        Extract and store one note.

        Args:
            body: Raw note string, JSON string, or mapping with a text field

        Returns:
            IngestionResponse with the created entry or an error envelope
        """
        try:
            text = extract_text(body)
            record = self.workflow.extract(text)
            stored = self.store.create(record)
        except InputError as e:
            logger.info(f"Rejected ingestion: {e}")
            return IngestionResponse(status_code=400, body={"success": False, "error": str(e)})
        except ValidationError as e:
            logger.info(f"Rejected ingestion: {e}")
            message = ERROR_VALIDATION_FAILED.format(fields=", ".join(e.missing_fields))
            return IngestionResponse(status_code=422, body={"success": False, "error": message})
        except Exception:
            logger.exception("Ingestion failed")
            return IngestionResponse(status_code=500, body={"success": False, "error": ERROR_INGEST_FAILED})

        return IngestionResponse(status_code=201, body={"success": True, "entry": stored.to_entry()})

    def list_entries(self, limit: int = None, summary: bool = False) -> IngestionResponse:
        """
        List the most recent entries, newest first.

        Args:
            limit: Maximum number of entries (defaults to the store's limit)
            summary: Return only the listing projection instead of full entries

        Returns:
            IngestionResponse with {"entries": [...]}
        """
        try:
            records = self.store.list_recent(limit)
        except Exception:
            logger.exception("Listing failed")
            return IngestionResponse(status_code=500, body={"success": False, "error": ERROR_LIST_FAILED})

        entries = [record.to_summary() if summary else record.to_entry() for record in records]
        return IngestionResponse(status_code=200, body={"entries": entries})
