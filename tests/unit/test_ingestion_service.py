"""Unit tests for the ingestion service and its envelopes."""

import json

import pytest

from src.config.messages import (
    ERROR_INGEST_FAILED,
    ERROR_INVALID_BODY,
    ERROR_LIST_FAILED,
    ERROR_MISSING_TEXT,
)
from src.config.settings import Settings
from src.core.exceptions import InputError, PersistenceError
from src.core.ingestion_service import IngestionService, extract_text
from src.core.model_extractor import ModelExtractor
from src.core.workflow import ExtractionWorkflow
from src.models.schema import NOTE_FIELDS, SUMMARY_FIELDS
from tests.test_fixtures import DISCHARGE_NOTE, SCENARIO_NOTE, failing_model


class BrokenStore:
    """Store whose every operation fails."""
    
    def create(self, record):
        raise PersistenceError("disk full at /secret/path/entries.json")
    
    def list_recent(self, limit=None):
        raise PersistenceError("disk unreadable at /secret/path/entries.json")


class TestExtractText:
    """Test request body handling."""
    
    def test_raw_string(self):
        """Test a raw note body."""
        assert extract_text(SCENARIO_NOTE) == SCENARIO_NOTE
    
    def test_bytes(self):
        """Test a UTF-8 encoded body."""
        assert extract_text("Discharging at São Sebastião".encode("utf-8")) == "Discharging at São Sebastião"
    
    @pytest.mark.parametrize("key", ["text", "rawText", "note"])
    def test_mapping_keys(self, key):
        """Test the primary and alternate text keys."""
        assert extract_text({key: DISCHARGE_NOTE}) == DISCHARGE_NOTE
    
    def test_primary_key_wins(self):
        """Test lookup order."""
        assert extract_text({"note": "second", "text": "first"}) == "first"
    
    @pytest.mark.parametrize("body", [
        {"text": None, "rawText": DISCHARGE_NOTE},
        {"text": "   ", "note": DISCHARGE_NOTE},
        {"text": 42, "rawText": "", "note": DISCHARGE_NOTE},
    ])
    def test_falls_through_to_alternate_key(self, body):
        """Test that an unusable primary key does not hide an alternate."""
        assert extract_text(body) == DISCHARGE_NOTE
    
    def test_json_string(self):
        """Test a JSON object sent as a string."""
        assert extract_text(json.dumps({"text": DISCHARGE_NOTE})) == DISCHARGE_NOTE
    
    def test_brace_prefixed_note(self):
        """Test that a non-JSON body starting with a brace is kept as text."""
        assert extract_text("{draft} 12 m at Santos") == "{draft} 12 m at Santos"
    
    @pytest.mark.parametrize("body", [
        "",
        "   ",
        {},
        {"text": ""},
        {"text": "   "},
        {"text": 42},
        {"text": None},
        {"body": "note under an unknown key"},
        json.dumps({"text": ""}),
    ])
    def test_missing_text(self, body):
        """Test client errors for empty or non-string text."""
        with pytest.raises(InputError) as exc_info:
            extract_text(body)
        assert str(exc_info.value) == ERROR_MISSING_TEXT
    
    @pytest.mark.parametrize("body", [None, 42, ["note"], b"\xff\xfe"])
    def test_invalid_body(self, body):
        """Test client errors for unsupported body types."""
        with pytest.raises(InputError) as exc_info:
            extract_text(body)
        assert str(exc_info.value) == ERROR_INVALID_BODY


class TestIngest:
    """Test the ingestion operation."""
    
    def test_success_envelope(self, offline_service):
        """Test a created entry."""
        response = offline_service.ingest({"text": SCENARIO_NOTE})
        assert response.status_code == 201
        assert response.ok
        assert response.body["success"] is True
        entry = response.body["entry"]
        assert entry["id"] == 1
        assert entry["createdAt"]
        assert entry["terminal"] == "LB212"
        assert entry["loadRatePerDayMt"] == "24000"
        assert entry["operation"] == "Load"
        assert entry["rawText"] == SCENARIO_NOTE
        assert set(NOTE_FIELDS) <= set(entry)
    
    def test_raw_body(self, offline_service):
        """Test a raw string body."""
        response = offline_service.ingest(DISCHARGE_NOTE)
        assert response.status_code == 201
        assert response.body["entry"]["operation"] == "Discharge"
    
    def test_null_text_with_alternate_key(self, offline_service):
        """Test ingestion through rawText when text is null."""
        response = offline_service.ingest({"text": None, "rawText": DISCHARGE_NOTE})
        assert response.status_code == 201
        assert response.body["entry"]["rawText"] == DISCHARGE_NOTE
    
    def test_client_error(self, offline_service, memory_store):
        """Test 400 with nothing stored."""
        response = offline_service.ingest({"text": "  "})
        assert response.status_code == 400
        assert response.body == {"success": False, "error": ERROR_MISSING_TEXT}
        assert memory_store.list_recent() == []
    
    def test_model_failure_still_succeeds(self, offline_settings, memory_store):
        """Test that a failing model degrades to fallback, not to an error."""
        workflow = ExtractionWorkflow(
            model_extractor=ModelExtractor(llm=failing_model(RuntimeError("quota")), settings=offline_settings),
            settings=offline_settings,
        )
        service = IngestionService(workflow=workflow, store=memory_store)
        response = service.ingest(SCENARIO_NOTE)
        assert response.status_code == 201
        assert response.body["entry"]["terminal"] == "LB212"
    
    def test_strict_validation_error(self, memory_store):
        """Test 422 naming the missing fields."""
        settings = Settings(_env_file=None, openai_api_key=None, strict_mandatory_fields=True)
        service = IngestionService(workflow=ExtractionWorkflow(settings=settings), store=memory_store)
        response = service.ingest(DISCHARGE_NOTE)
        assert response.status_code == 422
        assert response.body["success"] is False
        assert "port, terminal" in response.body["error"]
    
    def test_persistence_failure(self, pattern_only_workflow):
        """Test 500 with a generic message and no internal detail."""
        service = IngestionService(workflow=pattern_only_workflow, store=BrokenStore())
        response = service.ingest(SCENARIO_NOTE)
        assert response.status_code == 500
        assert response.body == {"success": False, "error": ERROR_INGEST_FAILED}
        assert "/secret/path" not in json.dumps(response.body)


class TestListEntries:
    """Test the listing operation."""
    
    def test_empty(self, offline_service):
        """Test listing with nothing stored."""
        response = offline_service.list_entries()
        assert response.status_code == 200
        assert response.body == {"entries": []}
    
    def test_newest_first(self, offline_service):
        """Test ordering and full entries."""
        offline_service.ingest(SCENARIO_NOTE)
        offline_service.ingest(DISCHARGE_NOTE)
        entries = offline_service.list_entries().body["entries"]
        assert [e["id"] for e in entries] == [2, 1]
        assert entries[0]["rawText"] == DISCHARGE_NOTE
    
    def test_limit(self, offline_service):
        """Test explicit limit."""
        for _ in range(3):
            offline_service.ingest(SCENARIO_NOTE)
        assert len(offline_service.list_entries(limit=2).body["entries"]) == 2
    
    def test_summary_projection(self, offline_service):
        """Test the listing projection."""
        offline_service.ingest(SCENARIO_NOTE)
        entry = offline_service.list_entries(summary=True).body["entries"][0]
        assert tuple(entry) == SUMMARY_FIELDS
        assert "rawText" not in entry
    
    def test_failure(self, pattern_only_workflow):
        """Test 500 when the store cannot be read."""
        service = IngestionService(workflow=pattern_only_workflow, store=BrokenStore())
        response = service.list_entries()
        assert response.status_code == 500
        assert response.body == {"success": False, "error": ERROR_LIST_FAILED}
