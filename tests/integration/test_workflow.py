"""Integration tests for the complete ingestion flow."""

import json
import os

import pytest

from scripts import ingest_notes
from src.config.settings import Settings
from src.core.ingestion_service import IngestionService
from src.core.model_extractor import ModelExtractor
from src.core.record_store import RecordStore
from src.core.workflow import ExtractionWorkflow
from tests.test_fixtures import (
    BRIEFING_NOTE,
    BUNKER_NOTE,
    DISCHARGE_NOTE,
    MODEL_PAYLOAD,
    SCENARIO_NOTE,
    fake_model,
)


class TestIngestionFlow:
    """Test service, workflow and file store together."""
    
    @pytest.fixture
    def settings(self):
        return Settings(_env_file=None, openai_api_key=None)
    
    @pytest.fixture
    def store_path(self, tmp_path):
        return tmp_path / "data" / "port_entries.json"
    
    def make_service(self, settings, store_path, llm=None):
        workflow = ExtractionWorkflow(
            model_extractor=ModelExtractor(llm=llm, settings=settings),
            settings=settings,
        )
        return IngestionService(workflow=workflow, store=RecordStore(store_path, list_limit=50))
    
    def test_mixed_paths_persist(self, settings, store_path):
        """Test a model answer, a malformed answer and a fallback in one store."""
        llm = fake_model(MODEL_PAYLOAD, "{port: LB}", {"operation": "Bunker", "port": "Fujairah"})
        service = self.make_service(settings, store_path, llm)
        
        assert service.ingest({"text": BRIEFING_NOTE}).body["entry"]["port"] == "Santos"
        fallback = service.ingest(SCENARIO_NOTE).body["entry"]
        assert fallback["terminal"] == "LB212"
        assert fallback["port"] == "UNKNOWN_PORT"
        bunker = service.ingest({"rawText": BUNKER_NOTE}).body["entry"]
        assert bunker["operation"] == "Bunker"
        assert bunker["terminal"] == "UNKNOWN_TERMINAL"
        
        data = json.loads(store_path.read_text(encoding="utf-8"))
        assert [e["id"] for e in data["entries"]] == [1, 2, 3]
        assert data["entries"][0]["maxDraftMeters"] == "12.5"
        
        reopened = IngestionService(
            workflow=ExtractionWorkflow(model_extractor=ModelExtractor(settings=settings), settings=settings),
            store=RecordStore(store_path),
        )
        entries = reopened.list_entries().body["entries"]
        assert [e["port"] for e in entries] == ["Fujairah", "UNKNOWN_PORT", "Santos"]
        assert entries[2]["rawText"] == BRIEFING_NOTE
    
    def test_offline_flow(self, settings, store_path):
        """Test that everything works with no model credential at all."""
        service = self.make_service(settings, store_path)
        for note in (SCENARIO_NOTE, DISCHARGE_NOTE, BUNKER_NOTE):
            assert service.ingest(note).status_code == 201
        operations = [e["operation"] for e in service.list_entries(summary=True).body["entries"]]
        assert operations == ["Bunker", "Discharge", "Load"]


class TestBatchScript:
    """Test the batch ingestion script."""
    
    def test_split_notes(self):
        """Test separator handling and blank block removal."""
        text = f"{SCENARIO_NOTE}\n---\n{DISCHARGE_NOTE}\n\n  -----  \n\n---\n"
        notes = ingest_notes.split_notes(text)
        assert len(notes) == 2
        assert notes[0].strip() == SCENARIO_NOTE
        assert notes[1].strip() == DISCHARGE_NOTE
    
    def test_main(self, tmp_path, monkeypatch, capsys):
        """Test ingesting a notes file offline."""
        notes_file = tmp_path / "notes.txt"
        notes_file.write_text(f"{SCENARIO_NOTE}\n---\n{DISCHARGE_NOTE}\n", encoding="utf-8")
        
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        monkeypatch.setenv("RECORDS_FILE", str(tmp_path / "entries.json"))
        monkeypatch.setattr(ingest_notes.sys, "argv", ["ingest_notes.py", str(notes_file)])
        monkeypatch.setattr("src.config.settings._settings", None)
        ingest_notes.main()
        
        output = capsys.readouterr().out
        assert "Ingested 2/2 notes" in output
        assert "LB212" in output
        assert (tmp_path / "entries.json").exists()
    
    def test_main_missing_file(self, tmp_path, monkeypatch):
        """Test exit status for a missing notes file."""
        monkeypatch.setattr(ingest_notes.sys, "argv", ["ingest_notes.py", str(tmp_path / "missing.txt")])
        with pytest.raises(SystemExit) as exc_info:
            ingest_notes.main()
        assert exc_info.value.code == 1


@pytest.mark.skipif(not os.getenv("OPENAI_API_KEY"), reason="OPENAI_API_KEY not set")
class TestLiveModel:
    """Test against the configured model service."""
    
    def test_briefing_note(self, tmp_path):
        """Test a real extraction of the briefing template."""
        settings = Settings()
        service = IngestionService(
            workflow=ExtractionWorkflow(settings=settings),
            store=RecordStore(tmp_path / "entries.json"),
        )
        response = service.ingest(BRIEFING_NOTE)
        assert response.status_code == 201
        entry = response.body["entry"]
        assert entry["operation"] == "Load"
        assert "TGG" in entry["terminal"]
