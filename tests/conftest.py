"""Pytest configuration and shared fixtures."""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import pytest
from src.config.settings import Settings
from src.core.model_extractor import ModelExtractor
from src.core.pattern_extractor import PatternExtractor
from src.core.record_store import RecordStore
from src.core.validator import RecordValidator
from src.core.workflow import ExtractionWorkflow
from src.core.ingestion_service import IngestionService


@pytest.fixture
def offline_settings():
    """Settings with no model credential, ignoring any .env file."""
    return Settings(_env_file=None, openai_api_key=None, llm_provider="openai")


@pytest.fixture
def disabled_model_extractor(offline_settings):
    """Model extractor without credential - always raises UpstreamError."""
    return ModelExtractor(settings=offline_settings)


@pytest.fixture
def pattern_only_workflow(disabled_model_extractor, offline_settings):
    """Workflow whose model path is disabled."""
    return ExtractionWorkflow(
        model_extractor=disabled_model_extractor,
        pattern_extractor=PatternExtractor(),
        validator=RecordValidator(settings=offline_settings),
        settings=offline_settings,
    )


@pytest.fixture
def memory_store():
    """In-memory record store."""
    return RecordStore(path=None, list_limit=50)


@pytest.fixture
def offline_service(pattern_only_workflow, memory_store):
    """Ingestion service running on pattern extraction and an in-memory store."""
    return IngestionService(workflow=pattern_only_workflow, store=memory_store)
