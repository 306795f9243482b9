"""Extraction workflow orchestrator - LangGraph-based port note pipeline."""

from typing import TypedDict, Optional, Dict, Any

from langgraph.graph import StateGraph, START, END

from src.core.exceptions import InputError, ModelExtractionError
from src.core.model_extractor import ModelExtractor
from src.core.pattern_extractor import PatternExtractor
from src.core.validator import RecordValidator
from src.models.schema import PortOperationRecord
from src.models.utils import normalize_payload
from src.config.settings import Settings, get_settings
from src.config.logging_config import get_logger
from src.config.messages import ERROR_MISSING_TEXT

logger = get_logger(__name__)

PATH_MODEL = "model"
PATH_PATTERN = "pattern"


class ExtractionState(TypedDict):
    """State shared between LangGraph nodes.

    Attributes:
        raw_text: Trimmed note text
        payload: Raw payload from whichever extractor succeeded
        extraction_path: "model" or "pattern"
        model_error: Why the model path was abandoned, if it was
        normalized: Payload after field normalization
        record: Final validated record
    """
    raw_text: str
    payload: Optional[Dict[str, Any]]
    extraction_path: str
    model_error: Optional[str]
    normalized: Optional[Dict[str, Optional[str]]]
    record: Optional[PortOperationRecord]


class ExtractionWorkflow:
    """Turn a free-text port note into a PortOperationRecord.

    Graph structure:
    - START -> model_extraction
    - model_extraction -> normalization (payload decoded)
    - model_extraction -> pattern_extraction (UpstreamError / ParseError)
    - pattern_extraction -> normalization
    - normalization -> validation -> END

    Pattern extraction only runs when the model path fails. Model
    failures never leave this class; only InputError (blank note) and
    ValidationError (strict policy) reach the caller.

    The compiled graph holds no per-call data, so one workflow can serve
    concurrent requests.
    """

    def __init__(
        self,
        model_extractor: Optional[ModelExtractor] = None,
        pattern_extractor: Optional[PatternExtractor] = None,
        validator: Optional[RecordValidator] = None,
        settings: Optional[Settings] = None
    ):
        """
        Initialize workflow.

        Args:
            model_extractor: Primary extractor (defaults to one built from config)
            pattern_extractor: Fallback extractor (defaults to the standard rules)
            validator: Record validator (defaults to config policy)
            settings: Settings instance (defaults to global)
        """
        settings = settings or get_settings()
        self.model_extractor = model_extractor or ModelExtractor(settings=settings)
        self.pattern_extractor = pattern_extractor or PatternExtractor()
        self.validator = validator or RecordValidator(settings=settings)
        self.field_max_length = settings.field_max_length

        self.graph = self._build_graph()

    def _build_graph(self):
        graph = StateGraph(ExtractionState)

        graph.add_node("model_extraction", self._model_extraction_node)
        graph.add_node("pattern_extraction", self._pattern_extraction_node)
        graph.add_node("normalization", self._normalization_node)
        graph.add_node("validation", self._validation_node)

        graph.add_edge(START, "model_extraction")
        graph.add_conditional_edges(
            "model_extraction",
            self._route_after_model,
            {PATH_MODEL: "normalization", PATH_PATTERN: "pattern_extraction"}
        )
        graph.add_edge("pattern_extraction", "normalization")
        graph.add_edge("normalization", "validation")
        graph.add_edge("validation", END)

        return graph.compile()

    def _model_extraction_node(self, state: ExtractionState) -> Dict[str, Any]:
        """Try the model path; record the failure instead of raising."""
        try:
            payload = self.model_extractor.parse(state["raw_text"])
        except ModelExtractionError as e:
            logger.warning(f"Model extraction failed ({type(e).__name__}), falling back to patterns")
            logger.debug(f"Model extraction error detail: {e}")
            return {"payload": None, "model_error": f"{type(e).__name__}: {e}"}

        return {"payload": payload, "extraction_path": PATH_MODEL}

    @staticmethod
    def _route_after_model(state: ExtractionState) -> str:
        return PATH_MODEL if state.get("payload") is not None else PATH_PATTERN

    def _pattern_extraction_node(self, state: ExtractionState) -> Dict[str, Any]:
        payload = self.pattern_extractor.parse(state["raw_text"])
        return {"payload": payload, "extraction_path": PATH_PATTERN}

    def _normalization_node(self, state: ExtractionState) -> Dict[str, Any]:
        normalized = normalize_payload(state["payload"], max_length=self.field_max_length)
        return {"normalized": normalized}

    def _validation_node(self, state: ExtractionState) -> Dict[str, Any]:
        record = self.validator.validate(state["normalized"], state["raw_text"])
        return {"record": record}

    def extract(self, raw_text: str) -> PortOperationRecord:
        """
        Extract a structured record from a port note.

        Args:
            raw_text: Note text; surrounding whitespace is trimmed and the
                      result is stored verbatim as the record's raw_text

        Returns:
            PortOperationRecord without id/created_at

        Raises:
            InputError: If the text is not a string or is blank (no model call is made)
            ValidationError: If the validator runs in strict mode and
                             port or terminal is missing
        """
        if not isinstance(raw_text, str) or not raw_text.strip():
            raise InputError(ERROR_MISSING_TEXT)

        initial_state: ExtractionState = {
            "raw_text": raw_text.strip(),
            "payload": None,
            "extraction_path": "",
            "model_error": None,
            "normalized": None,
            "record": None
        }

        result = self.graph.invoke(initial_state)
        record = result["record"]

        logger.info(
            f"Extracted {record.port} / {record.terminal} ({record.operation.value}) "
            f"via {result['extraction_path']} path"
        )

        return record
