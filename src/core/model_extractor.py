"""Model extraction - parses a port note with a chat model into a raw JSON payload."""

import json
from typing import Any, Dict, Optional

from langchain.chat_models import init_chat_model
from langchain_core.runnables import Runnable

from src.core.exceptions import ParseError, UpstreamError
from src.models.schema import FIELD_ATTRIBUTES, NOTE_FIELDS
from src.prompts.extraction_prompts import PORT_NOTE_EXTRACTION_PROMPT
from src.config.settings import Settings, get_settings
from src.config.env_loader import load_environment_variables
from src.config.logging_config import get_logger

# Load environment variables
load_environment_variables()

logger = get_logger(__name__)

# Fixed at the minimum, never read from settings
EXTRACTION_TEMPERATURE = 0

# Providers whose credential must be present before a client is built
_CREDENTIAL_PROVIDERS = {"openai"}

_KNOWN_KEYS = set(NOTE_FIELDS) | set(FIELD_ATTRIBUTES.values())


def decode_model_content(content: Optional[str]) -> Dict[str, Any]:
    """Decode model output into a mapping.

    Only syntax and envelope shape are checked here; field values are
    left exactly as the model produced them.

    Args:
        content: Text content of the model response

    Returns:
        Decoded JSON object

    Raises:
        ParseError: If content is empty, not JSON, not an object, or an
            object sharing no keys with the record schema
    """
    if content is None or not content.strip():
        raise ParseError("Model returned empty content")

    try:
        decoded = json.loads(content)
    except json.JSONDecodeError as e:
        raise ParseError(f"Model returned malformed JSON: {e}") from e

    if not isinstance(decoded, dict):
        raise ParseError(f"Model returned JSON {type(decoded).__name__}, expected object")

    if not _KNOWN_KEYS.intersection(decoded):
        raise ParseError("Model returned an object with none of the expected fields")

    return decoded


def _content_text(response: Any) -> Optional[str]:
    content = response.content if hasattr(response, "content") else response
    if content is None or isinstance(content, str):
        return content
    # Some providers return a list of content blocks
    if isinstance(content, list):
        parts = []
        for block in content:
            if isinstance(block, str):
                parts.append(block)
            elif isinstance(block, dict) and isinstance(block.get("text"), str):
                parts.append(block["text"])
        return "".join(parts)
    return str(content)


class ModelExtractor:
    """Extract a raw payload from a port note using a chat model.

    Sends exactly one request per note, at the minimum temperature, with
    a system prompt that spells out every field and the closed operation
    enumeration and demands bare JSON. The response is decoded into a
    mapping and returned unvalidated.

    Both failure types are recoverable; the extraction workflow reacts
    to either by switching to pattern extraction:
    - UpstreamError: no credential, quota, network failure, timeout
    - ParseError: the model answered with something that is not a JSON object

    When no credential is configured the extractor is built disabled and
    every call raises UpstreamError without touching the network.
    """

    def __init__(
        self,
        llm: Optional[Runnable] = None,
        llm_model: str = None,
        llm_provider: str = None,
        settings: Optional[Settings] = None
    ):
        """
        Initialize the extractor.

        Args:
            llm: Pre-built chat model or runnable (skips client construction)
            llm_model: LLM model to use for extraction (defaults to config)
            llm_provider: LLM provider (defaults to config)
            settings: Settings to read limits and credentials from (defaults to global)
        """
        settings = settings or get_settings()
        self.truncate_limit = settings.extraction_text_truncate_limit

        if llm is None:
            llm = self._build_llm(
                llm_model or settings.llm_model_extraction,
                llm_provider or settings.llm_provider,
                settings
            )

        self.llm = llm
        self.chain = PORT_NOTE_EXTRACTION_PROMPT | llm if llm is not None else None

    @property
    def enabled(self) -> bool:
        """Whether a model client is available."""
        return self.chain is not None

    @staticmethod
    def _build_llm(llm_model: str, llm_provider: str, settings: Settings) -> Optional[Runnable]:
        """Build the chat model client, or None when it cannot be configured.

        Args:
            llm_model: Model name
            llm_provider: LangChain provider name
            settings: Settings holding credential, timeout and retries

        Returns:
            Chat model, or None if the credential is missing or the client
            could not be constructed
        """
        kwargs: Dict[str, Any] = {
            "temperature": EXTRACTION_TEMPERATURE,
            "timeout": settings.llm_timeout_seconds,
            "max_retries": settings.llm_max_retries,
        }

        if llm_provider in _CREDENTIAL_PROVIDERS:
            if not settings.openai_api_key:
                logger.warning("No model credential configured - all notes will use pattern extraction")
                return None
            kwargs["api_key"] = settings.openai_api_key

        try:
            llm = init_chat_model(llm_model, model_provider=llm_provider, **kwargs)
        except Exception as e:
            logger.warning(f"Could not initialize {llm_provider}:{llm_model} - all notes will use pattern extraction")
            logger.debug(f"Model client error: {e!r}")
            return None

        logger.info(f"Model extraction enabled ({llm_provider}:{llm_model})")
        return llm

    def parse(self, raw_text: str) -> Dict[str, Any]:
        """
        Extract a raw payload from a note.

        Args:
            raw_text: Note text (truncated to the configured limit before sending)

        Returns:
            Decoded JSON object as produced by the model

        Raises:
            UpstreamError: If the model is not configured or the request fails
            ParseError: If the response is not a usable JSON object
        """
        if self.chain is None:
            raise UpstreamError("Model service not configured (missing credential)")

        try:
            response = self.chain.invoke({"note_text": raw_text[:self.truncate_limit]})
        except Exception as e:
            raise UpstreamError(f"Model request failed: {type(e).__name__}: {e}") from e

        content = _content_text(response)

        try:
            return decode_model_content(content)
        except ParseError:
            logger.debug(f"Unparseable model content: {content!r}")
            raise
