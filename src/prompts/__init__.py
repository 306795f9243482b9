"""Prompts for the port notes system."""

from src.prompts.extraction_prompts import PORT_NOTE_EXTRACTION_PROMPT, render_field_schema

__all__ = [
    "PORT_NOTE_EXTRACTION_PROMPT",
    "render_field_schema",
]
