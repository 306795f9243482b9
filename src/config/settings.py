"""Centralized configuration management using Pydantic Settings.

This module provides a single source of truth for all configuration values.
All settings can be overridden via environment variables.
"""

from pathlib import Path
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    """Application settings with environment variable support.
    
    All settings can be overridden via environment variables.
    For example, LLM_MODEL_EXTRACTION=gpt-4o will override the default.
    """
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )
    
    # ========== LLM Configuration ==========
    openai_api_key: Optional[str] = Field(
        default=None,
        description="Credential for the model service; absent means pattern extraction only"
    )
    llm_model_extraction: str = Field(
        default="gpt-4.1-mini",
        description="LLM model for port note extraction"
    )
    llm_provider: str = Field(
        default="openai",
        description="LLM provider (openai, anthropic, etc.)"
    )
    llm_timeout_seconds: float = Field(
        default=30.0,
        description="Timeout for a single model request in seconds"
    )
    llm_max_retries: int = Field(
        default=1,
        description="Client-side retries before the model path is abandoned"
    )
    
    # ========== Extraction Configuration ==========
    extraction_text_truncate_limit: int = Field(
        default=20000,
        description="Maximum characters of a note sent to the model"
    )
    field_max_length: Optional[int] = Field(
        default=4000,
        description="Maximum length of a normalized field value (None disables the cap)"
    )
    strict_mandatory_fields: bool = Field(
        default=False,
        description="Reject records with missing port/terminal instead of using placeholders"
    )
    placeholder_port: str = Field(
        default="UNKNOWN_PORT",
        description="Placeholder used when no port could be extracted"
    )
    placeholder_terminal: str = Field(
        default="UNKNOWN_TERMINAL",
        description="Placeholder used when no terminal could be extracted"
    )
    
    # ========== Storage Configuration ==========
    records_file: Path = Field(
        default=Path("data/port_entries.json"),
        description="JSON file holding ingested port entries"
    )
    list_limit: int = Field(
        default=50,
        description="Number of most recent entries returned by listing"
    )
    
    # ========== Server Configuration ==========
    server_host: str = Field(
        default="0.0.0.0",
        description="Server host address"
    )
    server_port: int = Field(
        default=7860,
        description="Server port number"
    )
    
    # ========== Logging ==========
    log_level: str = Field(
        default="INFO",
        description="Root logging level (DEBUG, INFO, WARNING, ERROR)"
    )
    log_file: Optional[Path] = Field(
        default=None,
        description="Optional log file in addition to console output"
    )
    
    def get_records_path(self, project_dir: Path) -> Path:
        """Get absolute path to the records JSON file.
        
        Args:
            project_dir: Project root directory
            
        Returns:
            Absolute path to the records file
        """
        if self.records_file.is_absolute():
            return self.records_file
        return project_dir / self.records_file


# Global settings instance
# Environment variables will be loaded automatically on first access
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the global settings instance.
    
    Creates and caches a Settings instance on first call.
    Subsequent calls return the cached instance.
    
    Returns:
        Settings instance
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
