"""
Resourceful — Application Configuration
=========================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads RESOURCEFUL_* environment variables (or a .env
       file), validates them, and exposes a singleton `settings` object.
Who:   Read by the response adapter (default format), the request adapter
       (method override header), the dispatcher (envelope and transition
       table defaults) and the application factory (log level).
When:  Loaded once at module import time.

Dispatcher defaults derived from these settings are frozen into a
`DispatcherConfig` (see resourceful.schemas.dispatch); changing the settings
object after controllers have been constructed has no effect on them.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator


# Kept in sync with resourceful.http.formatters.ResponseFormat
_KNOWN_FORMATS = {"raw", "html", "json", "jsonp", "xml"}


class Settings(BaseSettings):
    """
    Settings loaded from environment variables.

    Every field has a default suitable for development; nothing is required.
    """

    # ── Logging ───────────────────────────────────────────────────────────
    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    # ── Request ───────────────────────────────────────────────────────────
    # Header that overrides the transport method (tunnelling PUT/DELETE
    # through POST for clients that cannot send them)
    method_override_header: str = Field(default="X-HTTP-Method-Override")

    # ── Response ──────────────────────────────────────────────────────────
    default_format: str = Field(default="json")

    # ── Envelope ──────────────────────────────────────────────────────────
    # Output key names for the three envelope slots
    envelope_code_field: str = Field(default="code", min_length=1)
    envelope_message_field: str = Field(default="message", min_length=1)
    envelope_body_field: str = Field(default="data", min_length=1)

    # Drop empty collections/strings from the body slot when packing
    omit_empty_body: bool = Field(default=False)

    # Pack controller json() output into the envelope by default
    body_format: bool = Field(default=False)

    # ── Dispatch ──────────────────────────────────────────────────────────
    # "strict": DELETE without an id is a routing miss
    # "collection-delete": DELETE without an id dispatches deleteAll
    transition_table: str = Field(default="strict")

    model_config = SettingsConfigDict(
        env_prefix="RESOURCEFUL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    @field_validator("default_format")
    @classmethod
    def validate_default_format(cls, v: str) -> str:
        lower = v.lower()
        if lower not in _KNOWN_FORMATS:
            raise ValueError(
                f"Invalid default_format '{v}'. Must be one of: {sorted(_KNOWN_FORMATS)}"
            )
        return lower

    @field_validator("transition_table")
    @classmethod
    def validate_transition_table(cls, v: str) -> str:
        lower = v.lower()
        if lower not in {"strict", "collection-delete"}:
            raise ValueError(
                f"Invalid transition_table '{v}'. Must be 'strict' or 'collection-delete'"
            )
        return lower


# Singleton instance — imported throughout the package
settings = Settings()
