"""QuickResearch configuration — loaded from .env via pydantic-settings."""

from pydantic_settings import BaseSettings
from pydantic import Field


class QuickResearchSettings(BaseSettings):
    """All QuickResearch configuration. Reads from .env file and environment variables."""

    # --- Remote research service ---
    research_api_url: str = Field(
        default="https://builder.impromptu-labs.com",
        description="Research service base URL",
    )
    research_api_token: str = Field(
        default="",
        description="Bearer token sent on every request",
    )
    research_app_id: str = Field(
        default="",
        description="Value of the X-Generated-App-ID header",
    )
    research_timeout_seconds: float = Field(default=30.0, description="Per-request HTTP timeout")

    # --- Object lifecycle ---
    research_settle_delay_seconds: float = Field(
        default=3.0,
        description="Wait between submit and fetch while the remote object is processed",
    )
    research_fetch_attempts: int = Field(
        default=1,
        ge=1,
        description="Total fetches per request; >1 re-fetches while text_value is missing",
    )
    research_fetch_backoff: float = Field(
        default=2.0,
        ge=1.0,
        description="Multiplier applied to the settle delay between re-fetches",
    )
    research_object_prefix: str = Field(default="research_", description="Remote object name prefix")

    # --- Audit log ---
    audit_log_max_entries: int | None = Field(
        default=None,
        description="Cap on retained call-log entries (None keeps everything)",
    )

    # --- Logging ---
    log_level: str = Field(default="INFO", description="Log level")
    log_format: str = Field(
        default="console",
        description="Log format: 'console' for dev, 'json' for production",
    )

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


# Singleton — import this everywhere
settings = QuickResearchSettings()
