"""Application settings loaded from environment variables."""

from __future__ import annotations

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings

DEFAULT_TIMEOUT_SECONDS = 30.0
MAX_OUTPUT_BYTES = 1024 * 1024


class Settings(BaseSettings):
    model_config = {"env_prefix": "SHELLGATE_", "populate_by_name": True}

    skip_permissions: bool = Field(
        default=False,
        validation_alias=AliasChoices("SHELLGATE_SKIP_PERMISSIONS", "SKIP_BASH_PERMISSIONS"),
        description="Skip interactive consent for non-blocked commands",
    )
    default_timeout: float = Field(
        default=DEFAULT_TIMEOUT_SECONDS,
        gt=0,
        description="Wall-clock execution timeout in seconds",
    )
    max_output_bytes: int = Field(
        default=MAX_OUTPUT_BYTES,
        gt=0,
        description="Per-stream output ceiling in bytes",
    )
    prompt_timeout: float | None = Field(
        default=None,
        gt=0,
        description="Optional bound on the consent prompt wait in seconds",
    )
    log_level: str = Field(default="INFO", description="Logging level")
    display_max_lines: int = Field(
        default=200,
        ge=0,
        description="Lines of command output shown by the CLI (0 = unlimited)",
    )
