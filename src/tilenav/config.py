"""Configuration for a tile browsing session."""

from __future__ import annotations

import os
from typing import Dict, Mapping, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from .errors import ConfigurationError
from .tiles import HttpTileFetcher
from .types import Format

WMTS_URL_ENV = "WMTS_URL"
TIMEOUT_ENV = "TILENAV_TIMEOUT"
RETRIES_ENV = "TILENAV_RETRIES"
LOG_LEVEL_ENV = "TILENAV_LOG_LEVEL"
FORMAT_ENV = "TILENAV_FORMAT"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class NavigatorConfig(BaseModel):
    """Settings needed to start browsing a WMTS."""

    capabilities_url: str = Field(
        ..., min_length=1, description="URL or path of the WMTS capabilities document"
    )
    timeout: int = Field(default=30, gt=0, description="HTTP timeout in seconds")
    retries: int = Field(default=3, ge=0, description="Retries per tile request")
    headers: Dict[str, str] = Field(
        default_factory=dict, description="Additional HTTP headers to include"
    )
    log_level: str = Field(default="INFO", description="Logging level name")
    output_format: Optional[Format] = Field(
        default=None, description="Tile media type sent as the Accept header"
    )

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"Unknown log level: {value}")
        return level

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        **overrides: object,
    ) -> "NavigatorConfig":
        """
        Build a configuration from environment variables.

        Explicit ``overrides`` that are not None take precedence over the
        environment.

        Raises:
            ConfigurationError: If the capabilities location is missing or a value is invalid
        """
        env = os.environ if environ is None else environ

        values: Dict[str, object] = {}
        if env.get(WMTS_URL_ENV):
            values["capabilities_url"] = env[WMTS_URL_ENV]
        if env.get(TIMEOUT_ENV):
            values["timeout"] = env[TIMEOUT_ENV]
        if env.get(RETRIES_ENV):
            values["retries"] = env[RETRIES_ENV]
        if env.get(LOG_LEVEL_ENV):
            values["log_level"] = env[LOG_LEVEL_ENV]
        if env.get(FORMAT_ENV):
            values["output_format"] = env[FORMAT_ENV]
        values.update({key: value for key, value in overrides.items() if value is not None})

        if "capabilities_url" not in values:
            raise ConfigurationError(
                f"No capabilities document given; pass --wmts-url or set {WMTS_URL_ENV}"
            )

        try:
            return cls(**values)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid configuration: {exc}", exc) from exc

    def build_fetcher(self) -> HttpTileFetcher:
        """Create the HTTP tile fetcher described by this configuration."""

        return HttpTileFetcher(
            timeout=self.timeout,
            retries=self.retries,
            headers=dict(self.headers),
            output_format=self.output_format,
        )
