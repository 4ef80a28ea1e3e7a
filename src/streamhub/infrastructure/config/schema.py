"""Pydantic configuration models with validation."""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import (
    AliasChoices,
    AliasPath,
    BaseModel,
    Field,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

Environment = Literal["dev", "test", "prod"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
LogFormat = Literal["json", "console"]


class AggregatorConfig(BaseModel):
    """Primary aggregation API (YAML section: aggregator.*)."""

    base_url: str = Field(
        default="https://pstream.vercel.app",
        description="Base URL of the aggregation API.",
    )
    enabled: bool = Field(
        default=True,
        description="When false, resolution uses registry and fallback only.",
    )


class SubtitleConfig(BaseModel):
    """Subtitle listing service (YAML section: subtitles.*)."""

    base_url: str = Field(
        default="http://localhost:3000",
        description="Base URL of the subtitle listing endpoint.",
    )


class PlayerConfig(BaseModel):
    """Per-session player behaviour (YAML section: player.*)."""

    controls_hide_seconds: float = Field(
        default=3.0,
        description="Inactivity delay before controls hide (seconds).",
    )
    max_retries: int = Field(
        default=3,
        description="Manual retries allowed after a load failure.",
    )
    close_key: str = Field(default="Escape", description="Key that closes a session.")
    controls_key: str = Field(
        default="Space",
        description="Key that re-shows controls and restarts the hide timer.",
    )
    probe_timeout_seconds: float = Field(
        default=5.0,
        description="Timeout for best-effort source availability probes.",
    )

    @field_validator("controls_hide_seconds", "probe_timeout_seconds")
    @classmethod
    def _validate_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("must be > 0")
        return v

    @field_validator("max_retries")
    @classmethod
    def _validate_retries(cls, v: int) -> int:
        if not 0 <= v <= 3:
            raise ValueError("max_retries must be within [0, 3]")
        return v


class ApiConfig(BaseModel):
    """HTTP API bind address (YAML section: api.*)."""

    host: str = Field(default="127.0.0.1", description="Bind host.")
    port: int = Field(default=7700, description="Bind port.")

    @field_validator("port")
    @classmethod
    def _validate_port(cls, v: int) -> int:
        if not 0 < v < 65536:
            raise ValueError("port must be within [1, 65535]")
        return v


class AppConfig(BaseModel):
    """
    Canonical application configuration (validated, final).

    Note:
    - YAML is expected to be sectioned (http/logging/aggregator/subtitles/player/api).
    - Environment variables are handled by EnvOverrides(BaseSettings) to allow strict
      precedence control (defaults < YAML < ENV < CLI) in load.py.
    """

    # General
    app_name: str = Field(default="streamhub", description="Application name.")
    environment: Environment = Field(
        default="dev",
        description="Runtime environment (affects defaults like log format).",
    )

    # HTTP client (YAML section: http.*)
    http_timeout_seconds: float = Field(
        default=15.0,
        validation_alias=AliasChoices(
            "http_timeout_seconds",
            AliasPath("http", "timeout_seconds"),
        ),
        description="Timeout in seconds for aggregator and subtitle calls.",
    )
    http_follow_redirects: bool = Field(
        default=True,
        validation_alias=AliasChoices(
            "http_follow_redirects",
            AliasPath("http", "follow_redirects"),
        ),
        description="Whether HTTP client follows redirects.",
    )
    http_user_agent: str = Field(
        default="StreamHub/0.1.0",
        validation_alias=AliasChoices(
            "http_user_agent",
            AliasPath("http", "user_agent"),
        ),
        description="User-Agent for outgoing HTTP requests.",
    )

    # Logging (YAML section: logging.*)
    log_level: LogLevel = Field(
        default="INFO",
        validation_alias=AliasChoices(
            "log_level",
            AliasPath("logging", "level"),
        ),
        description="Log level.",
    )
    log_format: Optional[LogFormat] = Field(
        default=None,
        validation_alias=AliasChoices(
            "log_format",
            AliasPath("logging", "format"),
        ),
        description=(
            "Log renderer format (console/json). If unset, derived from environment."
        ),
    )

    aggregator: AggregatorConfig = Field(default_factory=AggregatorConfig)
    subtitles: SubtitleConfig = Field(default_factory=SubtitleConfig)
    player: PlayerConfig = Field(default_factory=PlayerConfig)
    api: ApiConfig = Field(default_factory=ApiConfig)

    @field_validator("http_timeout_seconds")
    @classmethod
    def _validate_http_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("http_timeout_seconds must be > 0")
        return v

    @model_validator(mode="after")
    def _derive_defaults(self) -> "AppConfig":
        # Default log format: console in dev/test, json in prod.
        if self.log_format is None:
            self.log_format = "json" if self.environment == "prod" else "console"
        return self

    def to_sectioned_dict(self) -> dict[str, Any]:
        """
        Dump configuration in the sectioned shape used by config.yaml/docs.
        """
        return {
            "app_name": self.app_name,
            "environment": self.environment,
            "http": {
                "timeout_seconds": self.http_timeout_seconds,
                "follow_redirects": self.http_follow_redirects,
                "user_agent": self.http_user_agent,
            },
            "logging": {"level": self.log_level, "format": self.log_format},
            "aggregator": self.aggregator.model_dump(),
            "subtitles": self.subtitles.model_dump(),
            "player": self.player.model_dump(),
            "api": self.api.model_dump(),
        }


class EnvOverrides(BaseSettings):
    """
    Environment-variable overrides (all optional).

    load.py creates EnvOverrides() to read STREAMHUB_* variables, keeps
    the ones that are set, and merges them over YAML/defaults before
    validating AppConfig.

    Supported env var examples (flat, explicit):
    - STREAMHUB_HTTP_TIMEOUT_SECONDS
    - STREAMHUB_AGGREGATOR_BASE_URL
    - STREAMHUB_PLAYER_MAX_RETRIES
    - STREAMHUB_LOG_LEVEL
    """

    model_config = SettingsConfigDict(
        env_prefix="STREAMHUB_",
        extra="ignore",
        case_sensitive=False,
    )

    app_name: Optional[str] = None
    environment: Optional[Environment] = None

    http_timeout_seconds: Optional[float] = None
    http_follow_redirects: Optional[bool] = None
    http_user_agent: Optional[str] = None

    log_level: Optional[LogLevel] = None
    log_format: Optional[LogFormat] = None

    aggregator_base_url: Optional[str] = None
    aggregator_enabled: Optional[bool] = None

    subtitles_base_url: Optional[str] = None

    player_controls_hide_seconds: Optional[float] = None
    player_max_retries: Optional[int] = None
    player_close_key: Optional[str] = None
    player_controls_key: Optional[str] = None
    player_probe_timeout_seconds: Optional[float] = None

    api_host: Optional[str] = None
    api_port: Optional[int] = None

    def to_update_dict(self) -> dict[str, Any]:
        """
        Return only values that were actually provided (non-None), for merging.
        """
        return self.model_dump(exclude_none=True)
