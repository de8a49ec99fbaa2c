from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlparse

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


logger = logging.getLogger(__name__)


class RunConfig(BaseModel):
    """Parameters of one validation run.

    Always fully populated: a submission missing any field is rejected rather
    than merged with a previous config. Accepts snake_case names, the camelCase
    names used by the settings view, and the legacy ``targetArticles``/``url``.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", str_strip_whitespace=True)

    target_count: int = Field(
        ge=1,
        validation_alias=AliasChoices("target_count", "targetCount", "targetArticles"),
        serialization_alias="targetCount",
    )
    source_url: str = Field(
        min_length=1,
        validation_alias=AliasChoices("source_url", "sourceUrl", "url"),
        serialization_alias="sourceUrl",
    )
    max_retries: int = Field(
        ge=0,
        validation_alias=AliasChoices("max_retries", "maxRetries"),
        serialization_alias="maxRetries",
    )
    retry_delay_ms: int = Field(
        ge=0,
        validation_alias=AliasChoices("retry_delay_ms", "retryDelayMs"),
        serialization_alias="retryDelayMs",
    )
    navigation_timeout_ms: int = Field(
        ge=1,
        validation_alias=AliasChoices("navigation_timeout_ms", "navigationTimeoutMs"),
        serialization_alias="navigationTimeoutMs",
    )
    report_path: str = Field(
        min_length=1,
        validation_alias=AliasChoices("report_path", "reportPath"),
        serialization_alias="reportPath",
    )

    @field_validator("source_url")
    @classmethod
    def _check_url(cls, value: str) -> str:
        parsed = urlparse(value)
        if parsed.scheme not in {"http", "https"} or not parsed.netloc:
            raise ValueError(f"Invalid URL: {value}")
        return value

    def to_wire(self) -> Dict[str, Any]:
        """camelCase record as exchanged with the settings view"""
        return self.model_dump(by_alias=True)


class Settings(BaseSettings):
    """Process configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="HN_VALIDATOR_",
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = Field(default="Hacker News Sort Validator")
    debug: bool = Field(default=False)

    # Browser
    headless: bool = Field(default=False)
    interactive: bool = Field(default=True)  # settings/report views in the browser
    browser_channel: Optional[str] = None  # e.g. "chrome"; None = bundled Chromium

    # Seed values for the first settings view
    default_target_count: int = Field(default=100)
    default_source_url: str = Field(default="https://news.ycombinator.com/newest")
    default_max_retries: int = Field(default=3)
    default_retry_delay_ms: int = Field(default=2000)
    default_navigation_timeout_ms: int = Field(default=15000)
    default_report_path: str = Field(default="report.html")

    def default_run_config(self) -> RunConfig:
        return RunConfig(
            target_count=self.default_target_count,
            source_url=self.default_source_url,
            max_retries=self.default_max_retries,
            retry_delay_ms=self.default_retry_delay_ms,
            navigation_timeout_ms=self.default_navigation_timeout_ms,
            report_path=self.default_report_path,
        )


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()


class ConfigStore:
    """Holds the active RunConfig for a lifecycle.

    The active value is only replaced wholesale, and only when a submission
    moves the lifecycle from CONFIGURING to COLLECTING.
    """

    def __init__(self, defaults: RunConfig):
        self._defaults = defaults
        self._active = defaults

    @property
    def defaults(self) -> RunConfig:
        return self._defaults

    @property
    def active(self) -> RunConfig:
        return self._active

    @staticmethod
    def parse_submission(payload: Mapping[str, Any]) -> RunConfig:
        """Validate a full config record; raises pydantic.ValidationError."""
        return RunConfig.model_validate(dict(payload))

    def replace(self, config: RunConfig) -> RunConfig:
        previous = self._active
        self._active = config
        if previous != config:
            logger.debug(f"Active config replaced: {config.to_wire()}")
        return config
