#!/usr/bin/env python3
""" Pydantic models for configuration validation """

from typing import List, Optional

from pydantic import Field, HttpUrl, field_validator

from .pydantics import StrictBaseModel, JsonFileLoader

# Public API - functions and classes that external scripts should use
__all__ = [
    'SettingsModel',
    'ConfigurationLoader',
    'load_configuration'
]


class SettingsModel(StrictBaseModel):
    """ Root configuration model, every field has a working default """
    debug: bool = Field(
        default=False,
        description="Debug mode flag"
    )
    api_base: HttpUrl = Field(
        default="https://studio-api.suno.ai",
        validate_default=True,
        description="Base URL of the Suno studio API"
    )
    clerk_base: HttpUrl = Field(
        default="https://clerk.suno.com",
        validate_default=True,
        description="Base URL of the Clerk identity provider"
    )
    jsdelivr_base: HttpUrl = Field(
        default="https://data.jsdelivr.com",
        validate_default=True,
        description="Base URL used to look up the latest clerk-js version"
    )
    default_model: str = Field(
        default="chirp-v3-5",
        description="Model identifier used when a request names none",
        min_length=1
    )
    feed_threshold: int = Field(
        default=10,
        description="Credits required before a feed fetch runs on the active account",
        ge=0
    )
    generation_threshold: int = Field(
        default=44,
        description="Credits required before a generation runs on the active account",
        ge=0
    )
    poll_window_ms: int = Field(
        default=100000,
        description="How long to wait for generated clips before returning the last snapshot",
        gt=0
    )
    initial_poll_delay_seconds: int = Field(
        default=5,
        description="Delay between submission and the first status fetch",
        ge=0
    )
    poll_interval_seconds: List[int] = Field(
        default_factory=lambda: [3, 6],
        description="Random delay range between status fetches",
        min_length=1,
        max_length=2
    )
    keep_alive_delay_seconds: List[int] = Field(
        default_factory=lambda: [1, 2],
        description="Random delay range after a blocking token renewal",
        min_length=1,
        max_length=2
    )
    lyrics_poll_seconds: int = Field(
        default=2,
        description="Fixed delay between lyric status fetches",
        ge=0
    )
    lyrics_timeout_seconds: Optional[int] = Field(
        default=None,
        description="Give up waiting for lyrics after this long (unbounded when unset)",
        gt=0
    )
    submit_timeout_seconds: float = Field(
        default=10,
        description="HTTP timeout for generation and concatenation submissions",
        gt=0
    )
    feed_timeout_seconds: float = Field(
        default=3,
        description="HTTP timeout for feed fetches",
        gt=0
    )
    request_timeout_seconds: Optional[float] = Field(
        default=None,
        description="HTTP timeout for every other call (no timeout when unset)",
        gt=0
    )
    request_retries: int = Field(
        default=0,
        description="Automatic retries for a failed HTTP call",
        ge=0
    )
    credentials_file: str = Field(
        default="credentials.json",
        description="Path of the JSON credential store",
        min_length=1
    )

    @field_validator('poll_interval_seconds', 'keep_alive_delay_seconds')
    @classmethod
    def validate_delay_range(cls, v: List[int]) -> List[int]:
        """ Ensure delay bounds are non-negative """
        for bound in v:
            if bound < 0:
                raise ValueError("Delay bounds cannot be negative")
        return v

    @property
    def api_url(self) -> str:
        """ API base without a trailing slash """
        return str(self.api_base).rstrip("/")

    @property
    def clerk_url(self) -> str:
        """ Clerk base without a trailing slash """
        return str(self.clerk_base).rstrip("/")

    @property
    def jsdelivr_url(self) -> str:
        """ jsDelivr base without a trailing slash """
        return str(self.jsdelivr_base).rstrip("/")


class ConfigurationLoader(JsonFileLoader):
    """ Loader for configuration files """

    def __init__(self, file_path: str):
        """ Initialize the configuration loader """
        super().__init__(file_path, SettingsModel, allow_missing=True)

    @property
    def data(self) -> SettingsModel:
        """ Get read-only access to the structured configuration data """
        return self._data


# Convenience function for loading configuration files
load_configuration = JsonFileLoader.create_loader_function(ConfigurationLoader, "configuration.json")
