"""Fetcher settings powered by Pydantic BaseSettings."""

from typing import Annotated, Any

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from url_fetcher.fetch.config import FetchOptions
from url_fetcher.fetch.constants import (
    DEFAULT_MAX_SIZE_BYTES,
    DEFAULT_OPEN_TIMEOUT_SECONDS,
    DEFAULT_READ_TIMEOUT_SECONDS,
    MAX_ATTEMPTS,
)


class FetcherSettings(BaseSettings):
    """Process-wide fetch defaults read from the environment.

    Every field maps to ``URL_FETCHER_<FIELD>`` (e.g.
    ``URL_FETCHER_READ_TIMEOUT=5``), optionally from a ``.env`` file.
    """

    model_config = SettingsConfigDict(
        env_prefix="URL_FETCHER_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    open_timeout: Annotated[float, Field(gt=0)] = DEFAULT_OPEN_TIMEOUT_SECONDS
    read_timeout: Annotated[float, Field(gt=0)] = DEFAULT_READ_TIMEOUT_SECONDS
    max_size_bytes: Annotated[int, Field(ge=0)] = DEFAULT_MAX_SIZE_BYTES
    max_redirects: Annotated[int, Field(ge=0, le=100)] = MAX_ATTEMPTS
    verify_tls: bool = False
    user_agent: str | None = None

    def to_options(self, **overrides: Any) -> FetchOptions:
        """Build FetchOptions from these settings.

        Args:
            **overrides: FetchOptions fields that take precedence.

        Returns:
            FetchOptions carrying the configured defaults.
        """
        values: dict[str, Any] = {
            "open_timeout": self.open_timeout,
            "read_timeout": self.read_timeout,
            "max_size_bytes": self.max_size_bytes,
            "max_redirects": self.max_redirects,
            "verify_tls": self.verify_tls,
        }
        if self.user_agent:
            values["headers"] = {"User-Agent": self.user_agent}
        values.update(overrides)
        return FetchOptions(**values)


def get_settings() -> FetcherSettings:
    """Get a settings instance."""
    return FetcherSettings()
