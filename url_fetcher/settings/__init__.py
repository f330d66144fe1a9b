"""Fetcher settings loading."""

from .app import FetcherSettings, get_settings


__all__ = ["FetcherSettings", "get_settings"]
