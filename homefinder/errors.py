"""Exceptions shared across the HomeFinder backend."""

from __future__ import annotations


class HomeFinderError(Exception):
    """Base class for recoverable HomeFinder errors."""


class DataSourceUnavailable(HomeFinderError):
    """The record store could not be reached or answered with a failure.

    Callers surface this as a retryable state; nothing retries automatically.
    """

    def __init__(self, message: str, source: str = "records") -> None:
        super().__init__(message)
        self.source = source


__all__ = ["HomeFinderError", "DataSourceUnavailable"]
