"""Exception types shared by the relay service and the client loop."""

from __future__ import annotations


class BlogsmithError(Exception):
    """Base class for every error raised by blogsmith."""


class ConfigurationError(BlogsmithError):
    """Required configuration (e.g. the upstream credential) is missing."""


class GenerationError(BlogsmithError):
    """Blog post generation could not be started or completed."""


class UpstreamError(GenerationError):
    """The upstream chat-completion service failed or returned a non-2xx status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class GenerationCancelled(BlogsmithError):
    """The user stopped an in-flight generation."""
