"""Shared exception classes for gitref."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gitref.reference import GitRef


class GitrefError(Exception):
    """Base exception for gitref errors."""


class ParseError(GitrefError):
    """Raised when a URL cannot be turned into a GitRef."""


class InvalidUrlError(ParseError):
    """Raised when the input is not an absolute URL."""


class EmptyPathError(ParseError):
    """Raised when the URL has no path component."""


class UnsupportedHostError(ParseError):
    """Raised when the URL host is not GitHub, GitLab, or Bitbucket."""


class MalformedPathError(ParseError):
    """Raised when the URL path does not follow the provider's layout."""


class MalformedRawPathError(MalformedPathError):
    """Raised when a raw GitHub URL is not <owner>/<repo>/<branch>/<file>."""


class UnknownPathKeywordError(MalformedPathError):
    """Raised when the path keyword (tree, blob, src, raw) is not recognized."""


class IncompletePathError(MalformedPathError):
    """Raised when the path has a keyword section but not all of its parts."""


class TransportError(GitrefError):
    """Raised when an HTTP request fails or returns a non-2xx status."""

    def __init__(self, message: str, url: str = "", status_code: int | None = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class AuthProbeFailedError(GitrefError):
    """Raised when a token cannot be validated against the provider API.

    ``ref`` holds the reference with its token cleared.
    """

    def __init__(self, message: str, ref: GitRef | None = None):
        super().__init__(message)
        self.ref = ref


class DestinationMissingError(GitrefError):
    """Raised when the clone destination directory does not exist."""


class UnsupportedCommandError(GitrefError):
    """Raised when the process runner is asked to run anything but git."""


class CommandExecutionError(GitrefError):
    """Raised when a command exits non-zero or cannot be started."""

    def __init__(self, message: str, returncode: int | None = None, output: bytes = b""):
        super().__init__(message)
        self.returncode = returncode
        self.output = output


class CloneFailedError(GitrefError):
    """Raised when git clone fails."""

    def __init__(self, message: str, token_used: bool = False):
        super().__init__(message)
        self.token_used = token_used


class UnsupportedTargetError(GitrefError):
    """Raised when a URL does not point to a file on a supported provider."""


class ConfigParseError(GitrefError):
    """Raised when gitref.toml cannot be parsed."""


class ConfigValidationError(GitrefError):
    """Raised when gitref.toml contains invalid configuration."""


class ResourceNotFoundError(GitrefError):
    """Raised when the referenced path doesn't exist in the cloned repo."""
