"""Resolve GitHub, GitLab, and Bitbucket URLs and fetch what they point to."""

from gitref.access import AccessClassifier
from gitref.clone import GitCloner
from gitref.config import GitrefConfig
from gitref.exceptions import (
    AuthProbeFailedError,
    CloneFailedError,
    CommandExecutionError,
    ConfigParseError,
    ConfigValidationError,
    DestinationMissingError,
    EmptyPathError,
    GitrefError,
    IncompletePathError,
    InvalidUrlError,
    MalformedPathError,
    MalformedRawPathError,
    ParseError,
    ResourceNotFoundError,
    TransportError,
    UnknownPathKeywordError,
    UnsupportedCommandError,
    UnsupportedHostError,
    UnsupportedTargetError,
)
from gitref.extractor import ResourceExtractor, download_resources_to_dest
from gitref.log import configure_logging
from gitref.reference import GitRef, new_git_ref, parse_git_url
from gitref.runner import CommandType, ProcessRunner, SubprocessRunner
from gitref.transport import HttpxTransport, Transport

__version__ = "0.1.0"

__all__ = [
    # Parsing
    "GitRef",
    "parse_git_url",
    "new_git_ref",
    # Access
    "AccessClassifier",
    "Transport",
    "HttpxTransport",
    # Cloning
    "GitCloner",
    "CommandType",
    "ProcessRunner",
    "SubprocessRunner",
    # Extraction
    "ResourceExtractor",
    "download_resources_to_dest",
    # Config and logging
    "GitrefConfig",
    "configure_logging",
    # Errors
    "GitrefError",
    "ParseError",
    "InvalidUrlError",
    "EmptyPathError",
    "UnsupportedHostError",
    "MalformedPathError",
    "MalformedRawPathError",
    "UnknownPathKeywordError",
    "IncompletePathError",
    "TransportError",
    "AuthProbeFailedError",
    "DestinationMissingError",
    "UnsupportedCommandError",
    "CommandExecutionError",
    "CloneFailedError",
    "UnsupportedTargetError",
    "ResourceNotFoundError",
    "ConfigParseError",
    "ConfigValidationError",
]
