"""Error types surfaced by the quickstart pipeline."""

from __future__ import annotations


class QuickstartError(Exception):
    """Base error carrying the process exit code for the CLI."""

    kind = "error"
    exit_code = 1


class ConfigurationError(QuickstartError):
    """A required option is missing or unusable."""

    kind = "configuration"
    exit_code = 2


class NetworkError(QuickstartError):
    """The completion request timed out or never reached the server."""

    kind = "network"
    exit_code = 3


class ApiError(QuickstartError):
    """The provider answered with an error status or an unusable body."""

    kind = "api"
    exit_code = 4


class FileAccessError(QuickstartError):
    """The working directory itself could not be read."""

    kind = "file_access"
    exit_code = 5
