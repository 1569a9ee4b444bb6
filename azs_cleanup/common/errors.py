"""
Error types raised by the cleanup tool.

Every failure the tool knows how to report derives from CleanupError so the
CLI entry point can log it and pick an exit code without a traceback.
"""

from typing import List, Optional


class CleanupError(Exception):
    """Base class for all expected cleanup failures."""


class ConfigurationError(CleanupError):
    """One or more required environment variables are not set."""

    def __init__(self, missing: List[str]):
        self.missing = list(missing)
        super().__init__(
            f"please set/export the following environment variables: {','.join(self.missing)}"
        )


class UsageError(CleanupError):
    """Positional command-line arguments are missing or unexpected ones were given."""

    def __init__(self, program: str = "azs-cleanup", detail: Optional[str] = None):
        self.program = program
        self.detail = detail
        message = (
            "Please provide the resource group and the storage account name by executing "
            f'the script as follows: "{program} <resourceGroupName> <storageAccountName>".'
        )
        if detail:
            message = f"{detail}. {message}"
        super().__init__(message)


class NetworkError(CleanupError):
    """The metadata endpoint could not be reached or returned an error status."""

    def __init__(self, url: str, cause: Optional[BaseException] = None, status_code: Optional[int] = None):
        self.url = url
        self.cause = cause
        self.status_code = status_code
        if status_code is not None:
            message = f"Metadata request to {url} failed with HTTP {status_code}"
        else:
            message = f"Metadata request to {url} failed: {cause}"
        super().__init__(message)


class ParseError(CleanupError):
    """The metadata response body is not valid JSON."""


class MalformedMetadataError(CleanupError):
    """The metadata document does not have the expected shape."""


class AuthenticationError(CleanupError):
    """The identity provider refused the service principal credentials."""


class OperationError(CleanupError):
    """A delete operation against the management API failed."""

    def __init__(self, resource_type: str, resource_name: str, cause: BaseException):
        self.resource_type = resource_type
        self.resource_name = resource_name
        self.cause = cause
        super().__init__(f"Failed to delete {resource_type} '{resource_name}': {cause}")
