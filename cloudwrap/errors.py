"""
Exception types raised by cloudwrap.
"""

from typing import Optional, Sequence


class CloudwrapError(Exception):
    """Base class for every error surfaced to the CLI."""


class BackendError(CloudwrapError):
    """A call to Parameter Store or Secrets Manager failed."""
    operation = "backend call"

    def __init__(self, cause: Exception):
        self.cause = cause
        super().__init__(f"{self.operation} failed: {cause}")


class DescribeParametersError(BackendError):
    operation = "DescribeParameters"


class GetParametersError(BackendError):
    operation = "GetParametersByPath"


class ListSecretsError(BackendError):
    operation = "ListSecrets"


class GetSecretValueError(BackendError):
    operation = "GetSecretValue"


class PaginationLimitError(CloudwrapError):
    """The backend kept returning a continuation token past the page bound."""

    def __init__(self, operation: str, max_pages: int):
        self.operation = operation
        self.max_pages = max_pages
        super().__init__(f"{operation} still returned a NextToken after {max_pages} pages")


class InvalidKeyError(CloudwrapError):
    """No secret exists under the requested path."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"invalid key: no secret named {path}")


class MissingFieldError(CloudwrapError):
    """A record lacks a field that the requested output needs."""

    def __init__(self, record: str, field: str):
        self.record = record
        self.field = field
        super().__init__(f"{record} has no {field}")


class OutputFileError(CloudwrapError):
    """Writing the env file failed."""


class ShellConfigError(CloudwrapError):
    """A secret could not be parsed as a Postgres connection config."""


class ExecError(CloudwrapError):
    """A spawned command could not start or exited non-zero."""

    def __init__(self, command: Sequence[str], returncode: Optional[int] = None, reason: Optional[str] = None):
        self.command = list(command)
        self.returncode = returncode
        if reason is None:
            reason = f"exited with status {returncode}"
        super().__init__(f"exec error: {' '.join(self.command)} {reason}")
