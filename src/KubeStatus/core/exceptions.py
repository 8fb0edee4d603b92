"""KubeStatus Core Custom Exceptions"""

from __future__ import annotations
import shlex
from typing import Sequence


class KubeStatusError(Exception):
    """Base class for all KubeStatus application-specific exceptions."""


class ConfigurationError(KubeStatusError):
    """Custom exception for configuration errors."""


class KubectlError(KubeStatusError):
    """Raised when a synchronous kubectl invocation exits with a non-zero code."""

    def __init__(self, argv: Sequence[str], returncode: int, output: str) -> None:
        self.argv = list(argv)
        self.returncode = returncode
        self.output = output
        super().__init__(
            f"Command '{shlex.join(self.argv)}' failed with exit code {returncode}:\n{output}"
        )


class KubectlNotFoundError(KubectlError):
    """Raised when the kubectl binary cannot be executed at all."""

    def __init__(self, argv: Sequence[str]) -> None:
        super().__init__(
            argv,
            127,
            f"Executable '{argv[0]}' not found. Please ensure it's installed and in your PATH.",
        )


class MalformedOutputError(KubeStatusError):
    """Raised when kubectl output could not be decoded as the expected JSON."""

    def __init__(self, argv: Sequence[str], output: str, reason: str) -> None:
        self.argv = list(argv)
        self.output = output
        super().__init__(
            f"Error decoding JSON from '{shlex.join(self.argv)}': {reason}\nRaw output: {output}"
        )


class ResourceNotFoundError(KubeStatusError):
    """Raised when a resource kind is not present in the registry."""

    def __init__(self, kind: str) -> None:
        self.kind = kind
        super().__init__(f"Unknown resource kind '{kind}'.")


class OperationNotAllowedError(KubeStatusError):
    """Raised when an operation is not permitted on a resource kind."""

    def __init__(self, kind: str, operation: str) -> None:
        self.kind = kind
        self.operation = operation
        super().__init__(f"'{operation}' is not supported for {kind}.")


class InvalidFilterError(KubeStatusError):
    """Raised when a filter expression cannot be compiled."""


class PathExtractionError(KubeStatusError):
    """Raised when a transform step fails while extracting a cell value."""


class ActionFailedError(KubeStatusError):
    """Raised when an action fails to execute."""


class ActionCancelledError(KubeStatusError):
    """Raised when an action is explicitly cancelled by the user (e.g., at a confirmation prompt)."""


class TerminalLaunchError(KubeStatusError):
    """Raised when a command could not be started in a new tmux window."""
