"""Exception taxonomy for deployments."""

from typing import Dict, List, Optional

from c8ctl.core.models import ProblemDetail


class DeploymentError(Exception):
    """Base class for every fatal deployment condition."""


class PreconditionError(DeploymentError):
    """Raised before any network call when the input cannot be deployed."""


class DuplicateDefinitionError(DeploymentError):
    """Raised when two or more files share a process or decision id.

    Attributes:
        duplicates: Definition id mapped to every contributing file path
    """

    def __init__(self, duplicates: Dict[str, List[str]]) -> None:
        self.duplicates = duplicates
        ids = ", ".join(sorted(duplicates))
        super().__init__(
            f"Cannot deploy: Multiple files with the same process/decision ID ({ids})"
        )


class TransportError(DeploymentError):
    """The cluster could not be reached.

    Attributes:
        code: One of refused, host-unreachable, reset, timed-out, aborted,
            or None when the failure could not be narrowed down
    """

    def __init__(self, message: str, code: Optional[str] = None) -> None:
        self.code = code
        super().__init__(message)


class ApiError(DeploymentError):
    """The cluster answered with an error status."""

    def __init__(self, status_code: int, problem: ProblemDetail) -> None:
        self.status_code = status_code
        self.problem = problem
        super().__init__(problem.title or f"HTTP {status_code}")


class UnknownError(DeploymentError):
    """Any other failure during submission, surfaced with its raw message."""
