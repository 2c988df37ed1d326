"""Centralized failure policy for the pipeline.

Contract violations fail fast, loud, and once. Station file failures go
through a single decision point whose behaviour is chosen by FailurePolicy.
"""

from enum import Enum


class FailurePolicy(str, Enum):
    """Failure policy for station file errors.

    FAIL_FAST (default): Abort the run on the first unreadable or malformed file
    SKIP_FILE: Log the failure, drop that file's observations, keep going
    """
    FAIL_FAST = "fail_fast"
    SKIP_FILE = "skip_file"


class ContractViolation(RuntimeError):
    """Raised when a pipeline contract is violated.

    This indicates a bug in pipeline logic or corrupted intermediate data,
    not bad user input. It means a pipeline stage did not produce the
    invariants it promised.

    Key distinction:
    - ValueError: User/config error (handled by Pydantic)
    - MalformedLineError: Unusable station record (fatal for its file)
    - ContractViolation: Pipeline bug or corrupt staging data
    """
    pass


class IngestError(RuntimeError):
    """Raised when a station file fails under the fail-fast policy."""

    def __init__(self, path, message: str):
        self.path = path
        super().__init__(f"{path}: {message}")
