"""The one enforcement primitive used by every stage contract."""

from ghcnpivot.contracts.failure import ContractViolation


def require(condition: bool, message: str) -> None:
    """Raise ContractViolation with ``message`` unless ``condition`` holds.

    Called where one stage hands data to the next. There is no recovery
    path: a broken invariant means a bug or corrupt intermediate files.

    Examples
    --------
    >>> require(staging.exists(), "Staging contract violated: no staging file for 1909")
    >>> require(len(ids) == len(values), "Output contract violated: column lengths differ")
    """
    if not condition:
        raise ContractViolation(message)
