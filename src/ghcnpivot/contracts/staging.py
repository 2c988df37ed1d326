"""Staging stage contract.

Enforces the guarantee that a year's staging file exists when the
sort-and-emit stage asks for it and holds a whole number of records.
"""

from pathlib import Path
from ghcnpivot.contracts.base import require


def assert_staging_records(path: Path, nbytes: int, itemsize: int) -> None:
    """Enforce staging stage contract.

    Parameters
    ----------
    path : Path
        Staging file being read (for the error message)

    nbytes : int
        Size of the file in bytes

    itemsize : int
        Size of one encoded observation

    Raises
    ------
    ContractViolation
        If the file size is not a multiple of the record size (torn write
        or foreign file)
    """
    require(
        nbytes % itemsize == 0,
        f"Staging contract violated: {path} holds {nbytes} bytes, "
        f"not a multiple of the {itemsize}-byte record"
    )
