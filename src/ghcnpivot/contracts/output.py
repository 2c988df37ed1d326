"""Output stage contract.

Enforces the guarantee that each year's column triple is sorted by
(station, year, month, day) and that the three columns are index-aligned.
"""

import numpy as np
from ghcnpivot.contracts.base import require

SORT_FIELDS = ("station", "year", "month", "day")


def assert_sorted(records: np.ndarray) -> None:
    """Enforce ascending composite-key order.

    Parameters
    ----------
    records : np.ndarray
        Structured array with the staging record fields, after sorting

    Raises
    ------
    ContractViolation
        If any adjacent pair is out of order
    """
    if len(records) < 2:
        return

    first = records[SORT_FIELDS[0]]
    less = first[:-1] < first[1:]
    equal = first[:-1] == first[1:]
    for name in SORT_FIELDS[1:]:
        col = records[name]
        less |= equal & (col[:-1] < col[1:])
        equal &= col[:-1] == col[1:]

    bad = np.flatnonzero(~(less | equal))
    require(
        bad.size == 0,
        f"Output contract violated: records out of order at index "
        f"{int(bad[0]) if bad.size else -1}"
    )


def assert_aligned(ids, dates, values) -> None:
    """Enforce equal length of the three output columns.

    Raises
    ------
    ContractViolation
        If the columns differ in length
    """
    require(
        len(ids) == len(dates) == len(values),
        f"Output contract violated: column lengths differ "
        f"(ids={len(ids)}, dates={len(dates)}, values={len(values)})"
    )
