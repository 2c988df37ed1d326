"""Pipeline contracts - fail-fast enforcement of stage invariants.

Contracts fail immediately and loudly when pipeline stages don't produce
their promised invariants.

Key principle:
- Pydantic validates config correctness
- Contracts validate pipeline correctness
- The line parser handles record-level data quality
"""

from ghcnpivot.contracts.failure import ContractViolation, FailurePolicy, IngestError
from ghcnpivot.contracts.base import require
from ghcnpivot.contracts.staging import assert_staging_records
from ghcnpivot.contracts.output import assert_sorted, assert_aligned

__all__ = [
    "ContractViolation",
    "FailurePolicy",
    "IngestError",
    "require",
    "assert_staging_records",
    "assert_sorted",
    "assert_aligned",
]
