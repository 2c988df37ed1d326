"""`ghcnpivot` - pivot GHCN-Daily station files into yearly column vectors.

Subpackages:
- ghcn: Line parsing, staging, column codec, sort-and-emit, monthly summaries
- pipeline: Ingest controller and orchestrator
- schemas: Layered pydantic configuration
- contracts: Fail-fast stage invariants
"""

__version__ = "0.1.0"
