"""GHCN-Daily processing modules.

- parser: Fixed-width line parsing into observations
- reader: Station file discovery and reading
- staging: Per-year buffers and staging files
- columns: Gzipped column vector codec
- emitter: Sort-and-emit of yearly column triples
- monthly: Monthly mean summaries
"""

from ghcnpivot.ghcn.parser import GhcnLineParser, MalformedLineError, Observation
from ghcnpivot.ghcn.staging import PartitionStore
from ghcnpivot.ghcn.emitter import ColumnEmitter
from ghcnpivot.ghcn.monthly import MonthlySummary

__all__ = [
    "GhcnLineParser",
    "MalformedLineError",
    "Observation",
    "PartitionStore",
    "ColumnEmitter",
    "MonthlySummary",
]
