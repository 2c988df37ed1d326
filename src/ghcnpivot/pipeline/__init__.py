"""Pipeline modules.

- ingest: Bounded concurrent station file ingest
- orchestrator: Main pipeline controller
"""

from ghcnpivot.pipeline.ingest import FileResult, IngestController
from ghcnpivot.pipeline.orchestrator import PipelineOrchestrator

__all__ = [
    "FileResult",
    "IngestController",
    "PipelineOrchestrator",
]
