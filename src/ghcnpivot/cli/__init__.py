"""Command-line interface modules for ghcnpivot pipeline execution.

This package contains core execution logic, making scripts/ optional and deletable.
"""

from ghcnpivot.cli.run_pipeline import run_pipeline, main

__all__ = ['run_pipeline', 'main']
