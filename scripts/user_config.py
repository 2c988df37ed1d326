"""GHCN Pivot User Configuration.

This is the user-facing configuration file. Modify settings here to customize
the pipeline behavior. Expert defaults are in src/ghcnpivot/schemas/param.py

The station files come from the GCOS surface network subset of GHCN-Daily:

    wget ftp://ftp.ncdc.noaa.gov/pub/data/ghcn/daily/ghcnd_gsn.tar.gz
    tar -xzf ghcnd_gsn.tar.gz
    cd ghcnd_gsn && gzip *

Usage:
    python scripts/run_ghcn_pipeline.py scripts/user_config.py
    python scripts/run_ghcn_pipeline.py scripts/user_config.py --element TMIN
    python scripts/run_ghcn_pipeline.py scripts/user_config.py --mode monthly
"""

CONFIG = {
    # ========================================================================
    # PIPELINE MODE & PATHS
    # ========================================================================
    "MODE": "columnize",            # "columnize" or "monthly"
    "DATA_DIR": "./ghcnd_gsn",      # Gzipped station files (*.dly.gz)
    "BASE_DIR": "./ghcn_columns",   # All outputs go here
    "ELEMENT": "TMAX",              # "TMAX" or "TMIN"

    # ========================================================================
    # RESOURCES
    # ========================================================================
    "MAX_OPEN_FILES": 50,                # Station files parsed at once
    "FLUSH_THRESHOLD_BYTES": 10_000_000, # Per-year buffer before flushing to disk
    "EMIT_WORKERS": None,                # None = one per CPU

    # ========================================================================
    # FAILURES & LOGGING
    # ========================================================================
    "ON_FILE_ERROR": "fail_fast",   # "fail_fast" or "skip_file"
    "LOG_LEVEL": "INFO",
}
