#!/usr/bin/env python3
"""GHCN Pivot Pipeline Runner.

Usage:
    python scripts/run_ghcn_pipeline.py scripts/user_config.py
    python scripts/run_ghcn_pipeline.py scripts/user_config.py --element TMIN
    python scripts/run_ghcn_pipeline.py scripts/user_config.py --mode monthly
    python scripts/run_ghcn_pipeline.py --data-dir ghcnd_gsn --base-dir out --max-open-files 20

Note: User config in scripts/user_config.py, expert defaults in
src/ghcnpivot/schemas/param.py
"""

import sys
from pathlib import Path

# Add src to path
project_root = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(project_root / "src"))

from ghcnpivot.cli import main


if __name__ == "__main__":
    sys.exit(main())
