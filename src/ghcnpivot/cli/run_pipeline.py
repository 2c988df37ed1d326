"""Core pipeline execution logic and command-line entry point.

``run_pipeline`` does the work; ``main`` only parses arguments.
"""

import sys
import json
import runpy
import shutil
import argparse
import logging
from pathlib import Path
from typing import Optional, Dict, Any

from pydantic import ValidationError

from ghcnpivot.contracts import ContractViolation, IngestError
from ghcnpivot.setup_directories import setup_output_directories
from ghcnpivot.pipeline.orchestrator import PipelineOrchestrator
from ghcnpivot.schemas import resolve_config, ParamConfig, UserConfig, CLIConfig


logger = logging.getLogger(__name__)


def load_user_config_dict(config_path: str) -> dict:
    """Execute a Python config file and return its ``CONFIG`` dict, unvalidated.

    Raises
    ------
    FileNotFoundError
        If the file does not exist
    ValueError
        If the file defines no ``CONFIG*`` dict
    """
    path = Path(config_path)
    if not path.is_file():
        raise FileNotFoundError(f"User config not found: {path}")

    namespace = runpy.run_path(str(path))
    for name in sorted(namespace):
        if name.startswith("CONFIG") and isinstance(namespace[name], dict):
            return namespace[name]

    raise ValueError(f"No CONFIG dict found in {path}")


def run_pipeline(
    user_config_path: Optional[str] = None,
    cli_args: Optional[Dict[str, Any]] = None,
    rerun: bool = False,
    verbose: bool = False,
) -> dict:
    """Execute the GHCN pipeline.

    1. Loads and resolves configuration (Param < User < CLI)
    2. Optionally deletes the output directory if rerun=True
    3. Sets up output directories
    4. Runs the orchestrator to completion

    Parameters
    ----------
    user_config_path : str, optional
        Path to user config file (Python file with CONFIG dict).

    cli_args : dict, optional
        CLI argument overrides. Keys: mode, data_dir, base_dir, element,
        max_open_files, flush_threshold_bytes, emit_workers, on_file_error,
        log_level. All optional.

    rerun : bool, optional
        If True, delete the output directory before running.

    verbose : bool, optional
        If True, enable DEBUG logging and print full resolved config.

    Returns
    -------
    dict
        Run statistics from ``PipelineOrchestrator.start()``.

    Examples
    --------
    Run with CLI overrides only::

        run_pipeline(cli_args={"data_dir": "/data/ghcnd_gsn",
                               "base_dir": "/scratch/ghcn", "element": "TMIN"})
    """
    param_cfg = ParamConfig()

    user_cfg = UserConfig()
    if user_config_path:
        user_cfg = UserConfig.model_validate(load_user_config_dict(user_config_path))

    cli_args = dict(cli_args or {})
    if verbose and "log_level" not in cli_args:
        cli_args["log_level"] = "DEBUG"

    cli_dict = {k: v for k, v in cli_args.items() if v is not None}
    cli_cfg = CLIConfig.model_validate(cli_dict) if cli_dict else CLIConfig()

    config = resolve_config(param_cfg, user_cfg, cli_cfg)
    if not config.base_dir:
        raise ValueError("base_dir is required (config BASE_DIR or --base-dir)")

    if rerun:
        base_dir_path = Path(config.base_dir)
        if base_dir_path.exists():
            print(f"Cleaning output directory: {base_dir_path}")
            shutil.rmtree(base_dir_path)

    output_dirs = setup_output_directories(config.base_dir)

    print(f"\n{'='*60}")
    print("GHCN Pivot Pipeline")
    print('='*60)
    print(f"Config:  {user_config_path or '(defaults)'}")
    print(f"Mode:    {config.mode}")
    print(f"Element: {config.reader.element}")
    print(f"Input:   {config.reader.data_dir}")
    print(f"Output:  {config.base_dir}")
    print('='*60)

    if verbose:
        print("\nFull Internal Configuration:")
        print(json.dumps(config.model_dump(), indent=2))
        print('='*60)

    orchestrator = PipelineOrchestrator(config, output_dirs)
    return orchestrator.start()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ghcnpivot",
        description="Pivot GHCN-Daily station files into yearly column vectors",
    )
    parser.add_argument("config", nargs="?", help="Path to user config file")
    parser.add_argument("--mode", choices=["columnize", "monthly"], help="Override mode")
    parser.add_argument("--data-dir", help="Directory of station files")
    parser.add_argument("--base-dir", help="Output directory")
    parser.add_argument("--element", type=str.upper, choices=["TMAX", "TMIN"],
                        help="Temperature element to extract")
    parser.add_argument("--max-open-files", type=int, help="Station files parsed at once")
    parser.add_argument("--flush-threshold", type=int, dest="flush_threshold_bytes",
                        help="Per-year buffer size in bytes before flushing to disk")
    parser.add_argument("--emit-workers", type=int, help="Parallel sort-and-emit workers")
    parser.add_argument("--on-file-error", choices=["fail_fast", "skip_file"],
                        help="Abort on a bad station file, or skip it")
    parser.add_argument("--rerun", action="store_true", help="Delete output directory before running")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv=None) -> int:
    """Command-line entry point. Returns the process exit status."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )

    cli_args = {
        "mode": args.mode,
        "data_dir": args.data_dir,
        "base_dir": args.base_dir,
        "element": args.element,
        "max_open_files": args.max_open_files,
        "flush_threshold_bytes": args.flush_threshold_bytes,
        "emit_workers": args.emit_workers,
        "on_file_error": args.on_file_error,
    }

    try:
        stats = run_pipeline(args.config, cli_args, rerun=args.rerun, verbose=args.verbose)
    except (IngestError, ContractViolation, ValidationError, ValueError, OSError) as e:
        logger.error("Pipeline failed: %s", e)
        return 1

    if args.verbose:
        print(json.dumps(stats, indent=2, default=str))
    return 0


if __name__ == "__main__":
    sys.exit(main())
