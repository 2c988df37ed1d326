"""
Directory setup for the columnizing pipeline.

Layout under the base output directory:

    columns/YYYY/ids.gz       station ids
    columns/YYYY/dates.gz     ISO dates
    columns/YYYY/values.gz    float64 values
    columns/YYYY/raw.bin      staging file (exists only while a run is in progress)
    logs/                     pipeline log files
    gcos_monthly_TMAX.csv.gz  monthly summaries (monthly mode)
"""

from pathlib import Path


def setup_output_directories(base_output_dir):
    """
    Set up the output directory structure.

    Parameters
    ----------
    base_output_dir : str or Path
        Base output directory. Created if missing.

    Returns
    -------
    dict
        Dictionary with paths: 'base', 'columns', 'logs'
    """
    if base_output_dir is None:
        raise ValueError("base_output_dir is required")

    base_output_dir = Path(base_output_dir).expanduser().resolve()

    directories = {
        "base": base_output_dir,
        "columns": base_output_dir / "columns",
        "logs": base_output_dir / "logs",
    }

    for path in directories.values():
        path.mkdir(parents=True, exist_ok=True)

    return directories


def get_partition_dir(output_dirs, year, create=False):
    """
    Get the output directory of one year.

    Parameters
    ----------
    output_dirs : dict
        Output directories from setup_output_directories()
    year : int
        Partition year
    create : bool
        Create the directory if it does not exist

    Returns
    -------
    Path
        columns/YYYY

    Example
    -------
    >>> get_partition_dir(dirs, 1909)
    Path('output/columns/1909')
    """
    path = Path(output_dirs["columns"]) / str(int(year))
    if create:
        path.mkdir(parents=True, exist_ok=True)
    return path


def get_monthly_path(output_dirs, filename_pattern, element):
    """Path of the monthly summary CSV for an element."""
    return Path(output_dirs["base"]) / filename_pattern.format(element=element)
