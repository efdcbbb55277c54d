"""
Directory setup for the summary pipeline.

Flat layout under one base directory:
- summaries/  CSV tables, one or more per analysis
- plots/      rendered figures
- logs/       one log file per run
- runtime_config.json at the base
"""

from pathlib import Path
from datetime import datetime, timezone


def setup_output_directories(base_output_dir=None):
    """
    Set up organized output directory structure.

    Parameters
    ----------
    base_output_dir : str or Path, optional
        Base output directory. If None, uses ./fishbio_output.

    Returns
    -------
    dict
        Dictionary with paths: 'base', 'summaries', 'plots', 'logs'
    """
    if base_output_dir is None:
        base_output_dir = Path.cwd() / "fishbio_output"

    base_output_dir = Path(base_output_dir).expanduser().resolve()

    directories = {
        "base": base_output_dir,
        "summaries": base_output_dir / "summaries",
        "plots": base_output_dir / "plots",
        "logs": base_output_dir / "logs",
    }

    for path in directories.values():
        path.mkdir(parents=True, exist_ok=True)

    return directories


def make_run_id(now=None):
    """Timestamp used to name the files of one run, e.g. ``20240305_141500``."""
    now = now or datetime.now(timezone.utc)
    return now.strftime("%Y%m%d_%H%M%S")


def get_summary_path(output_dirs, analysis, suffix=None):
    """
    Get the CSV path for a summary table.

    Parameters
    ----------
    output_dirs : dict
        Output directories from setup_output_directories()
    analysis : str
        Analysis name, e.g. 'maturity'
    suffix : str, optional
        Extra name part, e.g. a sex label for per-sex tables

    Returns
    -------
    Path
        summaries/<analysis>[_<suffix>].csv

    Example
    -------
    >>> get_summary_path(dirs, 'maturity', 'Female')
    Path('output/summaries/maturity_female.csv')
    """
    name = analysis if suffix is None else f"{analysis}_{_slug(suffix)}"
    return Path(output_dirs["summaries"]) / f"{name}.csv"


def get_plot_path(output_dirs, analysis, output_format="png", suffix=None):
    """
    Get the figure path for an analysis.

    Returns
    -------
    Path
        plots/<analysis>[_<suffix>].<format>
    """
    name = analysis if suffix is None else f"{analysis}_{_slug(suffix)}"
    return Path(output_dirs["plots"]) / f"{name}.{output_format}"


def get_log_path(output_dirs, run_id=None):
    """
    Get the log file path for a run.

    Returns
    -------
    Path
        logs/fishbio_<run_id>.log
    """
    log_dir = Path(output_dirs["logs"])
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir / f"fishbio_{run_id or make_run_id()}.log"


def _slug(text):
    return "".join(c if c.isalnum() else "_" for c in str(text).strip().lower())
