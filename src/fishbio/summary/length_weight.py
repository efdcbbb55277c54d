"""Length-weight relationship fits, ``W = a * L^b``.

Fitted by ordinary least squares on ``log10(W) = log10(a) + b * log10(L)``.
"""

import logging
from typing import Optional

import numpy as np
import pandas as pd
from scipy import stats

from fishbio.contracts import InvalidConfiguration

__all__ = ['fit_length_weight', 'predict_weight', 'MIN_SAMPLES']

logger = logging.getLogger(__name__)

MIN_SAMPLES = 3

FIT_COLUMNS = ["a", "b", "r_squared", "n"]


def _fit(length: np.ndarray, weight: np.ndarray, label: str, min_samples: int) -> dict:
    valid = np.isfinite(length) & np.isfinite(weight) & (length > 0) & (weight > 0)
    dropped = int((~valid).sum())
    if dropped:
        logger.info("Length-weight %s: excluded %d rows with missing or non-positive measurements", label, dropped)
    n = int(valid.sum())
    if n < min_samples:
        raise InvalidConfiguration(
            f"Length-weight fit for {label} needs at least {min_samples} valid rows, got {n}"
        )
    log_l = np.log10(length[valid])
    log_w = np.log10(weight[valid])
    if np.ptp(log_l) == 0:
        raise InvalidConfiguration(f"Length-weight fit for {label}: all lengths are identical")

    result = stats.linregress(log_l, log_w)
    return {
        "a": float(10 ** result.intercept),
        "b": float(result.slope),
        "r_squared": float(result.rvalue ** 2),
        "n": n,
    }


def fit_length_weight(
    df: pd.DataFrame,
    length: str,
    weight: str,
    by: Optional[str] = None,
    min_samples: int = MIN_SAMPLES,
) -> pd.DataFrame:
    """Fit ``W = a * L^b`` overall or per group.

    Parameters
    ----------
    df : pd.DataFrame
        Observation table.
    length, weight : str
        Measurement columns.
    by : str, optional
        Grouping column (typically sex). One fit per observed level.
    min_samples : int, default 3
        Minimum number of valid rows per fit.

    Returns
    -------
    pd.DataFrame
        Columns ``a``, ``b``, ``r_squared``, ``n``; indexed by the ``by``
        levels, or a single row labelled ``"all"``.

    Raises
    ------
    InvalidConfiguration
        If a column is missing or a group has fewer than ``min_samples``
        positive length/weight pairs.
    """
    for column in [length, weight] + ([by] if by else []):
        if column not in df.columns:
            raise InvalidConfiguration(f"Length-weight column not found: '{column}'")

    if by is None:
        rows = {"all": _fit(df[length].to_numpy(dtype=float), df[weight].to_numpy(dtype=float), "all", min_samples)}
        index_name = "group"
    else:
        rows = {}
        for level, group in df.groupby(by, observed=True, sort=True):
            rows[level] = _fit(
                group[length].to_numpy(dtype=float),
                group[weight].to_numpy(dtype=float),
                f"{by}={level}",
                min_samples,
            )
        if not rows:
            raise InvalidConfiguration(f"Length-weight fit by '{by}' found no groups")
        index_name = by

    fits = pd.DataFrame.from_dict(rows, orient="index", columns=FIT_COLUMNS)
    fits.index.name = index_name
    fits["n"] = fits["n"].astype(int)
    for label, row in fits.iterrows():
        logger.info("Length-weight %s: a=%.4g b=%.3f r2=%.3f n=%d", label, row["a"], row["b"], row["r_squared"], row["n"])
    return fits


def predict_weight(length, a: float, b: float) -> np.ndarray:
    """Weight predicted by ``W = a * L^b``."""
    return a * np.power(np.asarray(length, dtype=float), b)
