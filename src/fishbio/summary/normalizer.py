"""Column-wise percentage normalisation of count matrices."""

import logging

import numpy as np
import pandas as pd

from fishbio.contracts import require

__all__ = ['percent_by_column']

logger = logging.getLogger(__name__)


def percent_by_column(counts: pd.DataFrame) -> pd.DataFrame:
    """Rescale each column of a count matrix to sum to 100.

    Columns whose counts are all zero stay all zero instead of becoming NaN.

    Parameters
    ----------
    counts : pd.DataFrame
        Non-negative counts, e.g. maturity stages (rows) by date (columns).

    Returns
    -------
    pd.DataFrame
        Float percentages with the same index and columns.

    Raises
    ------
    ContractViolation
        If any count is negative or missing.

    Examples
    --------
    >>> percent_by_column(pd.DataFrame({"2020-01": [0, 4, 6, 0, 0]}))["2020-01"].tolist()
    [0.0, 40.0, 60.0, 0.0, 0.0]
    """
    values = counts.to_numpy(dtype=float)
    require(not np.isnan(values).any(), "Percent contract violated: missing counts")
    require(bool((values >= 0).all()), "Percent contract violated: negative counts")

    totals = values.sum(axis=0)
    empty = totals == 0
    with np.errstate(divide="ignore", invalid="ignore"):
        percent = np.where(empty, 0.0, values * 100.0 / np.where(empty, 1.0, totals))

    if empty.any():
        logger.debug("%d of %d columns have no observations; left at 0%%", int(empty.sum()), len(totals))
    return pd.DataFrame(percent, index=counts.index, columns=counts.columns)
