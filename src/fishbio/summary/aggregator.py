"""Group observations into Summary Cells.

One cell per distinct combination of grouping-key values present in the
table. Combinations that never occur are simply absent; filling them is the
job of the densifier.
"""

import logging
from typing import Optional, Sequence

import pandas as pd

from fishbio.contracts import InvalidConfiguration

__all__ = ['aggregate', 'AGGREGATIONS']

logger = logging.getLogger(__name__)

AGGREGATIONS = ("mean", "count", "sum")


def aggregate(
    df: pd.DataFrame,
    keys: Sequence[str],
    value: Optional[str] = None,
    how: str = "mean",
) -> pd.Series:
    """Aggregate a value column over grouping keys.

    Parameters
    ----------
    df : pd.DataFrame
        Observation table. Not modified.
    keys : sequence of str
        Grouping columns, outermost first. The output index follows this order.
    value : str, optional
        Column to aggregate. Required for ``mean`` and ``sum``; ignored for
        ``count``, which counts matching rows.
    how : {"mean", "count", "sum"}
        Aggregation applied within each group.

    Returns
    -------
    pd.Series
        Indexed by the key values (a MultiIndex for more than one key),
        sorted by key. ``mean``/``sum`` give float, ``count`` gives int.
        Named after ``value`` (or ``"count"``).

    Raises
    ------
    InvalidConfiguration
        If a key or value column is missing from ``df``, ``value`` is missing
        for ``mean``/``sum``, or ``how`` is unknown.

    Notes
    -----
    Duplicate observations are combined, never deduplicated. No rounding.
    Rows with a NaN key are not part of any group.

    Examples
    --------
    >>> aggregate(df, ["sex", "date"], "gsi", how="mean")
    sex   date
    F     2020-01    2.0
    M     2020-01    1.5
    Name: gsi, dtype: float64
    """
    keys = list(keys)
    if not keys:
        raise InvalidConfiguration("aggregate() needs at least one grouping key")
    if how not in AGGREGATIONS:
        raise InvalidConfiguration(f"Unknown aggregation '{how}', expected one of {AGGREGATIONS}")

    missing = [k for k in keys if k not in df.columns]
    if missing:
        raise InvalidConfiguration(f"Grouping key column(s) not found: {missing}")

    if how != "count":
        if value is None:
            raise InvalidConfiguration(f"aggregate(how='{how}') requires a value column")
        if value not in df.columns:
            raise InvalidConfiguration(f"Value column not found: '{value}'")

    grouped = df.groupby(keys, observed=True, sort=True)

    if how == "count":
        result = grouped.size().astype("int64")
        result.name = "count"
    elif how == "mean":
        result = grouped[value].mean().astype(float)
    else:
        result = grouped[value].sum().astype(float)

    logger.debug("Aggregated %d rows into %d cells by %s (%s)", len(df), len(result), keys, how)
    return result
