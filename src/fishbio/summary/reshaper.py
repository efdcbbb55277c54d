"""Long <-> wide reshaping of densified Summary Cells.

Long form: one row per (row key, column key) cell. Wide form: row key
levels down the index, column key levels across. Both directions neither
introduce nor lose cells.
"""

import logging
from typing import Optional, Sequence

import pandas as pd

from fishbio.contracts import InvalidConfiguration, require

__all__ = ['long_to_wide', 'wide_to_long']

logger = logging.getLogger(__name__)


def long_to_wide(
    series: pd.Series,
    row: str,
    column: str,
    row_order: Optional[Sequence] = None,
    column_order: Optional[Sequence] = None,
) -> pd.DataFrame:
    """Pivot a two-key series into a row x column matrix.

    Parameters
    ----------
    series : pd.Series
        Densified cells indexed by a two-level MultiIndex containing ``row``
        and ``column``.
    row : str
        Index level placed down the rows.
    column : str
        Index level placed across the columns.
    row_order : sequence, optional
        Canonical row order (e.g. maturity ``I..V``). Defaults to sorted.
    column_order : sequence, optional
        Column order. Defaults to sorted, which is chronological for dates.

    Returns
    -------
    pd.DataFrame
        ``index.name == row``, ``columns.name == column``.

    Raises
    ------
    InvalidConfiguration
        If ``row``/``column`` are not index levels, or a value falls outside
        ``row_order``/``column_order``.
    ContractViolation
        If the pivot has holes, i.e. the input was not densified.
    """
    names = list(series.index.names)
    for level in (row, column):
        if level not in names:
            raise InvalidConfiguration(f"'{level}' is not an index level of {names}")
    if len(names) != 2:
        raise InvalidConfiguration(f"long_to_wide() needs exactly two index levels, got {names}")

    present_rows = series.index.get_level_values(row).unique()
    present_cols = series.index.get_level_values(column).unique()

    if row_order is None:
        row_order = sorted(present_rows)
    else:
        outside = [v for v in present_rows if v not in set(row_order)]
        if outside:
            raise InvalidConfiguration(f"Row values {outside} are not in the canonical order {list(row_order)}")
    if column_order is None:
        column_order = sorted(present_cols)
    else:
        outside = [v for v in present_cols if v not in set(column_order)]
        if outside:
            raise InvalidConfiguration(f"Column values {outside} are not in the column order {list(column_order)}")

    wide = series.unstack(column)
    if list(wide.index.names) != [row]:
        wide = series.reorder_levels([row, column]).unstack(column)
    wide = wide.reindex(index=list(row_order), columns=list(column_order))
    wide.index.name = row
    wide.columns.name = column

    require(
        not wide.isna().any().any(),
        f"Reshape contract violated: {int(wide.isna().sum().sum())} holes in {row} x {column}, "
        "densify before reshaping"
    )
    if pd.api.types.is_integer_dtype(series.dtype):
        wide = wide.astype(series.dtype)
    logger.debug("Reshaped %d cells to %d x %d", len(series), *wide.shape)
    return wide


def wide_to_long(wide: pd.DataFrame, name: Optional[str] = None) -> pd.Series:
    """Inverse of :func:`long_to_wide`, in row-major order.

    Parameters
    ----------
    wide : pd.DataFrame
        Matrix with named index and columns.
    name : str, optional
        Name of the resulting series.

    Returns
    -------
    pd.Series
        Indexed by ``(wide.index.name, wide.columns.name)``.
    """
    index = pd.MultiIndex.from_product(
        [wide.index, wide.columns],
        names=[wide.index.name, wide.columns.name],
    )
    return pd.Series(wide.to_numpy().ravel(), index=index, name=name)
