"""Grid completion of sparse Summary Cells.

Turns a partial aggregate into one cell per element of the Cartesian product
of its grouping-key levels, filling absent combinations with zero.
"""

import logging
from typing import Mapping, Optional, Sequence

import numpy as np
import pandas as pd
import xarray as xr

from fishbio.contracts import InvalidConfiguration

__all__ = ['densify', 'observed_levels', 'to_cube']

logger = logging.getLogger(__name__)


def observed_levels(
    df: pd.DataFrame,
    keys: Sequence[str],
    canonical: Optional[Mapping[str, Sequence]] = None,
) -> dict[str, list]:
    """Build the ordered level mapping for :func:`densify` from the data.

    Parameters
    ----------
    df : pd.DataFrame
        Observation table.
    keys : sequence of str
        Grouping columns.
    canonical : mapping, optional
        Fixed orderings per key (e.g. maturity ``I..V``). A key listed here
        uses the full canonical list, observed or not. Other keys use their
        observed values in sorted order.

    Returns
    -------
    dict
        ``{key: [levels, ...]}`` in ``keys`` order.
    """
    canonical = canonical or {}
    levels = {}
    for key in keys:
        if key not in df.columns:
            raise InvalidConfiguration(f"Grouping key column not found: '{key}'")
        if key in canonical:
            levels[key] = list(canonical[key])
        else:
            levels[key] = sorted(pd.unique(df[key].dropna()))
    return levels


def densify(partial: pd.Series, levels: Mapping[str, Sequence]) -> pd.Series:
    """Fill every combination of key levels, absent ones with 0.

    Parameters
    ----------
    partial : pd.Series
        Aggregate indexed by the keys named in ``levels`` (same order).
    levels : mapping
        Ordered ``key -> levels``. The output index is the Cartesian product
        of these levels, outermost key first.

    Returns
    -------
    pd.Series
        ``len == prod(len(levels[k]))``, same name and dtype family as
        ``partial``.

    Raises
    ------
    InvalidConfiguration
        If the index names do not match the keys, or a partial entry carries a
        key value outside ``levels``. Such cells are never silently dropped.

    Examples
    --------
    >>> dense = densify(counts, {"maturity": ["I", "II", "III", "IV", "V"],
    ...                          "date": months, "sex": ["Male", "Female"]})
    >>> len(dense)  # 5 x 12 x 2
    120
    """
    keys = list(levels.keys())
    if list(partial.index.names) != keys:
        raise InvalidConfiguration(
            f"Index names {list(partial.index.names)} do not match level keys {keys}"
        )

    for position, key in enumerate(keys):
        present = partial.index.get_level_values(position)
        allowed = pd.Index(list(levels[key]))
        unknown = present[~present.isin(allowed)]
        if len(unknown):
            raise InvalidConfiguration(
                f"Values {sorted(map(str, pd.unique(unknown)))} of '{key}' are not in the densification levels"
            )

    if len(keys) == 1:
        full_index = pd.Index(list(levels[keys[0]]), name=keys[0])
        partial = partial.copy()
        partial.index = pd.Index(list(partial.index), name=keys[0])
    else:
        full_index = pd.MultiIndex.from_product([list(levels[k]) for k in keys], names=keys)
        partial = partial.copy()
        if len(partial):
            partial.index = pd.MultiIndex.from_tuples(list(partial.index), names=keys)
        else:
            partial.index = pd.MultiIndex.from_arrays([[] for _ in keys], names=keys)

    dense = partial.reindex(full_index, fill_value=0)
    logger.debug("Densified %d cells to %d", len(partial), len(dense))
    return dense


def to_cube(dense: pd.Series) -> xr.DataArray:
    """Densified cells as a DataArray with one dimension per grouping key.

    Dimension order and coordinate order follow the densified index, so a
    canonical level order (maturity I..V, Male before Female) is kept.
    """
    names = list(dense.index.names)
    coords = {
        name: dense.index.get_level_values(i).unique()
        for i, name in enumerate(names)
    }
    shape = tuple(len(c) for c in coords.values())
    if dense.size != int(np.prod(shape)):
        raise InvalidConfiguration("to_cube() needs a densified series, call densify() first")
    return xr.DataArray(
        dense.to_numpy().reshape(shape),
        coords={name: list(values) for name, values in coords.items()},
        dims=names,
        name=dense.name,
    )
