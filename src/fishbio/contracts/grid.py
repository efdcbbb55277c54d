"""Grid stage contract.

Enforces the guarantee that after densification every combination of
grouping-key levels is present exactly once.
"""

import math
from typing import Mapping, Sequence

import pandas as pd
from fishbio.contracts.base import require


def assert_grid_complete(dense: pd.Series, levels: Mapping[str, Sequence]) -> None:
    """Enforce grid completion contract.

    Called immediately after densify(). Verifies that the output holds one
    cell per element of the cross-product of ``levels`` and no holes.

    Parameters
    ----------
    dense : pd.Series
        Output of densify()

    levels : mapping
        Key name -> ordered levels used for densification

    Raises
    ------
    ContractViolation
        If any invariant is violated
    """
    expected = math.prod(len(v) for v in levels.values())
    require(
        len(dense) == expected,
        f"Grid contract violated: got {len(dense)} cells, expected {expected} "
        f"({' x '.join(str(len(v)) for v in levels.values())})"
    )
    require(
        list(dense.index.names) == list(levels.keys()),
        f"Grid contract violated: index names {list(dense.index.names)} "
        f"do not match keys {list(levels.keys())}"
    )
    require(
        dense.index.is_unique,
        "Grid contract violated: duplicate key combinations"
    )
    require(
        not dense.isna().any(),
        "Grid contract violated: densified values contain NaN"
    )
