"""Normalization stage contract.

Enforces the guarantee that every percentage column sums to 100, or is
all zero when its count column was all zero.
"""

import numpy as np
import pandas as pd
from fishbio.contracts.base import require


def assert_percent_columns(percent: pd.DataFrame, counts: pd.DataFrame, atol: float = 1e-9) -> None:
    """Enforce percentage column contract.

    Parameters
    ----------
    percent : pd.DataFrame
        Output of percent_by_column()

    counts : pd.DataFrame
        Count matrix the percentages were computed from

    Raises
    ------
    ContractViolation
        If any invariant is violated
    """
    require(
        percent.shape == counts.shape,
        f"Percent contract violated: shape {percent.shape} != counts shape {counts.shape}"
    )
    require(
        not percent.isna().any().any(),
        "Percent contract violated: NaN in percentages"
    )
    totals = counts.sum(axis=0).to_numpy(dtype=float)
    sums = percent.sum(axis=0).to_numpy(dtype=float)
    expected = np.where(totals == 0, 0.0, 100.0)
    require(
        bool(np.allclose(sums, expected, rtol=0, atol=atol * 100)),
        f"Percent contract violated: column sums {sums.tolist()} != {expected.tolist()}"
    )
