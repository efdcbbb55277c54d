"""Binning stage contract.

Enforces the guarantee that every value falls in exactly one bin and the
maximum falls in the last bin.
"""

import numpy as np
from fishbio.contracts.base import require


def assert_bins_cover(values, edges, assignment) -> None:
    """Enforce binning coverage contract.

    Parameters
    ----------
    values : array-like
        Measurements that were binned (NaN already removed)

    edges : array-like
        Monotonic bin edges, ``len(edges) == n_bins + 1``

    assignment : array-like
        Bin index per value

    Raises
    ------
    ContractViolation
        If any invariant is violated
    """
    values = np.asarray(values, dtype=float)
    edges = np.asarray(edges, dtype=float)
    assignment = np.asarray(assignment)
    n_bins = len(edges) - 1

    require(n_bins >= 1, f"Bin contract violated: {len(edges)} edges, need at least 2")
    require(
        bool(np.all(np.diff(edges) > 0)),
        "Bin contract violated: edges are not strictly increasing"
    )
    require(
        assignment.shape == values.shape,
        f"Bin contract violated: {assignment.size} assignments for {values.size} values"
    )
    require(
        bool(np.all((assignment >= 0) & (assignment < n_bins))),
        "Bin contract violated: assignment outside bin range"
    )
    if values.size:
        lower = edges[assignment]
        upper = edges[assignment + 1]
        last = assignment == n_bins - 1
        inside = (values >= lower) & ((values < upper) | (last & (values <= upper)))
        require(
            bool(np.all(inside)),
            "Bin contract violated: a value lies outside its assigned bin"
        )
        require(
            int(assignment[np.argmax(values)]) == n_bins - 1,
            "Bin contract violated: maximum value is not in the last bin"
        )
