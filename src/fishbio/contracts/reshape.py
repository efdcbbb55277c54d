"""Reshape stage contract.

Enforces the guarantee that long -> wide neither introduces nor loses cells.
"""

import pandas as pd
from fishbio.contracts.base import require


def assert_reshape_preserves(long: pd.Series, wide: pd.DataFrame) -> None:
    """Enforce lossless reshape contract.

    Raises
    ------
    ContractViolation
        If the wide frame has holes or a different cell count
    """
    require(
        not wide.isna().any().any(),
        "Reshape contract violated: wide frame has holes, densify before reshaping"
    )
    require(
        wide.size == len(long),
        f"Reshape contract violated: {wide.size} wide cells from {len(long)} long cells"
    )
