"""Summary contracts and failure types.

This package enforces semantic guarantees between summary stages and
defines the error taxonomy used across fishbio.

Key principle:
- Pydantic validates config correctness
- InvalidConfiguration / MissingCategory report bad parameters and data
- Contracts validate summarizer correctness
"""

from fishbio.contracts.failure import (
    ContractViolation,
    InvalidConfiguration,
    MissingCategory,
)
from fishbio.contracts.base import require
from fishbio.contracts.grid import assert_grid_complete
from fishbio.contracts.bins import assert_bins_cover
from fishbio.contracts.percentages import assert_percent_columns
from fishbio.contracts.reshape import assert_reshape_preserves

__all__ = [
    "ContractViolation",
    "InvalidConfiguration",
    "MissingCategory",
    "require",
    "assert_grid_complete",
    "assert_bins_cover",
    "assert_percent_columns",
    "assert_reshape_preserves",
]
