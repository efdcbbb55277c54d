"""Pipeline modules.

- orchestrator: Main pipeline controller
- processor: Runs one analysis and flattens its result to tables
"""

from fishbio.pipeline.orchestrator import SummaryOrchestrator
from fishbio.pipeline.processor import SummaryProcessor

__all__ = [
    "SummaryOrchestrator",
    "SummaryProcessor",
]
