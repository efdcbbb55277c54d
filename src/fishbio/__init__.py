"""`fishbio` - tabular summaries of fisheries-biology sampling data.

Subpackages:
- summary: Loading, recoding, aggregation, binning, reshaping
- pipeline: Orchestrator, processor
- visualization: Plotting
"""

__version__ = "0.1.0"
