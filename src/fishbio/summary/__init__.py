"""Summary modules.

- loader: CSV reading and canonical columns
- categories: Sex / maturity enums and recoding
- aggregator, binner, densifier, reshaper, normalizer: summary stages
- length_weight: W = a * L^b fits
- summarizer: TabularSummarizer facade
"""

from fishbio.summary.aggregator import aggregate
from fishbio.summary.binner import Binner
from fishbio.summary.categories import ExclusionReport, MaturityStage, Sex, recode
from fishbio.summary.densifier import densify, observed_levels, to_cube
from fishbio.summary.length_weight import fit_length_weight, predict_weight
from fishbio.summary.loader import ObservationLoader, compute_gsi, melt_year_columns
from fishbio.summary.normalizer import percent_by_column
from fishbio.summary.reshaper import long_to_wide, wide_to_long
from fishbio.summary.summarizer import MaturitySummary, ProvinceSpeciesSummary, TabularSummarizer

__all__ = [
    "aggregate",
    "Binner",
    "ExclusionReport",
    "MaturityStage",
    "Sex",
    "recode",
    "densify",
    "observed_levels",
    "to_cube",
    "fit_length_weight",
    "predict_weight",
    "ObservationLoader",
    "compute_gsi",
    "melt_year_columns",
    "percent_by_column",
    "long_to_wide",
    "wide_to_long",
    "MaturitySummary",
    "ProvinceSpeciesSummary",
    "TabularSummarizer",
]
