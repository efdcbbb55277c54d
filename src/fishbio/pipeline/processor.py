"""Run one analysis over a prepared observation table.

The processor dispatches analysis names to the TabularSummarizer, reports
contract violations loudly, and flattens each result into the CSV tables the
orchestrator writes.
"""

import logging
import time
from typing import TYPE_CHECKING, Any

import pandas as pd

from fishbio.contracts import ContractViolation, InvalidConfiguration
from fishbio.summary.summarizer import MaturitySummary, ProvinceSpeciesSummary, TabularSummarizer

if TYPE_CHECKING:
    from fishbio.schemas import InternalConfig

__all__ = ['SummaryProcessor']

logger = logging.getLogger(__name__)


class SummaryProcessor:
    """Compute summaries by analysis name.

    Parameters
    ----------
    config : InternalConfig
        Fully validated runtime configuration.

    Examples
    --------
    >>> processor = SummaryProcessor(config)
    >>> result = processor.run(df, "maturity")
    >>> tables = processor.tables("maturity", result)
    >>> sorted(tables)
    ['counts', 'pct_Female', 'pct_Male']
    """

    def __init__(self, config: "InternalConfig"):
        self.config = config
        self.summarizer = TabularSummarizer(config)
        self._dispatch = {
            "gsi": self.summarizer.gsi_by_sex_and_date,
            "length_frequency": self.summarizer.length_frequency,
            "maturity": self.summarizer.maturity_percentages,
            "province_species": self.summarizer.province_species_totals,
            "length_weight": self.summarizer.length_weight,
        }

    @property
    def analyses(self) -> list[str]:
        return list(self._dispatch)

    def run(self, df: pd.DataFrame, analysis: str) -> Any:
        """Compute one analysis.

        Raises
        ------
        InvalidConfiguration
            Unknown analysis name, or bad parameters/columns for it.
        MissingCategory
            Unmapped category codes.
        ContractViolation
            A summary stage broke its guarantee (summarizer bug).
        """
        if analysis not in self._dispatch:
            raise InvalidConfiguration(f"Unknown analysis '{analysis}', expected one of {self.analyses}")

        logger.info("Processing: %s (%d rows)", analysis, len(df))
        started = time.perf_counter()
        try:
            result = self._dispatch[analysis](df)
        except ContractViolation as e:
            logger.critical("CRITICAL: Summary contract violated in %s: %s", analysis, e)
            logger.critical("This indicates a bug in summarizer logic. Stopping pipeline.")
            raise
        logger.info("Finished %s in %.2f s", analysis, time.perf_counter() - started)
        return result

    def tables(self, analysis: str, result: Any) -> dict[str, pd.DataFrame]:
        """Flatten a result into named CSV-ready tables.

        Keys become filename suffixes; ``None`` means the analysis name alone.
        Period values are written as ``YYYY-MM`` strings.
        """
        if analysis == "gsi":
            return {None: _periods_to_str(result.reset_index())}
        if analysis == "length_frequency":
            return {None: result}
        if analysis == "maturity":
            return _maturity_tables(result)
        if analysis == "province_species":
            return _province_tables(result)
        if analysis == "length_weight":
            return {None: result.reset_index()}
        raise InvalidConfiguration(f"Unknown analysis '{analysis}'")


def _periods_to_str(frame: pd.DataFrame) -> pd.DataFrame:
    out = frame.copy()
    for column in out.columns:
        if isinstance(out[column].dtype, pd.PeriodDtype):
            out[column] = out[column].astype(str)
    return out


def _maturity_tables(summary: MaturitySummary) -> dict[str, pd.DataFrame]:
    tables = {"counts": _periods_to_str(summary.counts.rename("count").reset_index())}
    for sex, percent in summary.percentages.items():
        wide = percent.copy()
        wide.columns = [str(c) for c in wide.columns]
        tables[f"pct_{sex}"] = wide.reset_index()
    return tables


def _province_tables(summary: ProvinceSpeciesSummary) -> dict[str, pd.DataFrame]:
    return {
        "totals": summary.totals.reset_index(),
        "shares": summary.shares.reset_index(),
    }
