"""TabularSummarizer: plot-ready summary tables from observation frames.

Each public method is one analysis. Inputs are prepared observation tables
(see ``ObservationLoader``); outputs are new pandas objects, the input is
never modified. Stage contracts are checked at every stage boundary.
"""

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

import pandas as pd
import xarray as xr

from fishbio.contracts import (
    InvalidConfiguration,
    MissingCategory,
    assert_bins_cover,
    assert_grid_complete,
    assert_percent_columns,
    assert_reshape_preserves,
)
from fishbio.summary.aggregator import aggregate
from fishbio.summary.binner import Binner
from fishbio.summary.categories import ExclusionReport, MaturityStage, Sex, recode
from fishbio.summary.densifier import densify, observed_levels, to_cube
from fishbio.summary.length_weight import fit_length_weight
from fishbio.summary.normalizer import percent_by_column
from fishbio.summary.reshaper import long_to_wide

if TYPE_CHECKING:
    from fishbio.schemas import InternalConfig

__all__ = ['TabularSummarizer', 'MaturitySummary', 'ProvinceSpeciesSummary']

logger = logging.getLogger(__name__)

_PARSERS = {
    "sex": Sex.parse,
    "maturity": MaturityStage.parse,
}


@dataclass
class MaturitySummary:
    """Maturity-stage composition by date and sex.

    Attributes
    ----------
    counts : pd.Series
        Densified counts indexed by ``(maturity, date, sex)``.
    cube : xr.DataArray
        The same counts with dimensions ``maturity``, ``date``, ``sex``.
    percentages : dict
        Sex label -> wide frame, maturity stages (rows, I..V) by date
        (columns, ascending). Each non-empty column sums to 100.
    """
    counts: pd.Series
    cube: xr.DataArray
    percentages: dict[str, pd.DataFrame] = field(default_factory=dict)


@dataclass
class ProvinceSpeciesSummary:
    """Per-province species catch, ready for a map of pies.

    Attributes
    ----------
    totals : pd.DataFrame
        Provinces (rows) by species (columns) of summed catch plus a ``total``
        column, and ``lon``/``lat`` when province coordinates are configured.
    shares : pd.DataFrame
        Species share of each province's catch in percent (rows sum to 100,
        or to 0 for a province without catch).
    """
    totals: pd.DataFrame
    shares: pd.DataFrame


class TabularSummarizer:
    """Compute the fishbio summary tables.

    Parameters
    ----------
    config : InternalConfig
        Fully validated runtime configuration. Exclusion sets, binning and
        length-weight settings and province coordinates are read from it.

    Attributes
    ----------
    exclusions : dict
        Column -> most recent ExclusionReport produced by recoding.

    Examples
    --------
    >>> summarizer = TabularSummarizer(config)
    >>> gsi = summarizer.gsi_by_sex_and_date(df)
    >>> maturity = summarizer.maturity_percentages(df)
    >>> maturity.percentages["Female"]
    """

    def __init__(self, config: "InternalConfig"):
        self.config = config
        self.categories = config.categories
        self.binning = config.binning
        self.length_weight_cfg = config.length_weight
        self.exclusions: dict[str, ExclusionReport] = {}

    # ------------------------------------------------------------------
    # Category handling
    # ------------------------------------------------------------------

    def recode(self, df: pd.DataFrame, column: str) -> pd.DataFrame:
        """Recode a categorical column and remember its exclusion report."""
        if column not in df.columns:
            raise InvalidConfiguration(f"Column not found: '{column}'")
        recoded, report = recode(
            df, column, _PARSERS[column], excluded=self.categories.excluded_for(column)
        )
        self.exclusions[column] = report
        return recoded

    # ------------------------------------------------------------------
    # (a) GSI by sex and date
    # ------------------------------------------------------------------

    def gsi_by_sex_and_date(self, df: pd.DataFrame) -> pd.Series:
        """Mean gonado-somatic index per (sex, date).

        Only combinations present in the data appear; no grid completion.

        Returns
        -------
        pd.Series
            Named ``gsi``, indexed by ``(sex, date)`` with sex labels
            ``Male``/``Female`` and monthly periods.
        """
        _require_columns(df, ("sex", "date", "gsi"))
        data = self.recode(df, "sex")
        missing = data["gsi"].isna()
        if missing.any():
            logger.info("GSI: ignoring %d rows without a GSI value", int(missing.sum()))
            data = data.loc[~missing]
        return aggregate(data, ["sex", "date"], "gsi", how="mean")

    # ------------------------------------------------------------------
    # (b) Length frequency
    # ------------------------------------------------------------------

    def length_frequency(self, df: pd.DataFrame, by: Optional[str] = None) -> pd.DataFrame:
        """Binned frequency of the configured measurement.

        Parameters
        ----------
        df : pd.DataFrame
            Observation table.
        by : {"sex", "gear"}, optional
            Split the counts by this column. Defaults to ``binning.by``.

        Returns
        -------
        pd.DataFrame
            Columns ``[by,] bin, lower, upper, midpoint, count``. With ``by``
            the table holds every bin for every level, zero-filled.

        Raises
        ------
        InvalidConfiguration
            If the class interval is not positive, no measurement remains,
            or a measurement lies below the bin origin.
        """
        measurement = self.binning.measurement
        by = by if by is not None else self.binning.by
        if measurement not in df.columns:
            raise InvalidConfiguration(f"Measurement column not found: '{measurement}'")

        data = df.loc[df[measurement].notna()]
        if by == "sex":
            data = self.recode(data, "sex")
        elif by is not None:
            if by not in data.columns:
                raise InvalidConfiguration(f"Grouping column not found: '{by}'")
            data = data.loc[data[by].notna()]

        binner = Binner(self.binning.class_interval, self.binning.origin, self.binning.close_last)
        values = data[measurement].to_numpy(dtype=float)
        edges = binner.edges(values)
        assignment = binner.assign(values, edges)
        assert_bins_cover(values, edges, assignment)

        binned = data.assign(bin=assignment)
        n_bins = len(edges) - 1
        if by is None:
            levels = {"bin": list(range(n_bins))}
            counts = aggregate(binned, ["bin"], how="count")
        else:
            levels = observed_levels(binned, [by], canonical={"sex": Sex.labels()})
            levels["bin"] = list(range(n_bins))
            counts = aggregate(binned, [by, "bin"], how="count")
        dense = densify(counts, levels)
        assert_grid_complete(dense, levels)

        table = dense.rename("count").reset_index()
        spans = binner.bin_table(edges)
        for name in ("lower", "upper", "midpoint"):
            table[name] = spans[name][table["bin"].to_numpy()]
        ordered = ([by] if by else []) + ["bin", "lower", "upper", "midpoint", "count"]
        logger.info(
            "Length frequency of %s: %d values in %d bins of %g", measurement, len(values), n_bins,
            self.binning.class_interval
        )
        return table[ordered]

    # ------------------------------------------------------------------
    # (c) Maturity composition
    # ------------------------------------------------------------------

    def maturity_percentages(self, df: pd.DataFrame) -> MaturitySummary:
        """Percentage of each maturity stage per date, separately per sex.

        Counts are densified over all maturity stages (I..V), all observed
        dates and both sexes before normalisation, so every sex gets a full
        stage x date matrix. Dates without fish of a sex stay at 0%.

        Returns
        -------
        MaturitySummary
        """
        _require_columns(df, ("sex", "maturity", "date"))
        data = self.recode(df, "sex")
        data = self.recode(data, "maturity")
        if not data["date"].notna().any():
            raise InvalidConfiguration(
                "No dated maturity observations remain after exclusions "
                f"{self.summary_counts()}; check the 'date', 'sex' and 'maturity' columns"
            )

        keys = ["maturity", "date", "sex"]
        levels = observed_levels(
            data, keys, canonical={"maturity": MaturityStage.labels(), "sex": Sex.labels()}
        )
        counts = aggregate(data, keys, how="count")
        dense = densify(counts, levels)
        assert_grid_complete(dense, levels)
        cube = to_cube(dense)

        percentages = {}
        for sex in levels["sex"]:
            per_sex = dense.xs(sex, level="sex")
            wide = long_to_wide(
                per_sex, row="maturity", column="date",
                row_order=levels["maturity"], column_order=levels["date"],
            )
            assert_reshape_preserves(per_sex, wide)
            percent = percent_by_column(wide)
            assert_percent_columns(percent, wide)
            percentages[sex] = percent

        logger.info(
            "Maturity: %d fish over %d dates (%d cells)", len(data), len(levels["date"]), len(dense)
        )
        return MaturitySummary(counts=dense, cube=cube, percentages=percentages)

    # ------------------------------------------------------------------
    # (d) Province x species totals
    # ------------------------------------------------------------------

    def province_species_totals(self, df: pd.DataFrame) -> ProvinceSpeciesSummary:
        """Summed catch per province and species, reshaped for mapping.

        Raises
        ------
        MissingCategory
            If province coordinates are configured and a province has none.
        """
        _require_columns(df, ("province", "species", "catch"))
        data = df.loc[df["province"].notna() & df["species"].notna()]
        data = data.assign(
            province=data["province"].astype(str).str.strip(),
            species=data["species"].astype(str).str.strip(),
        )

        keys = ["province", "species"]
        levels = observed_levels(data, keys)
        sums = aggregate(data, keys, "catch", how="sum")
        dense = densify(sums, levels)
        assert_grid_complete(dense, levels)

        wide = long_to_wide(dense, row="province", column="species",
                            row_order=levels["province"], column_order=levels["species"])
        assert_reshape_preserves(dense, wide)

        shares = percent_by_column(wide.T).T
        assert_percent_columns(shares.T, wide.T)

        totals = wide.copy()
        totals["total"] = wide.sum(axis=1)

        coordinates = self.categories.province_coordinates
        if coordinates:
            unplaced = [p for p in totals.index if p not in coordinates]
            if unplaced:
                raise MissingCategory("province", unplaced)
            totals["lon"] = [coordinates[p][0] for p in totals.index]
            totals["lat"] = [coordinates[p][1] for p in totals.index]

        logger.info("Province totals: %d provinces x %d species", *wide.shape)
        return ProvinceSpeciesSummary(totals=totals, shares=shares)

    # ------------------------------------------------------------------
    # (e) Length-weight relationship
    # ------------------------------------------------------------------

    def length_weight(self, df: pd.DataFrame) -> pd.DataFrame:
        """Fit ``W = a * L^b``, per sex unless ``length_weight.by`` is None."""
        by = self.length_weight_cfg.by
        data = self.recode(df, "sex") if by == "sex" else df
        return fit_length_weight(
            data, "length", "weight", by=by, min_samples=self.length_weight_cfg.min_samples
        )

    # ------------------------------------------------------------------

    def summary_counts(self) -> dict[str, int]:
        """Excluded row counts per recoded column, for logging."""
        return {column: report.total for column, report in self.exclusions.items()}


def _require_columns(df: pd.DataFrame, columns) -> None:
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise InvalidConfiguration(f"Column(s) not found: {missing}")
