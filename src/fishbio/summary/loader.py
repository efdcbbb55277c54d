"""Read observation CSV files into canonical DataFrames.

The loader maps configured header names to canonical column names, derives a
monthly ``date`` column, coerces measurements to numbers, applies the
configured date window and checks that every requested analysis has the
columns it needs. Category recoding happens later, in the summarizer.
"""

import logging
import re
from pathlib import Path
from typing import TYPE_CHECKING, Iterable, Optional, Sequence

import numpy as np
import pandas as pd

from fishbio.contracts import InvalidConfiguration

if TYPE_CHECKING:
    from fishbio.schemas import InternalConfig

__all__ = ['ObservationLoader', 'melt_year_columns', 'compute_gsi']

logger = logging.getLogger(__name__)

MEASUREMENT_COLUMNS = ("gsi", "length", "weight", "gonad_weight", "catch")

_YEAR_COLUMN = re.compile(r"^\d{4}$")


def compute_gsi(
    df: pd.DataFrame,
    gonad_weight: str = "gonad_weight",
    body_weight: str = "weight",
    column: str = "gsi",
) -> pd.DataFrame:
    """Gonado-somatic index, ``100 * gonad weight / body weight``.

    Returns a new frame with ``column`` added. Non-positive body weights give
    NaN rather than an infinite index.
    """
    for name in (gonad_weight, body_weight):
        if name not in df.columns:
            raise InvalidConfiguration(f"Cannot compute GSI, column not found: '{name}'")
    out = df.copy()
    gonad = pd.to_numeric(out[gonad_weight], errors="coerce")
    body = pd.to_numeric(out[body_weight], errors="coerce")
    out[column] = (100.0 * gonad / body.where(body > 0)).astype(float)
    return out


def melt_year_columns(
    df: pd.DataFrame,
    id_vars: Sequence[str],
    var_name: str = "year",
    value_name: str = "catch",
) -> pd.DataFrame:
    """Turn wide per-year columns (``2019``, ``2020``, ...) into long rows.

    Parameters
    ----------
    df : pd.DataFrame
        Table with one column per year, e.g. province x species catch.
    id_vars : sequence of str
        Columns kept as identifiers.
    var_name, value_name : str
        Names of the resulting year and value columns.

    Returns
    -------
    pd.DataFrame
        Long table with integer ``var_name`` and float ``value_name``.

    Raises
    ------
    InvalidConfiguration
        If there are no four-digit year columns or an id column is missing.
    """
    id_vars = list(id_vars)
    missing = [c for c in id_vars if c not in df.columns]
    if missing:
        raise InvalidConfiguration(f"Identifier column(s) not found: {missing}")
    year_columns = [c for c in df.columns if _YEAR_COLUMN.match(str(c))]
    if not year_columns:
        raise InvalidConfiguration("No per-year columns (e.g. '2020') to melt")

    long = df.melt(id_vars=id_vars, value_vars=year_columns, var_name=var_name, value_name=value_name)
    long[var_name] = long[var_name].astype(str).astype(int)
    long[value_name] = pd.to_numeric(long[value_name], errors="coerce").astype(float)
    logger.debug("Melted %d year columns into %d rows", len(year_columns), len(long))
    return long


class ObservationLoader:
    """Load and prepare per-specimen observation tables.

    Parameters
    ----------
    config : InternalConfig
        Fully validated runtime configuration. Column names, the date window
        and the binning measurement are read from it.

    Examples
    --------
    >>> loader = ObservationLoader(config)
    >>> df = loader.load("data/sampling_2020.csv", analyses=["gsi", "maturity"])
    >>> df["date"].dtype
    period[M]
    """

    def __init__(self, config: "InternalConfig"):
        self.config = config
        self.columns = config.columns
        self.date_range = config.date_range
        self.analyses = list(config.analyses)

    def required_columns(self, analysis: str) -> list[str]:
        """Canonical columns an analysis needs after preparation."""
        if analysis == "gsi":
            return ["sex", "date", "gsi"]
        if analysis == "length_frequency":
            binning = self.config.binning
            return [binning.measurement] + ([binning.by] if binning.by else [])
        if analysis == "maturity":
            return ["maturity", "date", "sex"]
        if analysis == "province_species":
            return ["province", "species", "catch"]
        if analysis == "length_weight":
            by = self.config.length_weight.by
            return ["length", "weight"] + ([by] if by else [])
        raise InvalidConfiguration(f"Unknown analysis '{analysis}'")

    def load(self, path, analyses: Optional[Iterable[str]] = None) -> pd.DataFrame:
        """Read a CSV file and prepare it for the requested analyses.

        Parameters
        ----------
        path : str or Path
            Observation CSV.
        analyses : iterable of str, optional
            Analyses to check columns for. Defaults to ``config.analyses``.

        Returns
        -------
        pd.DataFrame
            Prepared table (see :meth:`prepare`).

        Raises
        ------
        FileNotFoundError
            If ``path`` does not exist.
        InvalidConfiguration
            If columns required by an analysis are missing.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Input file not found: {path}")
        raw = pd.read_csv(path)
        logger.info("Read %d rows, %d columns from %s", len(raw), len(raw.columns), path.name)
        return self.prepare(raw, analyses)

    def prepare(self, raw: pd.DataFrame, analyses: Optional[Iterable[str]] = None) -> pd.DataFrame:
        """Canonicalise an already-read table. ``raw`` is not modified."""
        analyses = self.analyses if analyses is None else list(analyses)
        df = self._rename(raw)

        if "province_species" in analyses and "catch" not in df.columns:
            if any(_YEAR_COLUMN.match(str(c)) for c in df.columns):
                id_vars = [c for c in ("province", "species") if c in df.columns]
                df = melt_year_columns(df, id_vars=id_vars)

        df = self._derive_date(df)

        if "gsi" not in df.columns and {"gonad_weight", "weight"} <= set(df.columns):
            logger.info("No GSI column, computing it from gonad and body weight")
            df = compute_gsi(df)

        for column in MEASUREMENT_COLUMNS:
            if column in df.columns:
                numeric = pd.to_numeric(df[column], errors="coerce")
                bad = int((numeric.isna() & df[column].notna()).sum())
                if bad:
                    logger.warning("Column '%s': %d non-numeric values treated as missing", column, bad)
                df[column] = numeric.astype(float)

        df = self._filter_dates(df)

        for analysis in analyses:
            missing = [c for c in self.required_columns(analysis) if c not in df.columns]
            if missing:
                raise InvalidConfiguration(
                    f"Analysis '{analysis}' needs column(s) {missing}; "
                    f"map them through the 'columns' configuration"
                )
        return df

    def _rename(self, raw: pd.DataFrame) -> pd.DataFrame:
        mapping = {
            header: canonical
            for canonical, header in self.columns.model_dump().items()
            if header in raw.columns and header != canonical
        }
        df = raw.rename(columns=mapping)
        df.columns = [str(c).strip() for c in df.columns]
        return df

    def _derive_date(self, df: pd.DataFrame) -> pd.DataFrame:
        if "date" in df.columns:
            parsed = pd.to_datetime(df["date"], errors="coerce")
            bad = parsed.isna() & df["date"].notna()
            if bad.any():
                raise InvalidConfiguration(
                    f"Column 'date' has {int(bad.sum())} unparseable values, "
                    f"e.g. {df.loc[bad, 'date'].iloc[0]!r}"
                )
            df["date"] = parsed.dt.to_period("M")
        elif {"year", "month"} <= set(df.columns):
            year = pd.to_numeric(df["year"], errors="coerce")
            month = pd.to_numeric(df["month"], errors="coerce")
            bad = year.isna() | month.isna() | ~month.between(1, 12)
            if bad.any():
                raise InvalidConfiguration(f"{int(bad.sum())} rows have an invalid year/month")
            fields = pd.DataFrame({"year": year.astype(int), "month": month.astype(int), "day": 1})
            df["date"] = pd.to_datetime(fields).dt.to_period("M")
        return df

    def _filter_dates(self, df: pd.DataFrame) -> pd.DataFrame:
        start, end = self.date_range.start, self.date_range.end
        if not (start or end) or "date" not in df.columns:
            return df
        keep = np.ones(len(df), dtype=bool)
        if start:
            keep &= (df["date"] >= pd.Period(start, freq="M")).to_numpy()
        if end:
            keep &= (df["date"] <= pd.Period(end, freq="M")).to_numpy()
        dropped = int((~keep).sum())
        if dropped:
            logger.info("Date window %s..%s: dropped %d rows", start or "", end or "", dropped)
        return df.loc[keep].reset_index(drop=True)
