"""Tests for reading and preparing observation tables."""

import pytest
import numpy as np
import pandas as pd

pytestmark = pytest.mark.unit

from fishbio.contracts import InvalidConfiguration
from fishbio.summary.loader import ObservationLoader, compute_gsi, melt_year_columns


@pytest.fixture
def raw_csv(temp_dir):
    path = temp_dir / "fish.csv"
    pd.DataFrame({
        "date": ["2020-01-15", "2020-01-20", "2020-02-03", "2020-03-09"],
        "sex": ["M", "F", "U", "F"],
        "gsi": [1.2, 2.0, 0.5, "n/a"],
        "length": [100, 120, 90, 130],
        "weight": [10.0, 15.0, 7.0, 19.0],
        "maturity": ["II", "III", "I", "IV"],
        "gearid": [1, 2, 1, 2],
    }).to_csv(path, index=False)
    return path


class TestLoad:

    def test_monthly_dates(self, internal_config, raw_csv):
        df = ObservationLoader(internal_config).load(raw_csv)

        assert isinstance(df["date"].dtype, pd.PeriodDtype)
        assert df["date"].astype(str).tolist() == ["2020-01", "2020-01", "2020-02", "2020-03"]

    def test_gear_header_mapped(self, internal_config, raw_csv):
        df = ObservationLoader(internal_config).load(raw_csv)
        assert "gear" in df.columns
        assert "gearid" not in df.columns

    def test_non_numeric_measurement_becomes_nan(self, internal_config, raw_csv):
        df = ObservationLoader(internal_config).load(raw_csv)
        assert np.isnan(df["gsi"].iloc[3])
        assert df["gsi"].dtype == float

    def test_date_window(self, make_config, raw_csv):
        config = make_config(start="2020-01", end="2020-02-28")
        df = ObservationLoader(config).load(raw_csv)

        assert len(df) == 3
        assert df["date"].max() == pd.Period("2020-02", freq="M")

    def test_missing_file(self, internal_config, temp_dir):
        with pytest.raises(FileNotFoundError):
            ObservationLoader(internal_config).load(temp_dir / "absent.csv")

    def test_missing_required_column(self, internal_config, temp_dir):
        path = temp_dir / "lengths.csv"
        pd.DataFrame({"length": [100, 120]}).to_csv(path, index=False)

        with pytest.raises(InvalidConfiguration, match="'gsi' needs column"):
            ObservationLoader(internal_config).load(path)

    def test_renamed_columns(self, make_config, temp_dir):
        path = temp_dir / "renamed.csv"
        pd.DataFrame({"TL_mm": [100, 120], "SEX": ["M", "F"]}).to_csv(path, index=False)
        config = make_config(columns={"length": "TL_mm", "sex": "SEX"}, analyses=["length_frequency"])

        df = ObservationLoader(config).load(path)
        assert {"length", "sex"} <= set(df.columns)


class TestPrepare:

    def test_date_from_year_and_month(self, internal_config):
        raw = pd.DataFrame({
            "year": [2021, 2021], "month": [3, 11], "sex": ["M", "F"], "gsi": [1.0, 2.0],
        })
        df = ObservationLoader(internal_config).prepare(raw, analyses=["gsi"])
        assert df["date"].astype(str).tolist() == ["2021-03", "2021-11"]

    def test_invalid_month(self, internal_config):
        raw = pd.DataFrame({"year": [2021], "month": [13], "sex": ["M"], "gsi": [1.0]})
        with pytest.raises(InvalidConfiguration, match="year/month"):
            ObservationLoader(internal_config).prepare(raw, analyses=["gsi"])

    def test_unparseable_date(self, internal_config):
        raw = pd.DataFrame({"date": ["not a date"], "sex": ["M"], "gsi": [1.0]})
        with pytest.raises(InvalidConfiguration, match="unparseable"):
            ObservationLoader(internal_config).prepare(raw, analyses=["gsi"])

    def test_gsi_computed_when_absent(self, internal_config):
        raw = pd.DataFrame({
            "date": ["2020-01"], "sex": ["F"], "gonad_weight": [2.0], "weight": [40.0],
        })
        df = ObservationLoader(internal_config).prepare(raw, analyses=["gsi"])
        assert df["gsi"].iloc[0] == pytest.approx(5.0)

    def test_wide_year_catch_melted(self, internal_config):
        raw = pd.DataFrame({
            "province": ["Aceh", "Riau"], "species": ["tuna", "scad"],
            "2019": [10, 3], "2020": [12, 4],
        })
        df = ObservationLoader(internal_config).prepare(raw, analyses=["province_species"])

        assert len(df) == 4
        assert df["catch"].sum() == pytest.approx(29.0)

    def test_raw_not_modified(self, internal_config):
        raw = pd.DataFrame({"date": ["2020-01"], "sex": ["M"], "gsi": ["1.5"]})
        before = raw.copy()
        ObservationLoader(internal_config).prepare(raw, analyses=["gsi"])
        pd.testing.assert_frame_equal(raw, before)


class TestHelpers:

    def test_compute_gsi_guards_zero_body_weight(self):
        df = compute_gsi(pd.DataFrame({"gonad_weight": [1.0, 1.0], "weight": [20.0, 0.0]}))
        assert df["gsi"].iloc[0] == pytest.approx(5.0)
        assert np.isnan(df["gsi"].iloc[1])

    def test_melt_year_columns(self):
        wide = pd.DataFrame({"province": ["Aceh"], "2019": [1.0], "2020": [2.0], "note": ["x"]})
        long = melt_year_columns(wide, id_vars=["province"])

        assert long.columns.tolist() == ["province", "year", "catch"]
        assert long["year"].tolist() == [2019, 2020]

    def test_melt_without_year_columns(self):
        with pytest.raises(InvalidConfiguration, match="per-year"):
            melt_year_columns(pd.DataFrame({"province": ["Aceh"]}), id_vars=["province"])
