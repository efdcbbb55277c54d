"""Tests for the TabularSummarizer analyses."""

import pytest
import numpy as np
import pandas as pd

pytestmark = pytest.mark.unit

from fishbio.contracts import InvalidConfiguration, MissingCategory
from fishbio.summary.summarizer import MaturitySummary, TabularSummarizer


JAN = pd.Period("2020-01", freq="M")
FEB = pd.Period("2020-02", freq="M")


class TestGsi:

    def test_mean_by_sex_and_date(self, internal_config):
        df = pd.DataFrame({
            "sex": ["M", "M", "F"],
            "date": [JAN, JAN, JAN],
            "gsi": [1.2, 1.8, 2.0],
        })
        gsi = TabularSummarizer(internal_config).gsi_by_sex_and_date(df)

        assert len(gsi) == 2
        assert gsi[("Male", JAN)] == pytest.approx(1.5)
        assert gsi[("Female", JAN)] == pytest.approx(2.0)

    def test_unknown_sex_excluded(self, internal_config, observations):
        summarizer = TabularSummarizer(internal_config)
        gsi = summarizer.gsi_by_sex_and_date(observations)

        assert set(gsi.index.get_level_values("sex")) == {"Male", "Female"}
        assert summarizer.exclusions["sex"].counts == {"U": 1}

    def test_unmapped_sex_raises(self, internal_config, observations):
        df = observations.assign(sex=["M", "M", "F", "X", "F", "F", "M", "F"])
        with pytest.raises(MissingCategory, match="X"):
            TabularSummarizer(internal_config).gsi_by_sex_and_date(df)

    def test_excluded_sex_in_lower_case(self, internal_config):
        df = pd.DataFrame({
            "sex": ["M", "f", "u"],
            "date": [JAN, JAN, JAN],
            "gsi": [1.0, 2.0, 9.0],
        })
        summarizer = TabularSummarizer(internal_config)
        gsi = summarizer.gsi_by_sex_and_date(df)

        assert gsi[("Male", JAN)] == pytest.approx(1.0)
        assert gsi[("Female", JAN)] == pytest.approx(2.0)
        assert summarizer.exclusions["sex"].counts == {"U": 1}

    def test_missing_gsi_column(self, internal_config):
        df = pd.DataFrame({"sex": ["M"], "date": [JAN]})
        with pytest.raises(InvalidConfiguration, match="gsi"):
            TabularSummarizer(internal_config).gsi_by_sex_and_date(df)

    def test_input_not_modified(self, internal_config, observations):
        before = observations.copy()
        TabularSummarizer(internal_config).gsi_by_sex_and_date(observations)
        pd.testing.assert_frame_equal(observations, before)


class TestLengthFrequency:

    def test_bins_and_counts(self, internal_config):
        df = pd.DataFrame({"length": [5.0, 15.0, 25.0, 27.0]})
        table = TabularSummarizer(internal_config).length_frequency(df)

        assert table.columns.tolist() == ["bin", "lower", "upper", "midpoint", "count"]
        assert table["lower"].tolist() == [0.0, 10.0, 20.0]
        assert table["midpoint"].tolist() == [5.0, 15.0, 25.0]
        assert table["count"].tolist() == [1, 1, 2]

    def test_by_sex_is_densified(self, internal_config, observations):
        table = TabularSummarizer(internal_config).length_frequency(observations, by="sex")

        n_bins = table["bin"].nunique()
        assert len(table) == 2 * n_bins
        assert table["sex"].drop_duplicates().tolist() == ["Male", "Female"]
        assert table["count"].sum() == 7

    def test_by_gear(self, make_config, observations):
        config = make_config(class_interval=25, bin_by="gear")
        table = TabularSummarizer(config).length_frequency(observations)

        assert table.columns[0] == "gear"
        assert table["count"].sum() == len(observations)
        assert (table["upper"] - table["lower"]).eq(25).all()

    def test_empty_measurements(self, internal_config):
        df = pd.DataFrame({"length": [np.nan, np.nan]})
        with pytest.raises(InvalidConfiguration, match="empty"):
            TabularSummarizer(internal_config).length_frequency(df)


class TestMaturity:

    def test_grid_and_percentages(self, internal_config, observations):
        summary = TabularSummarizer(internal_config).maturity_percentages(observations)

        assert isinstance(summary, MaturitySummary)
        # 5 stages x 2 dates x 2 sexes
        assert len(summary.counts) == 20
        assert summary.counts.sum() == 7
        assert summary.cube.shape == (5, 2, 2)
        assert list(summary.percentages) == ["Male", "Female"]

        female = summary.percentages["Female"]
        assert list(female.index) == ["I", "II", "III", "IV", "V"]
        assert list(female.columns) == [JAN, FEB]
        assert female[JAN].tolist() == [0.0, 0.0, 100.0, 0.0, 0.0]
        assert female[FEB].tolist() == pytest.approx([0.0, 0.0, 0.0, 200 / 3, 100 / 3])

    def test_empty_column_stays_zero(self, internal_config):
        df = pd.DataFrame({
            "date": [JAN, FEB],
            "sex": ["M", "F"],
            "maturity": ["II", "III"],
        })
        summary = TabularSummarizer(internal_config).maturity_percentages(df)

        assert summary.percentages["Male"][FEB].tolist() == [0.0] * 5
        assert summary.percentages["Female"][JAN].tolist() == [0.0] * 5

    def test_only_excluded_sex(self, internal_config):
        df = pd.DataFrame({
            "sex": ["U", "U"],
            "date": [JAN, JAN],
            "maturity": ["I", "II"],
        })
        with pytest.raises(InvalidConfiguration, match="No dated maturity observations"):
            TabularSummarizer(internal_config).maturity_percentages(df)

    def test_no_dates(self, internal_config):
        df = pd.DataFrame({
            "sex": ["M", "F"],
            "date": [pd.NaT, pd.NaT],
            "maturity": ["I", "II"],
        })
        with pytest.raises(InvalidConfiguration, match="No dated maturity observations"):
            TabularSummarizer(internal_config).maturity_percentages(df)

    def test_twelve_months(self, internal_config):
        months = list(pd.period_range("2020-01", periods=12, freq="M"))
        df = pd.DataFrame({
            "date": months * 2,
            "sex": ["M"] * 12 + ["F"] * 12,
            "maturity": ["III"] * 24,
        })
        summary = TabularSummarizer(internal_config).maturity_percentages(df)
        assert len(summary.counts) == 120


class TestProvinceSpecies:

    def test_totals_and_shares(self, internal_config, catch_table):
        summary = TabularSummarizer(internal_config).province_species_totals(catch_table)
        totals = summary.totals

        assert list(totals.index) == ["Aceh", "Riau"]
        assert totals.loc["Aceh", "tuna"] == pytest.approx(15.0)
        assert totals.loc["Riau", "tuna"] == 0
        assert totals["total"].tolist() == [20.0, 10.0]
        assert summary.shares.loc["Aceh"].tolist() == pytest.approx([25.0, 0.0, 75.0])
        assert "lon" not in totals.columns

    def test_coordinates_attached(self, make_config, catch_table):
        config = make_config(province_coordinates={"Aceh": (95.3, 5.5), "Riau": (101.4, 0.5)})
        totals = TabularSummarizer(config).province_species_totals(catch_table).totals

        assert totals.loc["Riau", "lon"] == pytest.approx(101.4)
        assert totals.loc["Aceh", "lat"] == pytest.approx(5.5)

    def test_province_without_coordinates(self, make_config, catch_table):
        config = make_config(province_coordinates={"Aceh": (95.3, 5.5)})
        with pytest.raises(MissingCategory, match="Riau"):
            TabularSummarizer(config).province_species_totals(catch_table)


class TestLengthWeight:

    def test_fit_per_sex(self, internal_config):
        lengths = np.array([50.0, 80.0, 120.0, 160.0])
        df = pd.DataFrame({
            "sex": ["M"] * 4 + ["F"] * 4 + ["U"],
            "length": np.concatenate([lengths, lengths, [100.0]]),
            "weight": np.concatenate([0.01 * lengths ** 3, 0.02 * lengths ** 2.9, [1.0]]),
        })
        fits = TabularSummarizer(internal_config).length_weight(df)

        assert fits.index.name == "sex"
        assert set(fits.index) == {"Male", "Female"}
        assert fits.loc["Male", "b"] == pytest.approx(3.0)
        assert fits.loc["Female", "a"] == pytest.approx(0.02)
