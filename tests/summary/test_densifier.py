"""Tests for grid completion of sparse Summary Cells."""

import pytest
import numpy as np
import pandas as pd

pytestmark = pytest.mark.unit

from fishbio.contracts import InvalidConfiguration, assert_grid_complete
from fishbio.summary.aggregator import aggregate
from fishbio.summary.densifier import densify, observed_levels, to_cube


STAGES = ["I", "II", "III", "IV", "V"]
SEXES = ["Male", "Female"]
MONTHS = list(pd.period_range("2020-01", periods=12, freq="M"))


class TestDensify:

    def test_maturity_grid_has_120_cells(self):
        """5 stages x 12 months x 2 sexes, absent combinations zero."""
        partial = pd.Series(
            [3, 1],
            index=pd.MultiIndex.from_tuples(
                [("II", MONTHS[0], "Male"), ("IV", MONTHS[5], "Female")],
                names=["maturity", "date", "sex"],
            ),
            name="count",
        )
        levels = {"maturity": STAGES, "date": MONTHS, "sex": SEXES}
        dense = densify(partial, levels)

        assert len(dense) == 120
        assert dense.sum() == 4
        assert dense[("II", MONTHS[0], "Male")] == 3
        assert dense[("V", MONTHS[11], "Female")] == 0
        assert_grid_complete(dense, levels)

    def test_order_follows_levels(self):
        partial = pd.Series(
            [1],
            index=pd.MultiIndex.from_tuples([("Female", "b")], names=["sex", "k"]),
        )
        dense = densify(partial, {"sex": SEXES, "k": ["b", "a"]})

        assert list(dense.index) == [
            ("Male", "b"), ("Male", "a"), ("Female", "b"), ("Female", "a"),
        ]

    def test_single_key(self):
        partial = pd.Series([2, 5], index=pd.Index([0, 2], name="bin"), name="count")
        dense = densify(partial, {"bin": [0, 1, 2, 3]})

        assert dense.tolist() == [2, 0, 5, 0]
        assert pd.api.types.is_integer_dtype(dense.dtype)

    def test_empty_partial(self):
        partial = pd.Series(
            [], dtype="int64",
            index=pd.MultiIndex.from_arrays([[], []], names=["sex", "k"]),
        )
        dense = densify(partial, {"sex": SEXES, "k": ["a"]})
        assert dense.tolist() == [0, 0]

    def test_value_outside_levels_is_an_error(self):
        partial = pd.Series(
            [1, 1],
            index=pd.MultiIndex.from_tuples([("I", "Male"), ("VI", "Male")], names=["maturity", "sex"]),
        )
        with pytest.raises(InvalidConfiguration, match="VI"):
            densify(partial, {"maturity": STAGES, "sex": SEXES})

    def test_index_names_must_match(self):
        partial = pd.Series([1], index=pd.Index(["Male"], name="sex"))
        with pytest.raises(InvalidConfiguration, match="do not match"):
            densify(partial, {"gear": [1, 2]})


class TestObservedLevels:

    def test_canonical_and_sorted(self):
        df = pd.DataFrame({
            "maturity": ["III", "I"],
            "date": [MONTHS[3], MONTHS[1]],
            "sex": ["Female", "Female"],
        })
        levels = observed_levels(df, ["maturity", "date", "sex"],
                                 canonical={"maturity": STAGES, "sex": SEXES})

        assert levels["maturity"] == STAGES
        assert levels["date"] == [MONTHS[1], MONTHS[3]]
        assert levels["sex"] == SEXES

    def test_unknown_column(self):
        with pytest.raises(InvalidConfiguration, match="gear"):
            observed_levels(pd.DataFrame({"sex": ["Male"]}), ["gear"])


class TestCube:

    def test_cube_dimensions_follow_levels(self):
        df = pd.DataFrame({
            "maturity": ["II", "II", "IV"],
            "date": [MONTHS[0], MONTHS[0], MONTHS[1]],
            "sex": ["Female", "Female", "Male"],
        })
        levels = {"maturity": STAGES, "date": MONTHS[:2], "sex": SEXES}
        dense = densify(aggregate(df, list(levels), how="count"), levels)
        cube = to_cube(dense)

        assert cube.dims == ("maturity", "date", "sex")
        assert cube.shape == (5, 2, 2)
        assert list(cube["sex"].values) == SEXES
        assert int(cube.sel(maturity="II", sex="Female").sum()) == 2
        assert int(cube.sum()) == 3
        np.testing.assert_array_equal(cube.sum(dim="maturity").values, [[0, 2], [1, 0]])

    def test_cube_requires_dense_series(self):
        sparse = pd.Series(
            [1, 1],
            index=pd.MultiIndex.from_tuples([("a", 1), ("b", 2)], names=["k", "j"]),
        )
        with pytest.raises(InvalidConfiguration, match="densified"):
            to_cube(sparse)
