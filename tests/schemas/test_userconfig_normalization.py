import pytest

from fishbio.schemas.user import UserConfig


def test_uppercase_keys_are_handled():
    raw = {
        "INPUT_PATH": "data/fish.csv",
        "CLASS_INTERVAL": 5,
        "BASE_DIR": "/tmp/fishbio_out",
        "ANALYSES": ["GSI", "Maturity"],
    }

    user = UserConfig.model_validate(raw)

    assert user.input_path == "data/fish.csv"
    assert isinstance(user.class_interval, float) and user.class_interval == 5.0
    assert user.base_dir == "/tmp/fishbio_out"
    assert user.analyses == ["gsi", "maturity"]


def test_unknown_keys_are_ignored():
    raw = {"INPUT_PATH": "fish.csv", "UNKNOWN_LEGACY": 12345}
    user = UserConfig.model_validate(raw)

    assert user.input_path == "fish.csv"
    # Unknown key should not become an attribute nor raise
    assert not hasattr(user, "UNKNOWN_LEGACY")


def test_single_analysis_string_becomes_list():
    user = UserConfig.model_validate({"ANALYSES": "length_frequency"})
    assert user.analyses == ["length_frequency"]


def test_full_dates_reduced_to_month():
    user = UserConfig.model_validate({"START": "2020-03-15", "END": "2020-09"})
    assert user.start == "2020-03"
    assert user.end == "2020-09"


def test_bad_month_rejected():
    with pytest.raises(ValueError, match="YYYY-MM"):
        UserConfig.model_validate({"START": "March 2020"})


def test_unknown_analysis_rejected():
    with pytest.raises(ValueError):
        UserConfig.model_validate({"ANALYSES": ["gsi", "fecundity"]})


def test_excluded_codes_accept_single_value():
    user = UserConfig.model_validate({"categories": {"excluded": {"sex": "U", "maturity": ["0"]}}})
    overrides = user.to_internal_overrides()

    assert overrides["categories"]["excluded"] == {"sex": ["U"], "maturity": ["0"]}


def test_flat_and_nested_binning_merge():
    user = UserConfig.model_validate({"CLASS_INTERVAL": 5, "binning": {"origin": 50, "by": "sex"}})
    binning = user.to_internal_overrides()["binning"]

    assert binning == {"class_interval": 5.0, "origin": 50.0, "by": "sex"}
