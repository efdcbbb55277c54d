"""Fixtures for pipeline tests: observation CSV files on disk."""

import pytest
import pandas as pd


@pytest.fixture
def observation_csv(temp_dir):
    """Raw sampling sheet with the default column headers."""
    df = pd.DataFrame({
        "date": ["2020-01-05", "2020-01-12", "2020-01-20", "2020-01-28", "2020-02-03",
                 "2020-02-09", "2020-02-17", "2020-02-25", "2020-03-02", "2020-03-15"],
        "sex": ["M", "F", "M", "F", "U", "M", "F", "F", "M", "F"],
        "gsi": [1.1, 2.4, 1.5, 3.0, 0.8, 1.9, 3.6, 4.1, 2.2, 4.5],
        "length": [102.0, 125.0, 110.0, 133.0, 88.0, 121.0, 140.0, 152.0, 128.0, 160.0],
        "weight": [11.0, 21.0, 14.0, 25.5, 7.2, 19.0, 30.0, 38.5, 22.0, 44.0],
        "maturity": ["II", "III", "II", "III", "I", "III", "IV", "IV", "IV", "V"],
        "gearid": [1, 1, 2, 2, 1, 1, 2, 2, 1, 2],
    })
    path = temp_dir / "sampling.csv"
    df.to_csv(path, index=False)
    return path


@pytest.fixture
def catch_csv(temp_dir):
    """Wide catch sheet with one column per year."""
    df = pd.DataFrame({
        "province": ["Aceh", "Aceh", "Riau", "Riau"],
        "species": ["tuna", "scad", "scad", "squid"],
        "2019": [10.0, 2.0, 5.0, 1.0],
        "2020": [5.0, 3.0, 3.0, 1.0],
    })
    path = temp_dir / "catch.csv"
    df.to_csv(path, index=False)
    return path
