"""Root-level pytest fixtures for the fishbio test suite.

Provides shared configuration fixtures following the Pydantic-based
architecture, plus small observation tables used across modules.
All tests must use these fixtures instead of creating raw dict configs.
"""

import pytest
from pathlib import Path
import tempfile
import shutil

import pandas as pd

from fishbio.schemas import ParamConfig, UserConfig, resolve_config


# =============================================================================
# Configuration Fixtures (Pydantic-based)
# =============================================================================

@pytest.fixture
def param_config():
    """Expert configuration with all defaults.

    Use this as the base for all test configs. Override specific values
    using make_config or by creating custom UserConfig instances.
    """
    return ParamConfig()


@pytest.fixture
def internal_config(param_config):
    """Fully validated runtime configuration (no overrides).

    Examples
    --------
    >>> def test_summarizer_init(internal_config):
    ...     summarizer = TabularSummarizer(internal_config)
    ...     assert summarizer.binning.class_interval == 10.0
    """
    return resolve_config(param_config, None, None)


@pytest.fixture
def make_config(param_config):
    """Factory fixture for creating custom test configs.

    Returns a callable that accepts UserConfig-compatible kwargs.

    Examples
    --------
    >>> def test_custom_interval(make_config):
    ...     config = make_config(class_interval=5)
    ...     assert config.binning.class_interval == 5.0
    """
    def _make(**user_overrides):
        """Create InternalConfig with user overrides."""
        if user_overrides:
            user = UserConfig(**user_overrides)
            return resolve_config(param_config, user, None)
        else:
            return resolve_config(param_config, None, None)

    return _make


# =============================================================================
# Directory Fixtures
# =============================================================================

@pytest.fixture
def temp_dir():
    """Temporary directory that is cleaned up after test."""
    d = tempfile.mkdtemp()
    yield Path(d)
    shutil.rmtree(d, ignore_errors=True)


@pytest.fixture
def output_dirs(temp_dir):
    """Standard fishbio output directory structure.

    Returns dict with keys: base, summaries, plots, logs
    All directories are created and cleaned up automatically.
    """
    dirs = {
        "base": temp_dir,
        "summaries": temp_dir / "summaries",
        "plots": temp_dir / "plots",
        "logs": temp_dir / "logs",
    }

    for d in dirs.values():
        d.mkdir(parents=True, exist_ok=True)

    return dirs


# =============================================================================
# Observation Fixtures
# =============================================================================

def month(text):
    return pd.Period(text, freq="M")


@pytest.fixture
def observations():
    """Prepared observation table: two months, both sexes, one unknown sex."""
    return pd.DataFrame({
        "date": [month("2020-01")] * 4 + [month("2020-02")] * 4,
        "sex": ["M", "M", "F", "U", "F", "F", "M", "F"],
        "gsi": [1.2, 1.8, 2.0, 5.0, 3.0, 4.0, 1.0, 2.0],
        "length": [105.0, 118.0, 131.0, 90.0, 142.0, 150.0, 99.0, 127.0],
        "weight": [12.0, 16.5, 22.0, 7.0, 28.0, 33.0, 9.5, 20.0],
        "maturity": ["II", "III", "III", "I", "IV", "IV", "II", "V"],
        "gear": [1, 1, 2, 2, 1, 2, 2, 1],
    })


@pytest.fixture
def catch_table():
    """Long province x species catch records."""
    return pd.DataFrame({
        "province": ["Aceh", "Aceh", "Aceh", "Riau", "Riau"],
        "species": ["tuna", "tuna", "scad", "scad", "squid"],
        "catch": [10.0, 5.0, 5.0, 8.0, 2.0],
    })
