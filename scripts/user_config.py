"""fishbio User Configuration.

This is the user-facing configuration file. Modify settings here to customize
the summaries. Advanced settings are in src/fishbio/schemas/param.py

Usage:
    python scripts/run_summary_pipeline.py scripts/user_config.py
    python scripts/run_summary_pipeline.py scripts/user_config.py --analysis gsi maturity
    python scripts/run_summary_pipeline.py scripts/user_config.py --start 2020-01 --end 2020-12
"""

CONFIG = {
    # ========================================================================
    # INPUT & OUTPUT
    # ========================================================================
    "INPUT_PATH": "data/observations.csv",   # One row per sampled fish
    "BASE_DIR": "./fishbio_output",          # summaries/, plots/, logs/ go here

    # ========================================================================
    # ANALYSES
    # ========================================================================
    # gsi, length_frequency, maturity, province_species, length_weight
    "ANALYSES": ["gsi", "length_frequency", "maturity"],

    # ========================================================================
    # LENGTH FREQUENCY
    # ========================================================================
    "CLASS_INTERVAL": 10,     # Bin width (mm)
    "BIN_ORIGIN": 0,          # Left edge of the first bin
    "BIN_MEASUREMENT": "length",
    "BIN_BY": None,           # None, "sex" or "gear"

    # ========================================================================
    # DATE WINDOW (inclusive, YYYY-MM)
    # ========================================================================
    "START": None,
    "END": None,

    # ========================================================================
    # CATEGORIES
    # ========================================================================
    "EXCLUDED_SEX": ["U"],    # Sex codes dropped before analysis

    # Fixed (lon, lat) per province for the species pie map
    "PROVINCE_COORDINATES": {},

    # Header names in the CSV, when they differ from the defaults
    "COLUMNS": {
        # "length": "TL_mm",
        # "gear": "gearid",
    },
}
