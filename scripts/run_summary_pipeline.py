#!/usr/bin/env python3
"""``fishbio`` Summary Pipeline Runner.

Usage:
    python scripts/run_summary_pipeline.py scripts/user_config.py
    python scripts/run_summary_pipeline.py scripts/user_config.py --analysis maturity
    python scripts/run_summary_pipeline.py scripts/user_config.py --class-interval 5 --no-plots

Note: User config in scripts/user_config.py, expert defaults in fishbio.schemas.param
"""

import sys
from pathlib import Path

# Add src to path
project_root = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(project_root / "src"))

from fishbio.cli.run_summary import main


if __name__ == "__main__":
    main()
