"""CLIConfig: Command-line operational overrides.

Minimal configuration for parameters that commonly change between runs:
input file, analyses, class interval, date window, output path, verbosity.

This schema handles command-line arguments parsed by argparse.
"""

from typing import Literal, Optional
from pydantic import Field, field_validator
from fishbio.schemas.base import FishbioBaseModel
from fishbio.schemas.param import AnalysisName, normalize_month


class CLIConfig(FishbioBaseModel):
    """Command-line configuration overrides.

    Operational-only settings that override user and param configs.
    Highest priority in config resolution.

    Usage
    -----
        cli_cfg = CLIConfig(
            input_path="data/maturity.csv",
            analyses=["maturity"],
            base_dir="/scratch/fishbio_output",
        )

        internal = resolve_config(param_cfg, user_cfg, cli_cfg)
    """

    input_path: Optional[str] = None
    base_dir: Optional[str] = None
    analyses: Optional[list[AnalysisName]] = None
    class_interval: Optional[float] = Field(None, gt=0)
    start: Optional[str] = None
    end: Optional[str] = None
    plots: Optional[bool] = None
    log_level: Optional[Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]] = None

    @field_validator("analyses", mode="before")
    @classmethod
    def normalize_analyses(cls, v):
        """Lowercase analysis names from the command line."""
        if isinstance(v, (list, tuple)):
            return [a.lower().strip() if isinstance(a, str) else a for a in v]
        return v

    @field_validator("start", "end", mode="before")
    @classmethod
    def normalize_months(cls, v):
        """Accept YYYY-MM or a full ISO date."""
        return normalize_month(v)

    def to_internal_overrides(self) -> dict:
        """Convert CLI config to internal config structure.

        Returns
        -------
        dict
            Nested dictionary matching InternalConfig structure
        """
        overrides = {}

        if self.input_path is not None:
            overrides["input_path"] = str(self.input_path)
        if self.base_dir is not None:
            overrides["base_dir"] = str(self.base_dir)
        if self.analyses:
            overrides["analyses"] = list(self.analyses)
        if self.class_interval is not None:
            overrides["binning"] = {"class_interval": self.class_interval}

        date_range = {}
        if self.start is not None:
            date_range["start"] = self.start
        if self.end is not None:
            date_range["end"] = self.end
        if date_range:
            overrides["date_range"] = date_range

        if self.plots is not None:
            overrides["visualization"] = {"enabled": self.plots}

        if self.log_level is not None:
            overrides["logging"] = {"level": self.log_level}

        return overrides
