"""ParamConfig: Expert defaults for the fishbio summarizer.

This module defines the complete default configuration. ALL summarizer
parameters must have defaults here. No runtime code should define fallback
values - this is the single source of truth for defaults.

Runtime code NEVER reads from ParamConfig directly - it only receives InternalConfig.
"""

import re
from typing import Literal, Optional
from pydantic import Field, field_validator, model_validator
from fishbio.schemas.base import FishbioBaseModel


AnalysisName = Literal["gsi", "length_frequency", "maturity", "province_species", "length_weight"]

ALL_ANALYSES = ["gsi", "length_frequency", "maturity", "province_species", "length_weight"]


def normalize_code_lists(v):
    """Turn ``{column: code | [codes]}`` into ``{column: [str, ...]}``."""
    if isinstance(v, dict):
        return {
            str(col): [str(code) for code in ([codes] if isinstance(codes, str) else codes)]
            for col, codes in v.items()
        }
    return v


def normalize_month(v):
    """Reduce ISO dates to ``YYYY-MM`` and reject anything else."""
    if v is None:
        return v
    text = str(v).strip()[:7]
    if not re.fullmatch(r"\d{4}-(0[1-9]|1[0-2])", text):
        raise ValueError(f"Expected a month as YYYY-MM, got {v!r}")
    return text


# =============================================================================
# Nested Configuration Models
# =============================================================================

class ColumnNamesConfig(FishbioBaseModel):
    """Column name mappings for the observation table.

    Keys are the canonical names used everywhere in fishbio; values are the
    header names found in the input CSV.
    """
    date: str = "date"
    year: str = "year"
    month: str = "month"
    sex: str = "sex"
    gsi: str = "gsi"
    length: str = "length"
    weight: str = "weight"
    gonad_weight: str = "gonad_weight"
    maturity: str = "maturity"
    gear: str = "gearid"
    province: str = "province"
    species: str = "species"
    catch: str = "catch"


class CategoryConfig(FishbioBaseModel):
    """Categorical recoding settings.

    ``excluded`` names, per canonical column, the raw codes that are dropped
    before analysis. Any other code the recoder cannot map is an error.
    """
    excluded: dict[str, list[str]] = Field(
        default_factory=lambda: {"sex": ["U"]}
    )
    province_coordinates: dict[str, tuple[float, float]] = Field(
        default_factory=dict,
        description="Fixed (lon, lat) per province for spatial plots",
    )

    @field_validator("excluded", mode="before")
    @classmethod
    def normalize_excluded_codes(cls, v):
        """Accept a single code or any iterable of codes per column."""
        return normalize_code_lists(v)


class BinningConfig(FishbioBaseModel):
    """Length-frequency binning configuration."""
    class_interval: float = Field(10.0, gt=0, description="Bin width in measurement units")
    origin: float = Field(0.0, description="Left edge of the first bin")
    close_last: bool = True
    measurement: Literal["length", "weight", "gsi"] = "length"
    by: Optional[Literal["sex", "gear"]] = None

    @field_validator("class_interval", "origin", mode="before")
    @classmethod
    def coerce_to_float(cls, v):
        """Allow int or float."""
        return float(v)


class DateRangeConfig(FishbioBaseModel):
    """Inclusive monthly date window (YYYY-MM)."""
    start: Optional[str] = None
    end: Optional[str] = None

    @field_validator("start", "end", mode="before")
    @classmethod
    def check_month(cls, v):
        return normalize_month(v)

    @model_validator(mode="after")
    def check_order(self):
        """Reject an inverted window."""
        if self.start and self.end and self.start > self.end:
            raise ValueError(f"date_range.start ({self.start}) is after date_range.end ({self.end})")
        return self


class LengthWeightConfig(FishbioBaseModel):
    """Length-weight relationship fit settings."""
    by: Optional[Literal["sex"]] = "sex"
    min_samples: int = Field(3, ge=3)


class FigureLayout(FishbioBaseModel):
    """Explicit plot layout handed to the renderer for every figure."""
    figsize: tuple[float, float] = (10.0, 6.0)
    dpi: int = Field(150, ge=50)
    left: float = Field(0.08, ge=0, le=1.0)
    right: float = Field(0.97, ge=0, le=1.0)
    bottom: float = Field(0.12, ge=0, le=1.0)
    top: float = Field(0.90, ge=0, le=1.0)
    ncols: int = Field(2, ge=1)

    @model_validator(mode="after")
    def check_margins(self):
        """Margins must leave a positive plotting area."""
        if self.left >= self.right or self.bottom >= self.top:
            raise ValueError("Figure margins leave no plotting area")
        return self


class VisualizationConfig(FishbioBaseModel):
    """Visualization settings."""
    enabled: bool = True
    output_format: Literal["png", "pdf", "svg"] = "png"
    layout: FigureLayout = Field(default_factory=FigureLayout)
    use_basemap: bool = False
    basemap_alpha: float = Field(0.6, ge=0, le=1.0)
    pie_radius: float = Field(0.4, gt=0, description="Pie radius in map units")


class LoggingConfig(FishbioBaseModel):
    """Logging configuration."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"


# =============================================================================
# Main ParamConfig
# =============================================================================

class ParamConfig(FishbioBaseModel):
    """Complete expert configuration with all defaults.

    This is the single source of truth for all summarizer parameters.
    Every tunable parameter MUST have a default here.

    Usage
    -----
    This config is NOT used directly by runtime code. It serves as the
    base layer in config resolution:

        internal_cfg = resolve_config(param_cfg, user_cfg, cli_cfg)

    Runtime code only sees InternalConfig.
    """

    input_path: Optional[str] = None
    base_dir: Optional[str] = None
    analyses: list[AnalysisName] = Field(default_factory=lambda: ["gsi", "length_frequency", "maturity"])
    columns: ColumnNamesConfig = Field(default_factory=ColumnNamesConfig)
    categories: CategoryConfig = Field(default_factory=CategoryConfig)
    binning: BinningConfig = Field(default_factory=BinningConfig)
    date_range: DateRangeConfig = Field(default_factory=DateRangeConfig)
    length_weight: LengthWeightConfig = Field(default_factory=LengthWeightConfig)
    visualization: VisualizationConfig = Field(default_factory=VisualizationConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
