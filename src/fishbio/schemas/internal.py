"""InternalConfig: Authoritative runtime configuration.

This is the ONLY config schema that runtime code sees. It is fully validated,
normalized, and contains NO optional fields that summary code depends on.

All .get() calls, fallback defaults, and validation logic are FORBIDDEN in
runtime code - everything is explicit here.
"""

from typing import Literal, Optional
from pydantic import Field, ConfigDict, model_validator
from fishbio.schemas.base import FishbioBaseModel
from fishbio.schemas.param import AnalysisName, FigureLayout


# =============================================================================
# Nested Configuration Models (Runtime)
# =============================================================================

class InternalColumnNamesConfig(FishbioBaseModel):
    """Runtime column name mappings."""
    date: str
    year: str
    month: str
    sex: str
    gsi: str
    length: str
    weight: str
    gonad_weight: str
    maturity: str
    gear: str
    province: str
    species: str
    catch: str


class InternalCategoryConfig(FishbioBaseModel):
    """Runtime categorical recoding settings."""
    excluded: dict[str, list[str]]
    province_coordinates: dict[str, tuple[float, float]]

    def excluded_for(self, column: str) -> set[str]:
        """Raw codes explicitly excluded for a canonical column."""
        return set(self.excluded.get(column, []))


class InternalBinningConfig(FishbioBaseModel):
    """Runtime binning configuration."""
    class_interval: float = Field(gt=0)
    origin: float
    close_last: bool
    measurement: Literal["length", "weight", "gsi"]
    by: Optional[Literal["sex", "gear"]]


class InternalDateRangeConfig(FishbioBaseModel):
    """Runtime monthly date window."""
    start: Optional[str]
    end: Optional[str]

    @model_validator(mode="after")
    def check_order(self):
        """Reject an inverted window."""
        if self.start and self.end and self.start > self.end:
            raise ValueError(f"date_range.start ({self.start}) is after date_range.end ({self.end})")
        return self


class InternalLengthWeightConfig(FishbioBaseModel):
    """Runtime length-weight fit settings."""
    by: Optional[Literal["sex"]]
    min_samples: int


class InternalVisualizationConfig(FishbioBaseModel):
    """Runtime visualization settings."""
    enabled: bool
    output_format: Literal["png", "pdf", "svg"]
    layout: FigureLayout
    use_basemap: bool
    basemap_alpha: float
    pie_radius: float


class InternalLoggingConfig(FishbioBaseModel):
    """Runtime logging configuration."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


# =============================================================================
# Main InternalConfig
# =============================================================================

class InternalConfig(FishbioBaseModel):
    """Authoritative runtime configuration.

    This is the ONLY configuration schema that summary code sees.
    It is fully validated, immutable, and contains explicit values for
    all parameters.

    Usage
    -----
    Runtime modules receive InternalConfig and access fields directly:

        def __init__(self, config: InternalConfig):
            self.class_interval = config.binning.class_interval  # NOT .get()
            self.sex_column = config.columns.sex

    Rules
    -----
    - NO .get() calls
    - NO fallback defaults
    - NO type checking
    - NO validation

    All of that happens during config resolution, not in runtime code.
    """

    input_path: Optional[str]
    base_dir: Optional[str]
    analyses: list[AnalysisName]
    columns: InternalColumnNamesConfig
    categories: InternalCategoryConfig
    binning: InternalBinningConfig
    date_range: InternalDateRangeConfig
    length_weight: InternalLengthWeightConfig
    visualization: InternalVisualizationConfig
    logging: InternalLoggingConfig
    run_id: Optional[str] = None

    model_config = ConfigDict(
        extra='forbid',
        validate_assignment=True,
        use_enum_values=True,
        str_strip_whitespace=True,
        frozen=True,  # Immutable after construction
    )
