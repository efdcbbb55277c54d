"""UserConfig: Forgiving, minimal user-facing configuration.

This schema accepts user inputs in a variety of formats, with aliases
for common naming patterns (e.g., INPUT_PATH → input_path, CLASS_INTERVAL →
class_interval).

UserConfig is intentionally minimal - users only specify what they want
to override from the expert defaults. Validation is lenient to accept
both uppercase and lowercase keys, integers where floats are expected, etc.
"""

from typing import Literal, Optional, Any
from pydantic import Field, field_validator
from fishbio.schemas.base import FishbioBaseModel
from fishbio.schemas.param import AnalysisName, normalize_code_lists, normalize_month


class UserBinningConfig(FishbioBaseModel):
    """User-facing binning config."""
    class_interval: Optional[float] = None
    origin: Optional[float] = None
    close_last: Optional[bool] = None
    measurement: Optional[Literal["length", "weight", "gsi"]] = None
    by: Optional[Literal["sex", "gear"]] = None

    @field_validator("class_interval", "origin", mode="before")
    @classmethod
    def coerce_numeric(cls, v):
        """Accept int or float."""
        if v is not None:
            return float(v)
        return v


class UserCategoryConfig(FishbioBaseModel):
    """User-facing category config."""
    excluded: Optional[dict[str, Any]] = None
    province_coordinates: Optional[dict[str, tuple[float, float]]] = None

    @field_validator("excluded", mode="before")
    @classmethod
    def normalize_excluded_codes(cls, v):
        """Accept a single code or a list per column."""
        return normalize_code_lists(v)


class UserVisualizationConfig(FishbioBaseModel):
    """User-facing visualization config."""
    enabled: Optional[bool] = None
    output_format: Optional[Literal["png", "pdf", "svg"]] = None
    layout: Optional[dict[str, Any]] = None
    use_basemap: Optional[bool] = None
    basemap_alpha: Optional[float] = None
    pie_radius: Optional[float] = None


class UserConfig(FishbioBaseModel):
    """User-facing configuration schema.

    Minimal, forgiving, and uses common aliases. Users only specify
    what they want to override from ParamConfig defaults.

    This config is converted to internal overrides during resolution.

    Usage
    -----
        user_cfg = UserConfig(
            input_path="data/gsi.csv",
            base_dir="/tmp/fishbio",
            analyses=["gsi", "maturity"],
            class_interval=5,
        )

        internal = resolve_config(param_cfg, user_cfg, cli_cfg)
    """

    # Top-level operational settings
    input_path: Optional[str] = Field(None, alias="INPUT_PATH")
    base_dir: Optional[str] = Field(None, alias="BASE_DIR")
    analyses: Optional[list[AnalysisName]] = Field(None, alias="ANALYSES")

    # Binning settings (flat aliases)
    class_interval: Optional[float] = Field(None, alias="CLASS_INTERVAL")
    bin_origin: Optional[float] = Field(None, alias="BIN_ORIGIN")
    bin_measurement: Optional[Literal["length", "weight", "gsi"]] = Field(None, alias="BIN_MEASUREMENT")
    bin_by: Optional[Literal["sex", "gear"]] = Field(None, alias="BIN_BY")

    # Date window (flat aliases)
    start: Optional[str] = Field(None, alias="START")
    end: Optional[str] = Field(None, alias="END")

    # Category settings (flat aliases)
    excluded_sex: Optional[list[str]] = Field(None, alias="EXCLUDED_SEX")
    province_coordinates: Optional[dict[str, tuple[float, float]]] = Field(None, alias="PROVINCE_COORDINATES")

    # Nested overrides (advanced users)
    columns: Optional[dict[str, str]] = Field(None, alias="COLUMNS")
    categories: Optional[UserCategoryConfig] = None
    binning: Optional[UserBinningConfig] = None
    visualization: Optional[UserVisualizationConfig] = None

    model_config = FishbioBaseModel.model_config.copy()
    # Allow forgiving input dictionaries (ignore unknown legacy keys)
    model_config.update({"populate_by_name": True, "extra": "ignore"})

    @field_validator("class_interval", "bin_origin", mode="before")
    @classmethod
    def coerce_numeric_fields(cls, v):
        """Accept int or float for numeric fields."""
        if v is not None:
            return float(v)
        return v

    @field_validator("analyses", mode="before")
    @classmethod
    def normalize_analyses(cls, v):
        """Accept a single name or a list, any case."""
        if isinstance(v, str):
            v = [v]
        if isinstance(v, (list, tuple)):
            return [a.lower().strip() if isinstance(a, str) else a for a in v]
        return v

    @field_validator("start", "end", mode="before")
    @classmethod
    def normalize_months(cls, v):
        """Reduce full ISO dates to YYYY-MM."""
        return normalize_month(v)

    def to_internal_overrides(self) -> dict:
        """Convert flat UserConfig to nested InternalConfig structure.

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
        if self.analyses is not None:
            overrides["analyses"] = list(self.analyses)

        if self.columns is not None:
            overrides["columns"] = dict(self.columns)

        # Binning section
        binning = {}
        if self.class_interval is not None:
            binning["class_interval"] = self.class_interval
        if self.bin_origin is not None:
            binning["origin"] = self.bin_origin
        if self.bin_measurement is not None:
            binning["measurement"] = self.bin_measurement
        if self.bin_by is not None:
            binning["by"] = self.bin_by

        # Merge with explicit binning config
        if self.binning is not None:
            binning.update(self.binning.model_dump(exclude_none=True))

        if binning:
            overrides["binning"] = binning

        # Date window
        date_range = {}
        if self.start is not None:
            date_range["start"] = self.start
        if self.end is not None:
            date_range["end"] = self.end
        if date_range:
            overrides["date_range"] = date_range

        # Categories section
        categories = {}
        if self.excluded_sex is not None:
            categories["excluded"] = {"sex": list(self.excluded_sex)}
        if self.province_coordinates is not None:
            categories["province_coordinates"] = dict(self.province_coordinates)

        if self.categories is not None:
            explicit = self.categories.model_dump(exclude_none=True)
            if "excluded" in explicit and "excluded" in categories:
                explicit["excluded"] = {**categories["excluded"], **explicit["excluded"]}
            categories.update(explicit)

        if categories:
            overrides["categories"] = categories

        if self.visualization is not None:
            visualization = self.visualization.model_dump(exclude_none=True)
            if visualization:
                overrides["visualization"] = visualization

        return overrides
