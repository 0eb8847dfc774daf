"""ParamConfig: Expert defaults for raster to hex-grid conversion.

This module defines the complete default configuration. ALL conversion
parameters must have defaults here. No runtime code should define
fallback values - this is the single source of truth for defaults.

Runtime code NEVER reads from ParamConfig directly - it only receives InternalConfig.
"""

from typing import Literal, Optional
from pydantic import Field, field_validator, model_validator
from rasterhex.schemas.base import RasterHexBaseModel


ResolutionModeName = Literal["smaller_than_pixel", "min_diff", "min_ratio"]
PolicyName = Literal["sum", "count", "min", "max", "mean", "collect", "majority", "unique"]
SchedulerName = Literal["sequential", "thread", "process"]
SamplingName = Literal["pixel_center", "cell_centroid"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


# =============================================================================
# Nested Configuration Models
# =============================================================================

class ResolutionConfig(RasterHexBaseModel):
    """Hex grid resolution selection."""
    mode: ResolutionModeName = "smaller_than_pixel"
    min_resolution: int = Field(0, ge=0, le=15)
    max_resolution: int = Field(15, ge=0, le=15)
    fixed: Optional[int] = Field(None, ge=0, le=15, description="Skip the search and use this resolution")

    @field_validator("mode", mode="before")
    @classmethod
    def normalize_mode_name(cls, v):
        """Normalize mode names to lowercase."""
        if isinstance(v, str):
            return v.lower().strip()
        return v

    @model_validator(mode="after")
    def check_range(self):
        if self.min_resolution > self.max_resolution:
            raise ValueError(
                f"min_resolution ({self.min_resolution}) exceeds "
                f"max_resolution ({self.max_resolution})"
            )
        return self


class PartitionConfig(RasterHexBaseModel):
    """Chunking and scheduling of the conversion."""
    chunk_size: Optional[int] = Field(None, ge=1, description="Edge length of square tiles in pixels")
    chunk_count: Optional[int] = Field(None, ge=1, description="Number of row bands")
    scheduler: SchedulerName = "sequential"
    max_workers: Optional[int] = Field(None, ge=1, description="Pool size, defaults to the CPU count")
    skip_empty: bool = True
    sampling: SamplingName = Field("pixel_center", description="Point linking cells to samples")

    @field_validator("scheduler", "sampling", mode="before")
    @classmethod
    def normalize_names(cls, v):
        if isinstance(v, str):
            return v.lower().strip()
        return v

    @model_validator(mode="after")
    def check_exclusive(self):
        if self.chunk_size is not None and self.chunk_count is not None:
            raise ValueError("chunk_size and chunk_count are mutually exclusive")
        return self


class AggregationConfig(RasterHexBaseModel):
    """Combination of samples falling into the same cell."""
    policy: PolicyName = "sum"

    @field_validator("policy", mode="before")
    @classmethod
    def normalize_policy_name(cls, v):
        if isinstance(v, str):
            return v.lower().strip()
        return v


class RasterConfig(RasterHexBaseModel):
    """Georeferencing and sample filtering of the input raster."""
    geotransform: Optional[tuple[float, float, float, float, float, float]] = None
    transform_order: Literal["gdal", "rasterio"] = "gdal"
    nodata: Optional[float] = None
    axis_order: Literal["yx", "xy"] = "yx"
    x_name: str = "x"
    y_name: str = "y"


class OutputConfig(RasterHexBaseModel):
    """Coverage export."""
    path: Optional[str] = None
    include_boundary: bool = False


class LoggingConfig(RasterHexBaseModel):
    """Logging configuration."""
    level: LogLevel = "INFO"
    file: Optional[str] = None


# =============================================================================
# Main ParamConfig
# =============================================================================

class ParamConfig(RasterHexBaseModel):
    """Complete expert configuration with all defaults.

    This is the single source of truth for all conversion parameters.
    Every tunable parameter MUST have a default here.

    Usage
    -----
    This config is NOT used directly by runtime code. It serves as the
    base layer in config resolution:

        internal_cfg = resolve_config(param_cfg, user_cfg, cli_cfg)

    Runtime code only sees InternalConfig.
    """

    resolution: ResolutionConfig = Field(default_factory=ResolutionConfig)
    partition: PartitionConfig = Field(default_factory=PartitionConfig)
    aggregation: AggregationConfig = Field(default_factory=AggregationConfig)
    raster: RasterConfig = Field(default_factory=RasterConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
