"""InternalConfig: Authoritative runtime configuration.

This is the ONLY config schema that runtime code sees. It is fully validated,
normalized, and immutable. Optional fields are optional by meaning (no fixed
resolution, no nodata value), never because a default is missing.
"""

from typing import Literal, Optional
from pydantic import ConfigDict, Field, model_validator
from rasterhex.schemas.base import RasterHexBaseModel
from rasterhex.schemas.param import LogLevel, PolicyName, ResolutionModeName, SamplingName, SchedulerName


# =============================================================================
# Nested Configuration Models (Runtime)
# =============================================================================

class InternalResolutionConfig(RasterHexBaseModel):
    """Runtime resolution selection."""
    mode: ResolutionModeName
    min_resolution: int = Field(ge=0, le=15)
    max_resolution: int = Field(ge=0, le=15)
    fixed: Optional[int] = Field(ge=0, le=15)

    @model_validator(mode="after")
    def check_range(self):
        if self.min_resolution > self.max_resolution:
            raise ValueError(
                f"min_resolution ({self.min_resolution}) exceeds "
                f"max_resolution ({self.max_resolution})"
            )
        return self


class InternalPartitionConfig(RasterHexBaseModel):
    """Runtime chunking and scheduling."""
    chunk_size: Optional[int] = Field(ge=1)
    chunk_count: Optional[int] = Field(ge=1)
    scheduler: SchedulerName
    max_workers: Optional[int] = Field(ge=1)
    skip_empty: bool
    sampling: SamplingName

    @model_validator(mode="after")
    def check_exclusive(self):
        if self.chunk_size is not None and self.chunk_count is not None:
            raise ValueError("chunk_size and chunk_count are mutually exclusive")
        return self


class InternalAggregationConfig(RasterHexBaseModel):
    """Runtime aggregation."""
    policy: PolicyName


class InternalRasterConfig(RasterHexBaseModel):
    """Runtime raster georeferencing."""
    geotransform: Optional[tuple[float, float, float, float, float, float]]
    transform_order: Literal["gdal", "rasterio"]
    nodata: Optional[float]
    axis_order: Literal["yx", "xy"]
    x_name: str
    y_name: str


class InternalOutputConfig(RasterHexBaseModel):
    """Runtime output configuration."""
    path: Optional[str]
    include_boundary: bool


class InternalLoggingConfig(RasterHexBaseModel):
    """Runtime logging configuration."""
    level: LogLevel
    file: Optional[str]


# =============================================================================
# Main InternalConfig
# =============================================================================

class InternalConfig(RasterHexBaseModel):
    """Authoritative runtime configuration.

    This is the ONLY configuration schema that conversion code sees.
    It is fully validated, immutable, and contains explicit values for
    all parameters.

    Usage
    -----
    Runtime code receives InternalConfig and accesses fields directly:

        coverage = convert_with_config(array, config)
        policy = config.aggregation.policy  # NOT .get()

    Rules
    -----
    - NO .get() calls
    - NO fallback defaults
    - NO validation

    All of that happens during config resolution, not in runtime code.
    """

    resolution: InternalResolutionConfig
    partition: InternalPartitionConfig
    aggregation: InternalAggregationConfig
    raster: InternalRasterConfig
    output: InternalOutputConfig
    logging: InternalLoggingConfig

    model_config = ConfigDict(
        extra='forbid',
        validate_assignment=True,
        use_enum_values=True,
        str_strip_whitespace=True,
        frozen=True,  # Immutable after construction
    )
