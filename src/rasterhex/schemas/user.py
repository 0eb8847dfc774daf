"""UserConfig: Forgiving, minimal user-facing configuration.

This schema accepts user inputs with upper-case aliases for the common
settings (e.g., RESOLUTION_MODE → resolution.mode, NODATA → raster.nodata).

UserConfig is intentionally minimal - users only specify what they want
to override from the expert defaults. Validation is lenient: unknown keys
are ignored and names are normalized to lowercase.
"""

from typing import Optional
from pydantic import Field, field_validator
from rasterhex.schemas.base import RasterHexBaseModel


class UserResolutionConfig(RasterHexBaseModel):
    """User-facing resolution config."""
    mode: Optional[str] = None
    min_resolution: Optional[int] = None
    max_resolution: Optional[int] = None
    fixed: Optional[int] = None


class UserPartitionConfig(RasterHexBaseModel):
    """User-facing partition config."""
    chunk_size: Optional[int] = None
    chunk_count: Optional[int] = None
    scheduler: Optional[str] = None
    max_workers: Optional[int] = None
    skip_empty: Optional[bool] = None
    sampling: Optional[str] = None


class UserRasterConfig(RasterHexBaseModel):
    """User-facing raster config."""
    geotransform: Optional[tuple[float, float, float, float, float, float]] = None
    transform_order: Optional[str] = None
    nodata: Optional[float] = None
    axis_order: Optional[str] = None
    x_name: Optional[str] = None
    y_name: Optional[str] = None


class UserConfig(RasterHexBaseModel):
    """User-facing configuration schema.

    Minimal, forgiving, and uses common aliases. Users only specify
    what they want to override from ParamConfig defaults.

    This config is converted to internal overrides during resolution.

    Usage
    -----
        user_cfg = UserConfig(
            RESOLUTION_MODE="min_diff",
            GEOTRANSFORM=(13.0, 0.01, 0.0, 52.0, 0.0, -0.01),
            NODATA=-9999,
            AGGREGATION="mean",
        )

        internal = resolve_config(param_cfg, user_cfg, cli_cfg)
    """

    # Resolution settings (flat aliases)
    resolution_mode: Optional[str] = Field(None, alias="RESOLUTION_MODE")
    min_resolution: Optional[int] = Field(None, alias="MIN_RESOLUTION")
    max_resolution: Optional[int] = Field(None, alias="MAX_RESOLUTION")
    fixed_resolution: Optional[int] = Field(None, alias="RESOLUTION")

    # Partition settings (flat aliases)
    chunk_size: Optional[int] = Field(None, alias="CHUNK_SIZE")
    chunk_count: Optional[int] = Field(None, alias="CHUNK_COUNT")
    scheduler: Optional[str] = Field(None, alias="SCHEDULER")
    max_workers: Optional[int] = Field(None, alias="MAX_WORKERS")
    skip_empty: Optional[bool] = Field(None, alias="SKIP_EMPTY")
    sampling: Optional[str] = Field(None, alias="SAMPLING")

    # Aggregation
    aggregation: Optional[str] = Field(None, alias="AGGREGATION")

    # Raster settings (flat aliases)
    geotransform: Optional[tuple[float, float, float, float, float, float]] = Field(None, alias="GEOTRANSFORM")
    transform_order: Optional[str] = Field(None, alias="TRANSFORM_ORDER")
    nodata: Optional[float] = Field(None, alias="NODATA")
    axis_order: Optional[str] = Field(None, alias="AXIS_ORDER")

    # Output and logging
    output_path: Optional[str] = Field(None, alias="OUTPUT_PATH")
    include_boundary: Optional[bool] = Field(None, alias="INCLUDE_BOUNDARY")
    log_level: Optional[str] = Field(None, alias="LOG_LEVEL")
    log_file: Optional[str] = Field(None, alias="LOG_FILE")

    # Nested overrides (advanced users)
    resolution: Optional[UserResolutionConfig] = None
    partition: Optional[UserPartitionConfig] = None
    raster: Optional[UserRasterConfig] = None

    model_config = RasterHexBaseModel.model_config.copy()
    # Allow forgiving input dictionaries (ignore unknown keys)
    model_config.update({"populate_by_name": True, "extra": "ignore"})

    @field_validator(
        "resolution_mode", "scheduler", "sampling", "aggregation",
        "transform_order", "axis_order",
        mode="before",
    )
    @classmethod
    def normalize_names(cls, v):
        """Normalize option names to lowercase."""
        if isinstance(v, str):
            return v.lower().strip()
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        if isinstance(v, str):
            return v.upper().strip()
        return v

    def to_internal_overrides(self) -> dict:
        """Convert flat UserConfig to nested InternalConfig structure.

        Flat aliases are applied first; nested sections override them.

        Returns
        -------
        dict
            Nested dictionary matching InternalConfig structure
        """
        overrides = {}

        # Resolution section
        resolution = {}
        if self.resolution_mode is not None:
            resolution["mode"] = self.resolution_mode
        if self.min_resolution is not None:
            resolution["min_resolution"] = self.min_resolution
        if self.max_resolution is not None:
            resolution["max_resolution"] = self.max_resolution
        if self.fixed_resolution is not None:
            resolution["fixed"] = self.fixed_resolution
        if self.resolution is not None:
            resolution.update(self.resolution.model_dump(exclude_none=True))
        if resolution:
            overrides["resolution"] = resolution

        # Partition section
        partition = {}
        if self.chunk_size is not None:
            partition["chunk_size"] = self.chunk_size
        if self.chunk_count is not None:
            partition["chunk_count"] = self.chunk_count
        if self.scheduler is not None:
            partition["scheduler"] = self.scheduler
        if self.max_workers is not None:
            partition["max_workers"] = self.max_workers
        if self.skip_empty is not None:
            partition["skip_empty"] = self.skip_empty
        if self.sampling is not None:
            partition["sampling"] = self.sampling
        if self.partition is not None:
            partition.update(self.partition.model_dump(exclude_none=True))
        if partition:
            overrides["partition"] = partition

        if self.aggregation is not None:
            overrides["aggregation"] = {"policy": self.aggregation}

        # Raster section
        raster = {}
        if self.geotransform is not None:
            raster["geotransform"] = self.geotransform
        if self.transform_order is not None:
            raster["transform_order"] = self.transform_order
        if self.nodata is not None:
            raster["nodata"] = self.nodata
        if self.axis_order is not None:
            raster["axis_order"] = self.axis_order
        if self.raster is not None:
            raster.update(self.raster.model_dump(exclude_none=True))
        if raster:
            overrides["raster"] = raster

        output = {}
        if self.output_path is not None:
            output["path"] = self.output_path
        if self.include_boundary is not None:
            output["include_boundary"] = self.include_boundary
        if output:
            overrides["output"] = output

        logging_cfg = {}
        if self.log_level is not None:
            logging_cfg["level"] = self.log_level
        if self.log_file is not None:
            logging_cfg["file"] = self.log_file
        if logging_cfg:
            overrides["logging"] = logging_cfg

        return overrides
