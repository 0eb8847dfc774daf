"""CLIConfig: Command-line operational overrides.

Minimal configuration for operational parameters that commonly change
between runs: resolution, aggregation, scheduling, output path, verbosity.

This schema handles command-line arguments parsed by argparse.
"""

from typing import Optional
from pydantic import Field, field_validator, model_validator
from rasterhex.schemas.base import RasterHexBaseModel
from rasterhex.schemas.param import LogLevel, PolicyName, ResolutionModeName, SamplingName, SchedulerName


class CLIConfig(RasterHexBaseModel):
    """Command-line configuration overrides.

    Operational-only settings that override user and param configs.
    Highest priority in config resolution.

    Notes
    -----
    A chunk_size given on the command line clears a chunk_count coming from
    a lower layer and vice versa, so the two never collide.

    Usage
    -----
        cli_cfg = CLIConfig(
            resolution=9,
            aggregation="max",
            scheduler="thread",
            workers=8,
        )

        internal = resolve_config(param_cfg, user_cfg, cli_cfg)
    """

    resolution: Optional[int] = Field(None, ge=0, le=15)
    mode: Optional[ResolutionModeName] = None
    aggregation: Optional[PolicyName] = None
    scheduler: Optional[SchedulerName] = None
    workers: Optional[int] = Field(None, ge=1)
    chunk_size: Optional[int] = Field(None, ge=1)
    chunk_count: Optional[int] = Field(None, ge=1)
    sampling: Optional[SamplingName] = None
    output: Optional[str] = None
    log_level: Optional[LogLevel] = None
    log_file: Optional[str] = None

    @field_validator("mode", "aggregation", "scheduler", "sampling", mode="before")
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

    def to_internal_overrides(self) -> dict:
        """Convert CLI config to internal config structure.

        Returns
        -------
        dict
            Nested dictionary matching InternalConfig structure
        """
        overrides = {}

        resolution = {}
        if self.resolution is not None:
            resolution["fixed"] = self.resolution
        if self.mode is not None:
            resolution["mode"] = self.mode
        if resolution:
            overrides["resolution"] = resolution

        if self.aggregation is not None:
            overrides["aggregation"] = {"policy": self.aggregation}

        partition = {}
        if self.scheduler is not None:
            partition["scheduler"] = self.scheduler
        if self.workers is not None:
            partition["max_workers"] = self.workers
        if self.chunk_size is not None:
            partition["chunk_size"] = self.chunk_size
            partition["chunk_count"] = None
        if self.chunk_count is not None:
            partition["chunk_count"] = self.chunk_count
            partition["chunk_size"] = None
        if self.sampling is not None:
            partition["sampling"] = self.sampling
        if partition:
            overrides["partition"] = partition

        if self.output is not None:
            overrides["output"] = {"path": str(self.output)}

        logging_cfg = {}
        if self.log_level is not None:
            logging_cfg["level"] = self.log_level
        if self.log_file is not None:
            logging_cfg["file"] = self.log_file
        if logging_cfg:
            overrides["logging"] = logging_cfg

        return overrides
