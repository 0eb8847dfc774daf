"""Conversion orchestration and chunk scheduling."""

from rasterhex.pipeline.orchestrator import (
    Partitioning,
    CoverageConverter,
    convert,
    convert_with_config,
)
from rasterhex.pipeline.scheduler import SequentialScheduler, PoolScheduler, make_scheduler

__all__ = [
    'Partitioning',
    'CoverageConverter',
    'convert',
    'convert_with_config',
    'SequentialScheduler',
    'PoolScheduler',
    'make_scheduler',
]
