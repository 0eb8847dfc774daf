"""Typed error kinds for raster to hex-grid conversion.

Every failure of a conversion is deterministic and data-dependent, so
nothing here is retryable. Each error carries the ``stage`` that raised it
so callers can tell bad input from grid rejections or aggregation clashes.

Key distinction:
- RasterHexError subclasses: bad input or data the conversion cannot handle
- ContractViolation (rasterhex.contracts): a stage broke its own invariants
- pydantic.ValidationError: configuration rejected before anything runs
"""


class RasterHexError(Exception):
    """Base class for all conversion errors."""

    stage = "conversion"

    def __init__(self, message: str, stage: str = None):
        super().__init__(message)
        if stage is not None:
            self.stage = stage


class InvalidInput(RasterHexError, ValueError):
    """Non-finite or degenerate transform, bad pixel size, empty range, bad window."""

    stage = "input"


class GridError(RasterHexError):
    """The hex grid provider rejected a resolution, coordinate or cell."""

    stage = "grid"


class AggregationConflict(RasterHexError):
    """An aggregation policy could not combine two values."""

    stage = "aggregation"


class ChunkFailure(RasterHexError):
    """Wraps the first error raised while processing a chunk.

    The original error is available as ``error`` and as ``__cause__``.
    """

    stage = "chunk"

    def __init__(self, chunk_index: int, error: BaseException):
        super().__init__(
            f"Chunk {chunk_index} failed in stage "
            f"'{getattr(error, 'stage', type(error).__name__)}': {error}"
        )
        self.chunk_index = chunk_index
        self.error = error
