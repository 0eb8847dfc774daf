"""Chunk schedulers.

Every scheduler exposes the same ``map(fn, items)`` contract: it yields
``(index, result)`` pairs and raises ChunkFailure for the first chunk that
fails. The sequential scheduler runs in the calling thread; the pool
scheduler fans out over a ``concurrent.futures`` thread or process pool.
Callers never see a partial result: once a chunk fails, pending chunks
are cancelled and nothing further is yielded.
"""

import logging
import os
from concurrent.futures import FIRST_COMPLETED, ProcessPoolExecutor, ThreadPoolExecutor, wait
from typing import Any, Callable, Iterator, Optional, Sequence, Tuple

from rasterhex.contracts import require
from rasterhex.errors import ChunkFailure, InvalidInput

__all__ = ['SequentialScheduler', 'PoolScheduler', 'make_scheduler']

logger = logging.getLogger(__name__)


class SequentialScheduler:
    """Run chunks one after the other in the calling thread."""

    kind = "sequential"

    def map(self, fn: Callable, items: Sequence[Any]) -> Iterator[Tuple[int, Any]]:
        for index, item in enumerate(items):
            try:
                result = fn(item)
            except Exception as err:
                logger.error("Chunk %d failed: %s", index, err)
                raise ChunkFailure(index, err) from err
            yield index, result

    def __repr__(self) -> str:
        return "SequentialScheduler()"


class PoolScheduler:
    """Run chunks on a bounded thread or process pool.

    Parameters
    ----------
    kind : {"thread", "process"}
        Executor type. Process pools require ``fn`` and the items to be
        picklable.
    max_workers : int, optional
        Pool size. Defaults to ``os.cpu_count()``.
    """

    def __init__(self, kind: str = "thread", max_workers: Optional[int] = None):
        require(
            kind in ("thread", "process"),
            f"Unknown pool kind {kind!r}, expected 'thread' or 'process'",
            InvalidInput,
        )
        max_workers = max_workers or os.cpu_count() or 1
        require(max_workers >= 1, f"max_workers must be >= 1, got {max_workers}", InvalidInput)
        self.kind = kind
        self.max_workers = max_workers

    def _executor(self):
        if self.kind == "process":
            return ProcessPoolExecutor(max_workers=self.max_workers)
        return ThreadPoolExecutor(max_workers=self.max_workers)

    def map(self, fn: Callable, items: Sequence[Any]) -> Iterator[Tuple[int, Any]]:
        """Yield ``(index, result)`` in completion order."""
        executor = self._executor()
        futures = {}
        try:
            futures = {executor.submit(fn, item): index for index, item in enumerate(items)}
            pending = set(futures)
            while pending:
                done, pending = wait(pending, return_when=FIRST_COMPLETED)
                for future in done:
                    index = futures[future]
                    err = future.exception()
                    if err is not None:
                        cancelled = sum(f.cancel() for f in pending)
                        logger.error(
                            "Chunk %d failed: %s (cancelled %d pending chunks)",
                            index, err, cancelled,
                        )
                        raise ChunkFailure(index, err) from err
                    yield index, future.result()
        finally:
            # Running chunks own their partial results; they are not waited for
            executor.shutdown(wait=False, cancel_futures=True)

    def __repr__(self) -> str:
        return f"PoolScheduler(kind={self.kind!r}, max_workers={self.max_workers})"


def make_scheduler(kind: str = "sequential", max_workers: Optional[int] = None):
    """Build the scheduler named by ``kind`` ("sequential", "thread" or "process")."""
    if kind == "sequential":
        return SequentialScheduler()
    return PoolScheduler(kind, max_workers)
