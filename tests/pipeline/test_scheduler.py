import math
import threading
import time

import pytest

pytestmark = pytest.mark.unit

from rasterhex.errors import ChunkFailure, InvalidInput
from rasterhex.pipeline.scheduler import PoolScheduler, SequentialScheduler, make_scheduler


def _fail_on(bad):
    def fn(item):
        if item == bad:
            raise ValueError(f"bad item {item}")
        return item * 10
    return fn


class TestSequential:

    def test_yields_indexed_results_in_order(self):
        assert list(SequentialScheduler().map(_fail_on(None), [3, 1, 2])) == [(0, 30), (1, 10), (2, 20)]

    def test_failure_wraps_error(self):
        with pytest.raises(ChunkFailure) as excinfo:
            list(SequentialScheduler().map(_fail_on(2), [0, 1, 2, 3]))
        err = excinfo.value
        assert err.chunk_index == 2
        assert isinstance(err.__cause__, ValueError)
        assert err.error is err.__cause__
        assert "Chunk 2 failed" in str(err)

    def test_stops_at_first_failure(self):
        seen = []

        def fn(item):
            seen.append(item)
            if item == 1:
                raise RuntimeError("boom")
            return item

        with pytest.raises(ChunkFailure):
            list(SequentialScheduler().map(fn, range(5)))
        assert seen == [0, 1]


class TestPool:

    def test_thread_pool_results(self):
        results = dict(PoolScheduler("thread", 3).map(_fail_on(None), list(range(20))))
        assert results == {i: i * 10 for i in range(20)}

    def test_thread_pool_failure(self):
        with pytest.raises(ChunkFailure) as excinfo:
            dict(PoolScheduler("thread", 4).map(_fail_on(5), list(range(10))))
        assert excinfo.value.chunk_index == 5
        assert isinstance(excinfo.value.__cause__, ValueError)

    def test_pending_chunks_cancelled_after_failure(self):
        lock = threading.Lock()
        started = []

        def fn(item):
            with lock:
                started.append(item)
            if item == 0:
                raise RuntimeError("first chunk fails")
            time.sleep(0.01)
            return item

        with pytest.raises(ChunkFailure):
            list(PoolScheduler("thread", 1).map(fn, list(range(50))))
        assert len(started) < 50

    def test_process_pool_with_picklable_function(self):
        results = dict(PoolScheduler("process", 2).map(math.sqrt, [0.0, 4.0, 9.0]))
        assert results == {0: 0.0, 1: 2.0, 2: 3.0}

    def test_process_pool_failure(self):
        with pytest.raises(ChunkFailure) as excinfo:
            dict(PoolScheduler("process", 2).map(math.sqrt, [4.0, -1.0]))
        assert excinfo.value.chunk_index == 1
        assert isinstance(excinfo.value.error, ValueError)

    def test_empty_input(self):
        assert list(PoolScheduler("thread", 2).map(_fail_on(None), [])) == []


class TestFactory:

    def test_make_scheduler_kinds(self):
        assert isinstance(make_scheduler("sequential"), SequentialScheduler)
        pool = make_scheduler("thread", 3)
        assert isinstance(pool, PoolScheduler)
        assert (pool.kind, pool.max_workers) == ("thread", 3)

    def test_default_pool_size(self):
        assert make_scheduler("process").max_workers >= 1

    def test_unknown_kind(self):
        with pytest.raises(InvalidInput, match="Unknown pool kind"):
            make_scheduler("cluster")

    def test_bad_worker_count(self):
        with pytest.raises(InvalidInput, match="max_workers"):
            PoolScheduler("thread", -2)
