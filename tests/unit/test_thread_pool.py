"""
Unit tests for the worker thread pool.
"""

import threading

import pytest

from helloserver.core.thread_pool import ThreadPool


class TestThreadPool:
    """Tests for ThreadPool."""

    def test_runs_submitted_tasks(self):
        pool = ThreadPool(min_workers=2, max_workers=4)
        pool.start()
        done = threading.Event()
        results = []

        def task(value):
            results.append(value)
            if len(results) == 10:
                done.set()

        try:
            for i in range(10):
                pool.submit(task, args=(i,))
            assert done.wait(timeout=5)
        finally:
            pool.shutdown(wait=True, timeout=5)

        assert sorted(results) == list(range(10))

    def test_starts_min_workers(self):
        pool = ThreadPool(min_workers=3, max_workers=5)
        pool.start()
        try:
            assert pool.worker_count == 3
            assert pool.is_running
        finally:
            pool.shutdown()

    def test_scales_up_when_busy(self):
        pool = ThreadPool(min_workers=1, max_workers=3)
        pool.start()
        release = threading.Event()
        started = threading.Semaphore(0)

        def blocker():
            started.release()
            release.wait(timeout=5)

        try:
            pool.submit(blocker)
            assert started.acquire(timeout=5)
            pool.submit(blocker)
            pool.submit(blocker)

            assert 1 < pool.worker_count <= 3
        finally:
            release.set()
            pool.shutdown(wait=True, timeout=5)

    def test_failing_task_does_not_kill_worker(self, caplog):
        pool = ThreadPool(min_workers=1, max_workers=1)
        pool.start()
        done = threading.Event()

        def broken():
            raise RuntimeError("boom")

        try:
            pool.submit(broken)
            pool.submit(done.set)
            assert done.wait(timeout=5)
            assert pool.stats["tasks"]["failed"] == 1
        finally:
            pool.shutdown()

        assert "boom" in caplog.text

    def test_submit_before_start_raises(self):
        with pytest.raises(RuntimeError):
            ThreadPool().submit(print)

    def test_submit_after_shutdown_raises(self):
        pool = ThreadPool(min_workers=1, max_workers=1)
        pool.start()
        pool.shutdown()

        with pytest.raises(RuntimeError):
            pool.submit(print)

    def test_workers_are_daemons(self):
        pool = ThreadPool(min_workers=2, max_workers=2)
        pool.start()
        try:
            assert all(w.daemon for w in pool._workers)
        finally:
            pool.shutdown()

    @pytest.mark.parametrize("kwargs", [
        {"min_workers": 0},
        {"min_workers": 4, "max_workers": 2},
    ])
    def test_invalid_sizes(self, kwargs):
        with pytest.raises(ValueError):
            ThreadPool(**kwargs)
