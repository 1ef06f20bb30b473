"""
=============================================================================
THREAD POOL
=============================================================================

A fixed set of daemon worker threads pulling connection tasks from a shared
queue, growing toward max_workers when every worker is busy.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   accept loop ── submit(handle, (conn,)) ──►  ┌──────────────────┐  │
    │                                               │   TASK QUEUE     │  │
    │                                               │   (unbounded)    │  │
    │                                               └────────┬─────────┘  │
    │                                                        │ get()      │
    │                         ┌──────────┬──────────┬────────┴─┐          │
    │                         ▼          ▼          ▼          ▼          │
    │                     Worker-0   Worker-1   Worker-2   Worker-3 ...   │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The queue has no size limit and submit() never refuses work. Requests that
arrive while every worker is busy wait in the queue; nothing is answered
with 503.

=============================================================================
WORKER LIFECYCLE
=============================================================================

    while not shutdown:
        task = queue.get()      ← blocks (with idle timeout)
        if task is None:        ← poison pill
            break
        execute(task)           ← exceptions logged, worker survives
        queue.task_done()

Workers are daemon threads: when the main thread exits (Ctrl+C) the process
ends without waiting for in-flight requests.

=============================================================================
INTERVIEW QUESTIONS
=============================================================================

Q: Why a pool instead of a thread per connection?
A: Threads that already exist answer the first request of a burst without
   paying thread start-up cost, and max_workers caps stack memory.

Q: What happens when all workers are busy?
A: Tasks queue up. Another worker is added if the pool is below
   max_workers; otherwise the task waits for a worker to free up.

=============================================================================
"""

import threading
import queue
import time
import logging
from typing import Callable, Optional, Any
from dataclasses import dataclass, field
from enum import Enum


logger = logging.getLogger(__name__)


class WorkerState(Enum):
    """Worker thread states."""
    IDLE = "idle"
    BUSY = "busy"
    STOPPED = "stopped"


@dataclass
class Task:
    """
    A deferred function call.

    Attributes:
        func: The function to execute.
        args: Positional arguments for the function.
        kwargs: Keyword arguments for the function.
        submitted_at: Time the task was queued (for wait-time logging).
    """
    func: Callable[..., Any]
    args: tuple = ()
    kwargs: dict = field(default_factory=dict)
    submitted_at: float = field(default_factory=time.time)


class Worker(threading.Thread):
    """
    Worker thread that processes tasks from the queue.

    A task that raises is logged with its traceback and counted in
    tasks_failed; the worker then goes back to the queue.
    """

    def __init__(
        self,
        task_queue: queue.Queue,
        worker_id: int,
        idle_timeout: float = 60.0
    ):
        super().__init__(name=f"Worker-{worker_id}", daemon=True)

        self.task_queue = task_queue
        self.worker_id = worker_id
        self.idle_timeout = idle_timeout

        self.state = WorkerState.IDLE
        self._shutdown = threading.Event()

        self.tasks_completed = 0
        self.tasks_failed = 0

    def run(self):
        logger.debug(f"Worker {self.worker_id} started")

        while not self._shutdown.is_set():
            try:
                task = self.task_queue.get(timeout=self.idle_timeout)
            except queue.Empty:
                continue

            if task is None:
                self.task_queue.task_done()
                break

            self._execute_task(task)
            self.task_queue.task_done()

        self.state = WorkerState.STOPPED
        logger.debug(f"Worker {self.worker_id} stopped")

    def _execute_task(self, task: Task):
        self.state = WorkerState.BUSY
        start_time = time.time()

        try:
            task.func(*task.args, **task.kwargs)
        except Exception as e:
            elapsed = time.time() - start_time
            logger.exception(
                f"Worker {self.worker_id} task failed after {elapsed:.3f}s: {e}"
            )
            self.tasks_failed += 1
        else:
            elapsed = time.time() - start_time
            logger.debug(
                f"Worker {self.worker_id} completed task in {elapsed:.3f}s "
                f"(queued {start_time - task.submitted_at:.3f}s)"
            )
            self.tasks_completed += 1
        finally:
            self.state = WorkerState.IDLE

    def shutdown(self):
        """Signal the worker to stop after its current task."""
        self._shutdown.set()


class ThreadPool:
    """
    Thread pool for concurrent connection handling.

    ┌─────────────────────────────────────────────────────────────────────┐
    │   pool = ThreadPool(min_workers=4, max_workers=16)                  │
    │   pool.start()                                                       │
    │   pool.submit(handle_connection, args=(conn,))                      │
    │   pool.stats          # {"workers": {...}, "tasks": {...}}         │
    │   pool.shutdown(wait=False)                                         │
    └─────────────────────────────────────────────────────────────────────┘
    """

    def __init__(
        self,
        min_workers: int = 4,
        max_workers: int = 16,
        idle_timeout: float = 60.0
    ):
        """
        Args:
            min_workers: Worker threads created by start().
            max_workers: Upper bound when scaling up under load.
            idle_timeout: Seconds an idle worker waits before re-checking
                          its shutdown flag.
        """
        if min_workers < 1:
            raise ValueError("min_workers must be >= 1")
        if max_workers < min_workers:
            raise ValueError("max_workers must be >= min_workers")

        self.min_workers = min_workers
        self.max_workers = max_workers
        self.idle_timeout = idle_timeout

        self._task_queue: queue.Queue[Optional[Task]] = queue.Queue()

        self._workers: list[Worker] = []
        self._lock = threading.Lock()  # Protects _workers
        self._started = False
        self._shutdown = False
        self._next_worker_id = 0

    @property
    def is_running(self) -> bool:
        return self._started and not self._shutdown

    def start(self):
        """Start min_workers worker threads. Calling twice is a no-op."""
        if self._started:
            return

        logger.info(f"Starting thread pool with {self.min_workers} workers")

        self._shutdown = False
        with self._lock:
            for _ in range(self.min_workers):
                self._add_worker()

        self._started = True

    def _add_worker(self) -> Worker:
        # Caller holds self._lock
        worker = Worker(
            task_queue=self._task_queue,
            worker_id=self._next_worker_id,
            idle_timeout=self.idle_timeout
        )
        self._next_worker_id += 1
        self._workers.append(worker)
        worker.start()
        return worker

    def submit(
        self,
        func: Callable[..., Any],
        args: tuple = (),
        kwargs: Optional[dict] = None,
    ) -> None:
        """
        Queue a task for execution.

        Never blocks and never rejects: the queue is unbounded.

        Raises:
            RuntimeError: If the pool is not started or is shutting down.
        """
        if not self._started:
            raise RuntimeError("Thread pool not started")

        if self._shutdown:
            raise RuntimeError("Thread pool is shutting down")

        self._task_queue.put(Task(func=func, args=args, kwargs=kwargs or {}))
        self._maybe_scale_up()

    def _maybe_scale_up(self):
        """
        Add a worker if every worker is busy, work is waiting and the pool
        is below max_workers.
        """
        with self._lock:
            if len(self._workers) >= self.max_workers:
                return

            if self.busy_workers == len(self._workers) and self.queue_size > 0:
                logger.debug(
                    f"Scaling up: {len(self._workers)} -> {len(self._workers) + 1} workers"
                )
                self._add_worker()

    def shutdown(self, wait: bool = True, timeout: Optional[float] = None):
        """
        Stop the pool.

        Args:
            wait: Wait for queued tasks to finish before stopping workers.
                  With False, queued tasks are abandoned.
            timeout: Upper bound on the wait, in seconds.
        """
        if not self._started:
            return

        logger.info("Shutting down thread pool...")
        self._shutdown = True

        if wait:
            deadline = time.time() + timeout if timeout else None
            while self._task_queue.unfinished_tasks:
                if deadline and time.time() > deadline:
                    logger.warning("Shutdown timeout, forcing stop")
                    break
                time.sleep(0.05)

        with self._lock:
            workers = list(self._workers)
            self._workers.clear()

        for worker in workers:
            worker.shutdown()
            self._task_queue.put(None)

        if wait:
            for worker in workers:
                worker.join(timeout=2.0)

        self._started = False
        logger.info("Thread pool shutdown complete")

    @property
    def worker_count(self) -> int:
        return len(self._workers)

    @property
    def busy_workers(self) -> int:
        return sum(1 for w in self._workers if w.state == WorkerState.BUSY)

    @property
    def queue_size(self) -> int:
        return self._task_queue.qsize()

    @property
    def stats(self) -> dict:
        """Worker and task counts, for debug logging and tests."""
        return {
            "workers": {
                "total": len(self._workers),
                "busy": self.busy_workers,
                "idle": sum(1 for w in self._workers if w.state == WorkerState.IDLE),
            },
            "tasks": {
                "queued": self.queue_size,
                "completed": sum(w.tasks_completed for w in self._workers),
                "failed": sum(w.tasks_failed for w in self._workers),
            },
        }
