from __future__ import annotations

import logging
import threading
from collections import deque
from concurrent.futures import Future, wait as wait_futures
from typing import Any, Callable, Deque, Iterable, List, Optional

logger = logging.getLogger(__name__)


class ForkJoinTask:
    """Handle for one unit of work scheduled on a `ForkJoinPool`.

    A task may sit in more than one place (its owner's deque, a thief's
    hands, a joiner about to run it inline); whoever wins `try_claim()` runs
    it and everyone else skips it.
    """

    def __init__(self, fn: Callable[..., Any], args: tuple, kwargs: dict):
        self._fn = fn
        self._args = args
        self._kwargs = kwargs
        self._claim_lock = threading.Lock()
        self._claimed = False
        self._future: Future = Future()

    def try_claim(self) -> bool:
        with self._claim_lock:
            if self._claimed:
                return False
            self._claimed = True
            return True

    @property
    def claimed(self) -> bool:
        with self._claim_lock:
            return self._claimed

    def execute(self) -> None:
        """Run the callable and record its outcome. Caller must hold the claim."""
        self._future.set_running_or_notify_cancel()
        try:
            result = self._fn(*self._args, **self._kwargs)
        except BaseException as exc:
            self._future.set_exception(exc)
        else:
            self._future.set_result(result)

    def done(self) -> bool:
        return self._future.done()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the task finishes or `timeout` passes; return whether it finished."""
        done, _ = wait_futures([self._future], timeout=timeout)
        return bool(done)

    def result(self, timeout: Optional[float] = None) -> Any:
        return self._future.result(timeout)


class ForkJoinPool:
    """Fixed-size work-stealing thread pool for divide-and-conquer task trees.

    Each worker owns a deque. Tasks forked from inside a worker go onto that
    worker's deque and are popped LIFO by the owner; idle workers steal FIFO
    from the other end of someone else's deque. Tasks submitted from outside
    the pool go onto a shared submission queue.

    `join()` called on a worker runs the awaited task inline if nobody has
    started it yet. If another thread took it, the joiner helps: it keeps
    running queued tasks until the awaited one is done.

    Inline and helping runs nest on the joiner's stack, so they stop once a
    thread is `max_inline_depth` tasks deep. Past that point the joiner
    leaves the task queued and waits for a thief. When no worker is idle to
    steal it, the pool starts a spare worker, which exits again as soon as it
    finds no work. A task only ever waits on its own descendants, so the
    pool never deadlocks however deep the tree is relative to the worker
    count.
    """

    def __init__(
        self,
        parallelism: int,
        *,
        idle_wait: float = 0.05,
        max_inline_depth: int = 32,
        thread_name_prefix: str = "forkjoin",
    ):
        if parallelism is None or parallelism <= 0:
            raise ValueError(f"parallelism must be positive, got {parallelism!r}")
        if max_inline_depth <= 0:
            raise ValueError(f"max_inline_depth must be positive, got {max_inline_depth!r}")
        self.parallelism = int(parallelism)
        self._idle_wait = idle_wait
        self._max_inline_depth = max_inline_depth
        self._thread_name_prefix = thread_name_prefix
        self._queues: List[Deque[ForkJoinTask]] = [deque() for _ in range(self.parallelism)]
        self._submissions: Deque[ForkJoinTask] = deque()
        self._work_available = threading.Condition()
        self._idle_workers = 0
        self._start_lock = threading.Lock()
        self._local = threading.local()
        self._threads: List[threading.Thread] = []
        self._shutdown = False

    def __enter__(self) -> ForkJoinPool:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown(wait=True)

    def _start_worker(self, index: int, spare: bool = False) -> None:
        # Caller holds _start_lock.
        t = threading.Thread(
            target=self._worker,
            args=(index, spare),
            name=f"{self._thread_name_prefix}-{index}",
            daemon=True,
        )
        self._threads.append(t)
        t.start()

    def _ensure_started(self) -> None:
        with self._start_lock:
            if self._shutdown:
                raise RuntimeError("cannot schedule new tasks after shutdown")
            if self._threads:
                return
            for index in range(self.parallelism):
                self._start_worker(index)
            logger.debug("Started %d fork-join workers", self.parallelism)

    def _compensate(self) -> None:
        """Make sure some thread is free to pick up queued work while the caller blocks."""
        with self._work_available:
            if self._idle_workers:
                self._work_available.notify()
                return
        with self._start_lock:
            if self._shutdown:
                return
            index = len(self._queues)
            self._queues.append(deque())
            self._start_worker(index, spare=True)
        logger.debug("Started spare fork-join worker %d", index)

    def _worker_index(self) -> Optional[int]:
        if getattr(self._local, "pool", None) is self:
            return self._local.index
        return None

    def _signal(self) -> None:
        with self._work_available:
            self._work_available.notify()

    def _has_work(self) -> bool:
        return bool(self._submissions) or any(self._queues)

    def _poll(self, index: int) -> Optional[ForkJoinTask]:
        """Take the next runnable task for worker `index`: own deque, submissions, then steal."""
        queues = self._queues
        own = queues[index]
        while True:
            try:
                task = own.pop()
            except IndexError:
                break
            if task.try_claim():
                return task

        while True:
            try:
                task = self._submissions.popleft()
            except IndexError:
                break
            if task.try_claim():
                return task

        count = len(queues)
        for offset in range(1, count):
            victim = queues[(index + offset) % count]
            while True:
                try:
                    task = victim.popleft()
                except IndexError:
                    break
                if task.try_claim():
                    return task
        return None

    def _run(self, task: ForkJoinTask) -> None:
        self._local.depth += 1
        try:
            task.execute()
        finally:
            self._local.depth -= 1

    def _worker(self, index: int, spare: bool) -> None:
        self._local.pool = self
        self._local.index = index
        self._local.depth = 0
        while True:
            task = self._poll(index)
            if task is not None:
                self._run(task)
                continue
            if spare:
                return
            with self._work_available:
                if self._shutdown and not self._has_work():
                    return
                if not self._has_work():
                    self._idle_workers += 1
                    try:
                        self._work_available.wait(self._idle_wait)
                    finally:
                        self._idle_workers -= 1

    def fork(self, fn: Callable[..., Any], *args, **kwargs) -> ForkJoinTask:
        """Schedule `fn(*args, **kwargs)` and return its handle without waiting."""
        self._ensure_started()
        task = ForkJoinTask(fn, args, kwargs)
        index = self._worker_index()
        if index is not None:
            self._queues[index].append(task)
        else:
            self._submissions.append(task)
        self._signal()
        return task

    submit = fork

    def join(self, task: ForkJoinTask) -> Any:
        """Wait for `task` and return its result, re-raising its exception."""
        index = self._worker_index()
        if index is None:
            return task.result()

        if self._local.depth < self._max_inline_depth and task.try_claim():
            self._run(task)
            return task.result()

        while not task.done():
            if self._local.depth < self._max_inline_depth:
                other = self._poll(index)
                if other is not None:
                    self._run(other)
                    continue
            elif not task.claimed:
                self._compensate()
            task.wait(self._idle_wait)
        return task.result()

    def invoke_all(self, calls: Iterable[tuple]) -> List[Any]:
        """Fork every `(fn, *args)` in `calls` then join all of them.

        All tasks are joined even when one fails; the first failure is then
        re-raised.
        """
        tasks = [self.fork(fn, *args) for fn, *args in calls]
        return self.join_all(tasks)

    def join_all(self, tasks: Iterable[ForkJoinTask]) -> List[Any]:
        results = []
        first_error: Optional[BaseException] = None
        for task in tasks:
            try:
                results.append(self.join(task))
            except Exception as e:
                if first_error is None:
                    first_error = e
                results.append(None)
        if first_error is not None:
            raise first_error
        return results

    def shutdown(self, wait: bool = True) -> None:
        with self._start_lock:
            self._shutdown = True
            threads = list(self._threads)
        with self._work_available:
            self._work_available.notify_all()
        if wait:
            current = threading.current_thread()
            for t in threads:
                if t is not current:
                    t.join()
