"""
HackeyeBot - Guild Worker Pool
==============================

One asyncio worker per guild, fed by an ordered queue.

DESIGN:
    Every event for a guild runs as a job on that guild's worker, so
    "record, prune, extract, score, decide" never interleaves with another
    event from the same guild. Different guilds have different workers
    and share no lock.

    Workers are created on the first job for a guild and retire after
    idle_timeout seconds with an empty queue. Retiring drops the guild's
    transient state; the next job starts a fresh worker.

    Job exceptions are set on the submitter's future and never stop the
    worker. Cancellation does stop it: the running job's future is
    cancelled, jobs still queued fail with RuntimeError, and the worker is
    retired, so the next job for the guild starts a fresh one.
"""

import asyncio
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple

from hackeye.core.constants import SHUTDOWN_TIMEOUT, WORKER_IDLE_TIMEOUT
from hackeye.core.logger import logger
from hackeye.utils.async_utils import create_safe_task

from .state import GuildState


Job = Callable[[GuildState], Awaitable[Any]]

_STOP = object()


class GuildWorker:
    """Serial job runner for one guild."""

    def __init__(
        self,
        guild_id: int,
        pool: "GuildWorkerPool",
        idle_timeout: float,
    ) -> None:
        self.guild_id = guild_id
        self.state = GuildState(guild_id=guild_id)
        self.idle_timeout = idle_timeout
        self.jobs_processed = 0
        self._pool = pool
        self._queue: "asyncio.Queue[Any]" = asyncio.Queue()
        self._task: Optional[asyncio.Task] = None

    def start(self) -> None:
        self._task = create_safe_task(self._run(), f"Guild Worker {self.guild_id}")

    def enqueue(self, job: Job, future: asyncio.Future) -> None:
        self._queue.put_nowait((job, future))

    def stop(self) -> None:
        self._queue.put_nowait(_STOP)

    @property
    def task(self) -> Optional[asyncio.Task]:
        return self._task

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    async def _run(self) -> None:
        reason = "Cancelled"
        try:
            while True:
                try:
                    item = await asyncio.wait_for(self._queue.get(), timeout=self.idle_timeout)
                except asyncio.TimeoutError:
                    if self._queue.empty():
                        reason = "Idle"
                        return
                    continue

                if item is _STOP:
                    reason = "Shutdown"
                    return

                job, future = item
                if future.cancelled():
                    continue

                try:
                    result = await job(self.state)
                except Exception as e:
                    if not future.done():
                        future.set_exception(e)
                except BaseException:
                    # Cancellation (of the job or of this worker) ends the worker
                    if not future.done():
                        future.cancel()
                    raise
                else:
                    if not future.done():
                        future.set_result(result)
                finally:
                    self.jobs_processed += 1
        finally:
            self._pool._retire(self, reason=reason)
            self._fail_pending(reason)

    def _fail_pending(self, reason: str) -> None:
        """Resolve every job still queued on a worker that has stopped."""
        while not self._queue.empty():
            item = self._queue.get_nowait()
            if item is _STOP:
                continue
            _, future = item
            if not future.done():
                future.set_exception(RuntimeError(
                    f"Guild worker {self.guild_id} stopped ({reason}) before the job ran"
                ))


class GuildWorkerPool:
    """
    Lazily created guild workers keyed by guild id.

    Attributes:
        idle_timeout: Seconds a worker waits for work before retiring.
        _workers: Live workers by guild id.
    """

    def __init__(self, idle_timeout: float = WORKER_IDLE_TIMEOUT) -> None:
        self.idle_timeout = idle_timeout
        self._workers: Dict[int, GuildWorker] = {}
        self._closing = False

    # =========================================================================
    # Public API
    # =========================================================================

    def submit(self, guild_id: int, job: Job) -> asyncio.Future:
        """
        Queue a job on the guild's worker.

        Jobs for one guild run in submission order.

        Returns:
            Future resolved with the job's result or exception.

        Raises:
            RuntimeError: If the pool is shutting down.
        """
        if self._closing:
            raise RuntimeError("Guild worker pool is shut down")

        future = asyncio.get_running_loop().create_future()
        self._get_or_create(guild_id).enqueue(job, future)
        return future

    async def shutdown(self, timeout: float = SHUTDOWN_TIMEOUT) -> int:
        """
        Let every worker finish its queue, then stop it.

        Returns:
            Number of workers cancelled because they missed the timeout.
        """
        self._closing = True
        workers = list(self._workers.values())
        for worker in workers:
            worker.stop()

        tasks = [w.task for w in workers if w.task is not None]
        if not tasks:
            return 0

        done, pending = await asyncio.wait(tasks, timeout=timeout)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
            logger.warning("Guild Workers Cancelled", [
                ("Workers", str(len(pending))),
                ("Reason", "Shutdown timeout"),
            ])

        self._workers.clear()
        logger.info("Guild Worker Pool Stopped", [
            ("Workers", str(len(workers))),
        ])
        return len(pending)

    @property
    def active_count(self) -> int:
        return len(self._workers)

    def has_worker(self, guild_id: int) -> bool:
        return guild_id in self._workers

    def state_for(self, guild_id: int) -> Optional[GuildState]:
        """Live state of a guild's worker, if one is running."""
        worker = self._workers.get(guild_id)
        return worker.state if worker else None

    # =========================================================================
    # Worker Lifecycle
    # =========================================================================

    def _get_or_create(self, guild_id: int) -> GuildWorker:
        worker = self._workers.get(guild_id)
        if worker is None:
            worker = GuildWorker(guild_id, self, self.idle_timeout)
            self._workers[guild_id] = worker
            worker.start()
            logger.debug("Guild Worker Started", [
                ("Guild ID", str(guild_id)),
                ("Active Workers", str(len(self._workers))),
            ])
        return worker

    def _retire(self, worker: GuildWorker, reason: str) -> None:
        if self._workers.get(worker.guild_id) is worker:
            del self._workers[worker.guild_id]
        logger.debug("Guild Worker Retired", [
            ("Guild ID", str(worker.guild_id)),
            ("Reason", reason),
            ("Jobs", str(worker.jobs_processed)),
        ])


__all__ = ["GuildWorker", "GuildWorkerPool", "Job"]
