"""
Background generation with "most recent request wins" semantics.

Every submitted request gets the next value of a generation counter. When
a result arrives it is kept only if its generation number is still the
latest one issued; anything older is marked superseded and dropped. Queued
older requests are cancelled outright when a newer one is submitted;
requests already running in a worker are left to finish and ignored.

Results cross the worker boundary as plain data (WorldMap.to_dict()) and
are re-linked into a WorldMap on arrival.
"""

import threading
import uuid
from concurrent.futures import Executor, Future, ProcessPoolExecutor, ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from functools import partial
from typing import Any, Dict, Optional

import structlog

from ..core.pipeline import coerce_options, generate_world_dict
from ..core.world_map import WorldMap

logger = structlog.get_logger()


class JobStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    SUPERSEDED = "superseded"


@dataclass
class GenerationJob:
    """Bookkeeping for one generation request."""

    id: str
    generation: int
    width: int
    height: int
    country_count: int
    options: Dict[str, Any]
    status: JobStatus = JobStatus.PENDING
    seed: Optional[int] = None
    error_message: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    completed_at: Optional[datetime] = None


def create_executor(kind: str = "process", max_workers: int = 1) -> Executor:
    """Build the executor that runs generation requests."""
    if kind == "process":
        return ProcessPoolExecutor(max_workers=max_workers)
    if kind == "thread":
        return ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="worldgen")
    raise ValueError(f"Unknown executor kind: {kind}")


class GenerationService:
    """
    Runs generation requests off the caller's thread and keeps the latest world.

    At most history_limit settled jobs are remembered; older ones are
    forgotten oldest first. Pending jobs and the job behind the latest
    world are always kept.
    """

    def __init__(
        self,
        executor: Optional[Executor] = None,
        kind: str = "process",
        max_workers: int = 1,
        history_limit: int = 100,
    ):
        if history_limit < 1:
            raise ValueError(f"history_limit must be at least 1, got {history_limit}")
        self._executor = executor or create_executor(kind, max_workers)
        self._history_limit = history_limit
        self._lock = threading.RLock()  # cancel() runs callbacks inline
        self._generation = 0
        self._jobs: Dict[str, GenerationJob] = {}
        self._futures: Dict[str, Future] = {}
        self._finished: Dict[str, threading.Event] = {}
        self._latest: Optional[WorldMap] = None
        self._latest_job_id: Optional[str] = None

    @property
    def generation(self) -> int:
        """Number of the most recently issued request."""
        return self._generation

    @property
    def latest(self) -> Optional[WorldMap]:
        """World from the most recent request, once it has completed."""
        return self._latest

    @property
    def latest_job_id(self) -> Optional[str]:
        return self._latest_job_id

    def submit(
        self,
        width: int,
        height: int,
        country_count: int,
        options: Optional[Dict[str, Any]] = None,
    ) -> GenerationJob:
        """
        Queue a generation request, superseding every earlier one.

        Options are validated here so bad input fails fast in the caller.
        """
        options = coerce_options(options).model_dump()

        with self._lock:
            self._generation += 1
            job = GenerationJob(
                id=str(uuid.uuid4()),
                generation=self._generation,
                width=width,
                height=height,
                country_count=country_count,
                options=options,
            )
            self._jobs[job.id] = job
            self._finished[job.id] = threading.Event()

            for other_id, other in list(self._futures.items()):
                if other.cancel():
                    logger.info("Queued generation cancelled", job_id=other_id)

            future = self._executor.submit(
                generate_world_dict, width, height, country_count, options
            )
            self._futures[job.id] = future

        logger.info(
            "Generation submitted",
            job_id=job.id,
            generation=job.generation,
            width=width,
            height=height,
            country_count=country_count,
        )
        future.add_done_callback(partial(self._on_done, job.id, job.generation))
        return job

    def _on_done(self, job_id: str, generation: int, future: Future) -> None:
        with self._lock:
            self._futures.pop(job_id, None)
            job = self._jobs[job_id]
            job.completed_at = datetime.utcnow()
            try:
                if future.cancelled() or generation != self._generation:
                    job.status = JobStatus.SUPERSEDED
                    logger.info("Generation result ignored", job_id=job_id, generation=generation)
                    return

                error = future.exception()
                if error is not None:
                    job.status = JobStatus.FAILED
                    job.error_message = str(error)
                    logger.error("Map generation failed", job_id=job_id, error=str(error))
                    return

                world = WorldMap.from_dict(future.result())
                job.seed = world.seed
                job.status = JobStatus.COMPLETED
                self._latest = world
                self._latest_job_id = job_id
                logger.info(
                    "Map generation completed",
                    job_id=job_id,
                    generation=generation,
                    regions=len(world.regions),
                )
            finally:
                self._finished[job_id].set()
                self._prune()

    def _prune(self) -> None:
        settled = [
            job_id
            for job_id, event in self._finished.items()
            if event.is_set() and job_id != self._latest_job_id
        ]
        excess = len(settled) - self._history_limit
        for job_id in settled[:max(excess, 0)]:
            del self._jobs[job_id]
            del self._finished[job_id]
        if excess > 0:
            logger.debug("Job history pruned", removed=excess)

    def get_job(self, job_id: str) -> Optional[GenerationJob]:
        """Look up a job, refreshing pending/running from its future."""
        with self._lock:
            job = self._jobs.get(job_id)
            future = self._futures.get(job_id)
            if job is not None and future is not None and job.status == JobStatus.PENDING:
                if future.running():
                    job.status = JobStatus.RUNNING
            return job

    def wait(self, job_id: str, timeout: Optional[float] = None) -> GenerationJob:
        """Block until a job has been settled (completed, failed or superseded)."""
        with self._lock:
            job = self._jobs.get(job_id)
            event = self._finished.get(job_id)
        if event is None:
            raise KeyError(job_id)
        if not event.wait(timeout):
            raise TimeoutError(f"Job {job_id} did not finish within {timeout} seconds")
        return job

    def shutdown(self, wait: bool = False) -> None:
        self._executor.shutdown(wait=wait, cancel_futures=True)
