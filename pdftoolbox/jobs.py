"""Background execution of pipelines with progress tracking."""

import logging
import threading
import time
import uuid
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional

from .results import OutputArtifact, PipelineResult

LOGGER = logging.getLogger(__name__)


class JobStatus:
    """Enumeration of job states."""
    QUEUED = "queued"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class Job:
    """State of one submitted pipeline run."""
    job_id: str
    tool: str
    status: str = JobStatus.QUEUED
    stage: str = "Queued"
    progress: int = 0
    result: Optional[PipelineResult] = None
    artifact: Optional[OutputArtifact] = None
    error: Optional[str] = None
    created_at: float = field(default_factory=time.time)
    finished_at: Optional[float] = None
    done: threading.Event = field(default_factory=threading.Event, repr=False)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "job_id": self.job_id,
            "tool": self.tool,
            "status": self.status,
            "stage": self.stage,
            "progress": self.progress,
            "result": self.result.to_dict() if self.result else None,
            "download_ready": self.artifact is not None,
            "error": self.error,
        }


class JobManager:
    """
    Runs pipelines on a thread pool and keeps their state.

    ``func`` passed to ``submit`` must accept a ``progress_callback``
    keyword and return a PipelineResult. Futures are released as soon as
    their job finishes; finished jobs stay until ``prune`` removes them.
    """

    def __init__(self, max_workers: int = 4):
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="pdftoolbox")
        self._jobs: Dict[str, Job] = {}
        self._futures: Dict[str, Future] = {}
        self._lock = threading.Lock()

    def submit(self, tool: str, func: Callable[..., PipelineResult], *args) -> str:
        """Queue a pipeline run and return its job id."""
        job_id = str(uuid.uuid4())
        with self._lock:
            self._jobs[job_id] = Job(job_id=job_id, tool=tool)
            future = self._executor.submit(self._run, job_id, tool, func, *args)
            self._futures[job_id] = future
        # Outside the lock: runs inline when the future is already done.
        future.add_done_callback(lambda _: self._release_future(job_id))
        LOGGER.debug("Submitted %s job %s", tool, job_id)
        return job_id

    def _release_future(self, job_id: str):
        with self._lock:
            self._futures.pop(job_id, None)

    def _run(self, job_id: str, tool: str, func: Callable[..., PipelineResult], *args) -> PipelineResult:
        def progress_callback(stage: str, percentage: int):
            with self._lock:
                job = self._jobs[job_id]
                job.stage = stage
                job.progress = percentage
                job.status = JobStatus.PROCESSING

        try:
            result = func(*args, progress_callback=progress_callback)
        except Exception as e:
            LOGGER.exception("Job %s crashed", job_id)
            result = PipelineResult(success=False, operation=tool, error=str(e))

        with self._lock:
            job = self._jobs[job_id]
            job.status = JobStatus.COMPLETED if result.success else JobStatus.FAILED
            job.stage = "Complete" if result.success else "Failed"
            job.progress = 100
            job.result = result
            job.artifact = result.artifact
            job.error = result.error
            job.finished_at = time.time()
            job.done.set()
        return result

    def get(self, job_id: str) -> Optional[dict]:
        """Snapshot of a job's state, or None if unknown."""
        with self._lock:
            job = self._jobs.get(job_id)
            return job.to_dict() if job else None

    def wait(self, job_id: str, timeout: Optional[float] = None) -> PipelineResult:
        """
        Block until the job finishes and return its result.

        Raises:
            KeyError: If the job is unknown
            TimeoutError: If the job is still running after ``timeout`` seconds
        """
        with self._lock:
            job = self._jobs[job_id]
        if not job.done.wait(timeout):
            raise TimeoutError(f"Job {job_id} did not finish within {timeout} seconds")
        return job.result

    def pop_artifact(self, job_id: str) -> Optional[OutputArtifact]:
        """
        Take the job's artifact for delivery.

        The artifact is released from the job; later calls return None.

        Raises:
            KeyError: If the job is unknown
        """
        with self._lock:
            job = self._jobs[job_id]
            artifact, job.artifact = job.artifact, None
            if job.result is not None:
                job.result.artifact = None
            return artifact

    def prune(self, max_age_seconds: float) -> int:
        """
        Forget finished jobs older than ``max_age_seconds``.

        Undelivered artifacts of those jobs are released with them.
        Running jobs are never removed.

        Returns:
            Number of jobs removed
        """
        cutoff = time.time() - max_age_seconds
        with self._lock:
            stale = [
                job_id for job_id, job in self._jobs.items()
                if job.finished_at is not None and job.finished_at < cutoff
            ]
            for job_id in stale:
                del self._jobs[job_id]
        if stale:
            LOGGER.debug("Pruned %d finished jobs", len(stale))
        return len(stale)

    def pending_futures(self) -> int:
        """Number of runs whose future has not been released yet."""
        with self._lock:
            return len(self._futures)

    def __len__(self) -> int:
        with self._lock:
            return len(self._jobs)

    def shutdown(self, wait: bool = True):
        self._executor.shutdown(wait=wait)
