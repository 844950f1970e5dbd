"""In-memory registry of in-flight publish jobs"""

import threading
import time
from typing import Callable, Dict, List, Optional, Tuple

from ..models.publish import PublishJob, PublishStatus, StatusResponse


class JobRegistry:
    """Keyed store of publish jobs awaiting a terminal status

    Owned by one ``PublishService``. ``pop`` is the atomic compare-and-remove
    that decides which poller performs cleanup for a job. Terminal outcomes
    are kept until ``sweep`` finds them older than its ``max_age``.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self.clock = clock
        self._lock = threading.Lock()
        self._jobs: Dict[str, PublishJob] = {}
        self._outcomes: Dict[str, Tuple[float, StatusResponse]] = {}

    def register(self, job: PublishJob) -> None:
        """Add a job; replaces any stale entry with the same id"""
        with self._lock:
            self._jobs[job.job_id] = job
            self._outcomes.pop(job.job_id, None)

    def get(self, job_id: str) -> Optional[PublishJob]:
        with self._lock:
            return self._jobs.get(job_id)

    def pop(self, job_id: str) -> Optional[PublishJob]:
        """Remove and return a job, or None if another caller already did"""
        with self._lock:
            return self._jobs.pop(job_id, None)

    def update_status(self,
                      job_id: str,
                      status: PublishStatus,
                      progress_percent: Optional[int] = None) -> None:
        """Record the last status observed for a job still in flight"""
        with self._lock:
            job = self._jobs.get(job_id)
            if job is not None:
                job.status = status
                job.progress_percent = progress_percent

    def record_outcome(self, job_id: str, response: StatusResponse) -> None:
        """Remember the terminal status of a finished job"""
        with self._lock:
            self._outcomes[job_id] = (self.clock(), response)

    def get_outcome(self, job_id: str) -> Optional[StatusResponse]:
        with self._lock:
            entry = self._outcomes.get(job_id)
        return entry[1] if entry else None

    def sweep(self, max_age: float) -> List[str]:
        """
        Forget outcomes recorded more than ``max_age`` seconds ago

        In-flight jobs are never swept.

        Returns:
            Ids of the outcomes removed
        """
        now = self.clock()
        with self._lock:
            expired = [
                job_id for job_id, (recorded_at, _) in self._outcomes.items()
                if now - recorded_at > max_age
            ]
            for job_id in expired:
                del self._outcomes[job_id]
        return expired

    def outcome_count(self) -> int:
        with self._lock:
            return len(self._outcomes)

    def list_jobs(self, owner_id: Optional[int] = None) -> List[PublishJob]:
        """Snapshot of in-flight jobs, optionally for one owner"""
        with self._lock:
            jobs = list(self._jobs.values())
        if owner_id is not None:
            jobs = [job for job in jobs if job.owner_id == owner_id]
        return jobs

    def clear(self) -> List[PublishJob]:
        """Remove every job and outcome, returning the jobs that were in flight"""
        with self._lock:
            jobs = list(self._jobs.values())
            self._jobs.clear()
            self._outcomes.clear()
        return jobs

    def __len__(self) -> int:
        with self._lock:
            return len(self._jobs)

    def __contains__(self, job_id: str) -> bool:
        with self._lock:
            return job_id in self._jobs
