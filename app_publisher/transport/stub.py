# app_publisher/transport/stub.py
"""In-process publish simulator used when no broker is configured"""

import asyncio
import logging
import math
import re
import threading
import time
import uuid
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple

from ..constants import (
    JOB_NOT_FOUND_MESSAGE,
    STUB_JOB_PREFIX,
    STUB_PHASE_DURATIONS,
    STUB_RETENTION_SECONDS,
    STUB_URL_PREFIX,
)
from ..models.publish import (
    STATUS_PROGRESSION,
    CancelResponse,
    PublishStatus,
    StartRequest,
    StartResponse,
    StatusResponse,
)
from .base import PublishTransport, get_status_message

logger = logging.getLogger(__name__)

_SIMULATED_PHASES = [
    (status, STUB_PHASE_DURATIONS[status.value])
    for status in STATUS_PROGRESSION
    if not status.is_terminal
]
TOTAL_DURATION = sum(duration for _, duration in _SIMULATED_PHASES)


def simulate(elapsed: float, cancelled: bool = False) -> Tuple[PublishStatus, int]:
    """
    Status and progress of a simulated job

    Args:
        elapsed: Seconds since the job started
        cancelled: Whether the job was cancelled

    Returns:
        (status, progress percent)
    """
    if cancelled:
        return PublishStatus.CANCELLED, 0

    steps = len(STATUS_PROGRESSION) - 1
    cumulative = 0.0
    for index, (status, duration) in enumerate(_SIMULATED_PHASES):
        if elapsed < cumulative + duration:
            fraction = max(elapsed - cumulative, 0.0) / duration
            return status, math.floor((index + fraction) / steps * 100)
        cumulative += duration

    return PublishStatus.READY, 100


def local_file_url(path: str) -> str:
    """
    Turn a local path into a ``file:///`` URL

    Backslashes become forward slashes and repeated slashes collapse.
    """
    normalized = re.sub(r"/{2,}", "/", path.replace("\\", "/")).lstrip("/")
    return f"file:///{normalized}"


@dataclass
class StubJob:
    """State of one simulated job"""

    job_id: str
    owner_id: int
    started_at: float
    owner_name: Optional[str] = None
    local_path_hint: Optional[str] = None
    status: PublishStatus = PublishStatus.QUEUED
    progress_percent: int = 0
    cancelled: bool = False


class StubTransport(PublishTransport):
    """Simulates the broker API in memory

    Jobs walk queued, packaging, uploading, building and deploying to ready
    as wall-clock time passes. The clock is injectable for tests.
    """

    is_simulated = True

    def __init__(self,
                 config: Dict[str, Any] = None,
                 clock: Callable[[], float] = time.monotonic):
        """
        Initialize stub transport

        Args:
            config: Optional configuration including:
                - retention_seconds: Age after which sweep drops a job
            clock: Time source in seconds
        """
        super().__init__(config)
        self.clock = clock
        self.retention_seconds = float(
            self.config.get("retention_seconds", STUB_RETENTION_SECONDS)
        )
        self._lock = threading.Lock()
        self._jobs: Dict[str, StubJob] = {}
        self._sweeper: Optional[asyncio.Task] = None

    async def start(self, request: StartRequest) -> StartResponse:
        """Record a new job in ``queued`` state"""
        job_id = f"{STUB_JOB_PREFIX}{uuid.uuid4().hex[:8]}"
        job = StubJob(
            job_id=job_id,
            owner_id=request.owner_id,
            started_at=self.clock(),
            owner_name=request.owner_name,
            local_path_hint=request.local_path_hint,
        )

        with self._lock:
            self._jobs[job_id] = job

        logger.debug(f"Stub publish started: {job_id} for owner {request.owner_id}")
        return StartResponse(job_id=job_id, status=PublishStatus.QUEUED)

    def _advance(self, job: StubJob) -> None:
        """Recompute a job's status from the clock; caller holds the lock"""
        status, progress = simulate(self.clock() - job.started_at, job.cancelled)
        job.status = status
        job.progress_percent = progress

    async def status(self, job_id: str) -> StatusResponse:
        with self._lock:
            job = self._jobs.get(job_id)
            if job is None:
                return StatusResponse(
                    status=PublishStatus.FAILED,
                    error_message=JOB_NOT_FOUND_MESSAGE,
                )
            self._advance(job)
            status, progress = job.status, job.progress_percent
            local_path_hint = job.local_path_hint

        if status == PublishStatus.CANCELLED:
            return StatusResponse(
                status=status,
                message="Publish was cancelled",
            )

        response = StatusResponse(
            status=status,
            progress_percent=progress,
            message=get_status_message(status, is_simulated=True),
        )

        if status == PublishStatus.READY:
            if local_path_hint:
                response.live_url = local_file_url(local_path_hint)
            else:
                response.live_url = f"{STUB_URL_PREFIX}{job_id}"

        return response

    async def cancel(self, job_id: str) -> CancelResponse:
        with self._lock:
            job = self._jobs.get(job_id)
            if job is None:
                return CancelResponse(success=False, status=PublishStatus.FAILED)

            self._advance(job)
            if job.status.is_terminal:
                return CancelResponse(success=False, status=job.status)

            job.cancelled = True
            job.status = PublishStatus.CANCELLED

        logger.debug(f"Stub publish cancelled: {job_id}")
        return CancelResponse(success=True, status=PublishStatus.CANCELLED)

    def sweep(self) -> int:
        """
        Drop jobs older than the retention window

        Returns:
            Number of jobs removed
        """
        now = self.clock()
        with self._lock:
            expired = [
                job_id for job_id, job in self._jobs.items()
                if now - job.started_at > self.retention_seconds
            ]
            for job_id in expired:
                del self._jobs[job_id]

        if expired:
            logger.debug(f"Swept {len(expired)} expired stub publishes")
        return len(expired)

    def start_sweeper(self, interval: float = 60.0) -> asyncio.Task:
        """
        Run ``sweep`` periodically on the running event loop

        Args:
            interval: Seconds between sweeps

        Returns:
            The background task (cancelled by ``close``)
        """
        async def _loop():
            while True:
                await asyncio.sleep(interval)
                self.sweep()

        if self._sweeper is None or self._sweeper.done():
            self._sweeper = asyncio.get_running_loop().create_task(_loop())
        return self._sweeper

    async def close(self) -> None:
        if self._sweeper is not None:
            self._sweeper.cancel()
            try:
                await self._sweeper
            except asyncio.CancelledError:
                pass
            self._sweeper = None

    def __len__(self) -> int:
        with self._lock:
            return len(self._jobs)

    def describe(self) -> str:
        return "stub"
