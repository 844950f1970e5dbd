# app_publisher/services/publish_service.py
"""Publish orchestration: bundle, submit, track and clean up"""

import logging
import tempfile
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..api.exceptions import PublisherError, TransportError, TransportStartError, UploadError
from ..constants import (
    BUNDLE_DIR_NAME,
    BUNDLE_FILE_PATTERN,
    STUB_RETENTION_SECONDS,
    STUB_TRANSPORT_LABEL,
)
from ..core.bundler import ProgressCallback, cleanup_bundle, create_bundle
from ..core.job_registry import JobRegistry
from ..models.config import BrokerConfig
from ..models.publish import (
    CancelResponse,
    CleanupWarning,
    PublishDiagnostics,
    PublishJob,
    PublishStartResult,
    PublishStatus,
    StartRequest,
    StatusResponse,
)
from ..transport.base import PublishTransport
from ..transport.factory import TransportFactory
from ..utils.async_utils import run_blocking
from .config_service import ConfigService
from .record_store import InMemoryRecordStore, RecordStore, YamlRecordStore

logger = logging.getLogger(__name__)

PHASE_BUNDLE = "bundle"
PHASE_START = "start"
PHASE_UPLOAD = "upload"


@dataclass
class PublishAttempt:
    """What happened during one publish_start call, for diagnostics"""

    owner_id: int
    started_at: float = 0.0
    job_id: Optional[str] = None
    bundle_hash: Optional[str] = None
    bundle_size: Optional[int] = None
    phases_completed: List[str] = field(default_factory=list)
    failed_phase: Optional[str] = None
    error: Optional[str] = None
    error_details: Optional[Dict[str, Any]] = None

    def fail(self, phase: str, error: Exception) -> None:
        self.failed_phase = phase
        self.error = str(error)
        cause = getattr(error, "cause", None) or error
        if isinstance(cause, TransportStartError):
            self.error_details = cause.get_diagnostics()


class PublishService:
    """Publish orchestrator

    Owns the job registry and drives the bundler and the transport. Status
    always comes from the transport; this service performs the side effects
    (live URL persistence, archive deletion) when a job first turns terminal.
    """

    def __init__(self,
                 transport: PublishTransport,
                 record_store: Optional[RecordStore] = None,
                 bundle_dir: Optional[Path] = None,
                 broker_config: Optional[BrokerConfig] = None,
                 registry: Optional[JobRegistry] = None,
                 clock: Optional[Callable[[], float]] = None,
                 retention_seconds: float = STUB_RETENTION_SECONDS):
        """
        Initialize publish service

        Args:
            transport: Transport selected at startup
            record_store: Where live URLs are persisted
            bundle_dir: Directory for temporary bundles
            broker_config: Broker settings, used for diagnostics only
            registry: Job registry (a fresh one on the same clock by default)
            clock: Time source in seconds for retention
            retention_seconds: How long finished outcomes, attempts and
                cleanup warnings are kept
        """
        self.transport = transport
        self.record_store = record_store or InMemoryRecordStore()
        self.bundle_dir = Path(bundle_dir) if bundle_dir else Path(tempfile.gettempdir()) / BUNDLE_DIR_NAME
        self.broker_config = broker_config or BrokerConfig()
        self.clock = clock or time.monotonic
        self.retention_seconds = float(retention_seconds)
        self.registry = registry or JobRegistry(clock=self.clock)
        self._cleanup_warnings: List[Tuple[float, CleanupWarning]] = []
        self._attempts: Dict[str, PublishAttempt] = {}
        self._latest_attempt: Dict[int, PublishAttempt] = {}

    @classmethod
    def from_config(cls, config_service: ConfigService, **transport_options: Any) -> 'PublishService':
        """
        Build a service from resolved settings

        Args:
            config_service: Settings provider
            **transport_options: Extra transport options

        Returns:
            PublishService with the transport chosen from the broker config
        """
        broker = config_service.get_broker_config()
        settings = config_service.get_publish_settings()

        if not broker.is_enabled:
            transport_options.setdefault("retention_seconds", settings.stub_retention_seconds)
        transport = TransportFactory.create_from_config(broker, **transport_options)

        record_store = YamlRecordStore(settings.records_file) if settings.records_file else None

        return cls(
            transport=transport,
            record_store=record_store,
            bundle_dir=settings.bundle_dir,
            broker_config=broker,
            retention_seconds=settings.stub_retention_seconds,
        )

    @property
    def is_simulated(self) -> bool:
        return self.transport.is_simulated

    @property
    def cleanup_warnings(self) -> List[CleanupWarning]:
        return [warning for _, warning in self._cleanup_warnings]

    def sweep(self) -> int:
        """
        Forget finished work older than the retention window

        Drops cached terminal outcomes, diagnostic attempts whose job is no
        longer in flight, and cleanup warnings.

        Returns:
            Number of entries removed
        """
        cutoff = self.clock() - self.retention_seconds
        removed = len(self.registry.sweep(self.retention_seconds))

        def expired(attempt: PublishAttempt) -> bool:
            if attempt.job_id and attempt.job_id in self.registry:
                return False
            return attempt.started_at < cutoff

        for job_id in [k for k, a in self._attempts.items() if expired(a)]:
            del self._attempts[job_id]
            removed += 1
        for owner_id in [k for k, a in self._latest_attempt.items() if expired(a)]:
            del self._latest_attempt[owner_id]
            removed += 1

        kept = [(t, w) for t, w in self._cleanup_warnings if t >= cutoff]
        removed += len(self._cleanup_warnings) - len(kept)
        self._cleanup_warnings = kept

        if removed:
            logger.debug(f"Swept {removed} expired publish records")
        return removed

    def _bundle_path(self, owner_id: int) -> Path:
        timestamp = int(time.time() * 1000)
        return self.bundle_dir / BUNDLE_FILE_PATTERN.format(owner_id=owner_id, timestamp=timestamp)

    async def publish_start(self,
                            owner_id: int,
                            source_dir: Path,
                            owner_name: Optional[str] = None,
                            on_progress: Optional[ProgressCallback] = None) -> PublishStartResult:
        """
        Bundle an app directory and submit it for publishing

        Args:
            owner_id: App being published
            source_dir: App directory
            owner_name: Optional display name
            on_progress: Optional bundler progress callback

        Returns:
            PublishStartResult with the job id to poll

        Raises:
            BundlingError: Bundle could not be created
            TransportError: Broker rejected or could not be reached on start
            UploadError: Broker accepted the job but the upload failed
        """
        source_dir = Path(source_dir)
        self.sweep()
        attempt = PublishAttempt(owner_id=owner_id, started_at=self.clock())
        self._latest_attempt[owner_id] = attempt

        logger.info(f"Starting publish for app {owner_id}")

        # 1. Bundle off the event loop
        try:
            bundle = await run_blocking(
                create_bundle, source_dir, self._bundle_path(owner_id), on_progress
            )
        except PublisherError as e:
            attempt.fail(PHASE_BUNDLE, e)
            raise

        attempt.bundle_hash = bundle.content_hash
        attempt.bundle_size = bundle.size_bytes
        attempt.phases_completed.append(PHASE_BUNDLE)

        # 2. Submit to the transport
        request = StartRequest(
            owner_id=owner_id,
            content_hash=bundle.content_hash,
            size_bytes=bundle.size_bytes,
            owner_name=owner_name,
            local_path_hint=str(source_dir.resolve()),
        )
        try:
            response = await self.transport.start(request)
        except PublisherError as e:
            attempt.fail(PHASE_START, e)
            await self._discard_archive(bundle.archive_path)
            raise

        attempt.job_id = response.job_id
        attempt.phases_completed.append(PHASE_START)
        self._attempts[response.job_id] = attempt

        # 3. Upload, when the transport asks for it
        if response.upload_target:
            try:
                await self.transport.upload(response.upload_target, bundle.archive_path)
            except (TransportError, OSError) as e:
                error = UploadError(f"Bundle upload failed: {e}", job_id=response.job_id, cause=e)
                attempt.fail(PHASE_UPLOAD, error)
                await self._abandon_remote_job(response.job_id)
                await self._discard_archive(bundle.archive_path, response.job_id)
                raise error from e
            attempt.phases_completed.append(PHASE_UPLOAD)

        # 4. Track until a terminal status is observed
        self.registry.register(PublishJob(
            job_id=response.job_id,
            owner_id=owner_id,
            archive_path=bundle.archive_path,
            status=response.status,
            bundle_hash=bundle.content_hash,
            bundle_size=bundle.size_bytes,
        ))

        logger.info(f"Publish started: {response.job_id}")

        return PublishStartResult(
            job_id=response.job_id,
            status=response.status,
            is_simulated=self.is_simulated,
            file_count=bundle.file_count,
        )

    async def publish_status(self, job_id: str) -> StatusResponse:
        """
        Poll a job

        Never raises for transport problems. They are reported with
        ``transient`` set: an in-flight job keeps its last known status and
        carries the error in ``message``, an unknown job comes back failed.

        Args:
            job_id: Job to poll

        Returns:
            Current status
        """
        self.sweep()
        outcome = self.registry.get_outcome(job_id)
        if outcome is not None:
            return outcome

        try:
            response = await self.transport.status(job_id)
        except PublisherError as e:
            job = self.registry.get(job_id)
            logger.warning(f"Status poll for {job_id} failed: {e}")
            if job is None:
                return StatusResponse(
                    status=PublishStatus.FAILED,
                    error_message=str(e),
                    transient=True,
                )
            return StatusResponse(
                status=job.status,
                progress_percent=job.progress_percent,
                message=str(e),
                transient=True,
            )

        if response.status.is_terminal:
            await self._finish(job_id, response)
        else:
            self.registry.update_status(job_id, response.status, response.progress_percent)

        return response

    async def publish_cancel(self, job_id: str) -> CancelResponse:
        """
        Cancel a job that has not reached a terminal state

        Args:
            job_id: Job to cancel

        Returns:
            Cancel result from the transport
        """
        logger.info(f"Cancelling publish: {job_id}")

        response = await self.transport.cancel(job_id)

        if response.success:
            await self._finish(job_id, StatusResponse(
                status=PublishStatus.CANCELLED,
                message="Publish cancelled",
            ))

        return response

    async def _finish(self, job_id: str, response: StatusResponse) -> None:
        """Terminal side effects; only the caller that pops the job runs them"""
        job = self.registry.pop(job_id)
        if job is None:
            return

        self.registry.record_outcome(job_id, response)

        if response.status == PublishStatus.READY and response.live_url:
            try:
                await self.record_store.save_live_url(job.owner_id, response.live_url)
                logger.info(f"App {job.owner_id} published to {response.live_url}")
            except (OSError, PublisherError) as e:
                logger.error(f"Could not record live URL for app {job.owner_id}: {e}")

        if job.archive_path:
            await self._cleanup_archive(job.job_id, job.archive_path)

    async def _cleanup_archive(self, job_id: str, archive_path: Path) -> None:
        try:
            await run_blocking(cleanup_bundle, archive_path)
        except OSError as e:
            warning = CleanupWarning(job_id=job_id, path=str(archive_path), reason=str(e))
            self._cleanup_warnings.append((self.clock(), warning))
            logger.warning(f"Failed to cleanup bundle: {archive_path}: {e}")

    async def _discard_archive(self, archive_path: Path, job_id: str = "") -> None:
        """Delete an archive that never made it into the registry"""
        await self._cleanup_archive(job_id, archive_path)

    async def _abandon_remote_job(self, job_id: str) -> None:
        """Best-effort cancel of a broker job whose upload failed"""
        try:
            result = await self.transport.cancel(job_id)
            logger.info(f"Cancelled orphaned job {job_id}: {result.status.value}")
        except PublisherError as e:
            logger.warning(f"Could not cancel orphaned job {job_id}: {e}")

    async def publish_diagnostics(self,
                                  owner_id: int,
                                  job_id: Optional[str] = None) -> PublishDiagnostics:
        """
        Build a redacted diagnostic record

        Args:
            owner_id: App the record is about
            job_id: Optional job; defaults to the owner's latest attempt

        Returns:
            PublishDiagnostics without any secret values
        """
        attempt = self._attempts.get(job_id) if job_id else self._latest_attempt.get(owner_id)
        if job_id is None and attempt is not None:
            job_id = attempt.job_id

        broker = self.broker_config
        diagnostics = PublishDiagnostics(
            owner_id=owner_id,
            job_id=job_id,
            status=PublishStatus.FAILED,
            broker_url=broker.redacted_url or STUB_TRANSPORT_LABEL,
            broker_config_source=broker.source.value,
            broker_enabled=broker.is_enabled,
            credential_length=broker.token_length,
            credential_fingerprint=broker.token_fingerprint,
        )

        if attempt is not None:
            diagnostics.bundle_hash = attempt.bundle_hash
            diagnostics.bundle_size = attempt.bundle_size
            diagnostics.phases_completed = list(attempt.phases_completed)
            diagnostics.failed_phase = attempt.failed_phase
            diagnostics.error = attempt.error
            diagnostics.error_details = attempt.error_details

        if job_id and attempt is not None and attempt.failed_phase is None:
            status = await self.publish_status(job_id)
            diagnostics.status = status.status
            if status.error_message:
                diagnostics.error = status.error_message

        if job_id:
            diagnostics.cleanup_warnings = [
                w for w in self.cleanup_warnings if w.job_id == job_id
            ]

        return diagnostics

    def broker_status(self) -> Dict[str, Any]:
        """Transport selection summary for display"""
        broker = self.broker_config
        return {
            "is_enabled": broker.is_enabled,
            "is_simulated": self.is_simulated,
            "hosting_status": "connected" if broker.is_enabled else "not-configured",
            "broker_host": broker.redacted_url,
        }

    async def close(self) -> None:
        """Delete archives of jobs still in flight and close the transport"""
        for job in self.registry.clear():
            if job.archive_path:
                await self._cleanup_archive(job.job_id, job.archive_path)
        await self.transport.close()

    async def __aenter__(self):
        """Async context manager entry"""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit"""
        await self.close()
