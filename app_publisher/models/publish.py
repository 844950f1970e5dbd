"""Publish job and transport message models"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional


class PublishStatus(Enum):
    """Publish job status"""
    QUEUED = "queued"
    PACKAGING = "packaging"
    UPLOADING = "uploading"
    BUILDING = "building"
    DEPLOYING = "deploying"
    READY = "ready"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        """Check if no further transitions can leave this status"""
        return self in TERMINAL_STATUSES

    def can_transition_to(self, other: "PublishStatus") -> bool:
        """Check whether moving from this status to ``other`` is allowed"""
        return other in VALID_TRANSITIONS[self]


TERMINAL_STATUSES = frozenset([
    PublishStatus.READY,
    PublishStatus.FAILED,
    PublishStatus.CANCELLED,
])

# Happy path, in order
STATUS_PROGRESSION = [
    PublishStatus.QUEUED,
    PublishStatus.PACKAGING,
    PublishStatus.UPLOADING,
    PublishStatus.BUILDING,
    PublishStatus.DEPLOYING,
    PublishStatus.READY,
]

VALID_TRANSITIONS = {
    PublishStatus.QUEUED: [PublishStatus.PACKAGING, PublishStatus.FAILED, PublishStatus.CANCELLED],
    PublishStatus.PACKAGING: [PublishStatus.UPLOADING, PublishStatus.FAILED, PublishStatus.CANCELLED],
    PublishStatus.UPLOADING: [PublishStatus.BUILDING, PublishStatus.FAILED, PublishStatus.CANCELLED],
    PublishStatus.BUILDING: [PublishStatus.DEPLOYING, PublishStatus.FAILED, PublishStatus.CANCELLED],
    PublishStatus.DEPLOYING: [PublishStatus.READY, PublishStatus.FAILED, PublishStatus.CANCELLED],
    PublishStatus.READY: [],
    PublishStatus.FAILED: [],
    PublishStatus.CANCELLED: [],
}


@dataclass
class StartRequest:
    """Request handed to ``PublishTransport.start``"""

    owner_id: int
    content_hash: str
    size_bytes: int
    owner_name: Optional[str] = None
    local_path_hint: Optional[str] = None

    def to_wire(self) -> Dict[str, Any]:
        """Broker JSON body; the local path hint never leaves the machine"""
        data = {
            "ownerId": self.owner_id,
            "bundleHash": self.content_hash,
            "bundleSize": self.size_bytes,
        }
        if self.owner_name:
            data["ownerName"] = self.owner_name
        return data


@dataclass
class StartResponse:
    """Result of ``PublishTransport.start``"""

    job_id: str
    status: PublishStatus = PublishStatus.QUEUED
    upload_target: Optional[str] = None


@dataclass
class StatusResponse:
    """Result of ``PublishTransport.status``"""

    status: PublishStatus
    progress_percent: Optional[int] = None
    message: Optional[str] = None
    live_url: Optional[str] = None
    error_message: Optional[str] = None
    transient: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data = {"status": self.status.value}

        if self.progress_percent is not None:
            data["progress"] = self.progress_percent
        if self.message:
            data["message"] = self.message
        if self.live_url:
            data["url"] = self.live_url
        if self.error_message:
            data["error"] = self.error_message
        if self.transient:
            data["transient"] = True

        return data


@dataclass
class CancelResponse:
    """Result of ``PublishTransport.cancel``"""

    success: bool
    status: PublishStatus

    def to_dict(self) -> Dict[str, Any]:
        return {"success": self.success, "status": self.status.value}


@dataclass
class PublishJob:
    """Bookkeeping for an in-flight publish, held by the job registry"""

    job_id: str
    owner_id: int
    archive_path: Optional[Path] = None
    started_at: datetime = field(default_factory=datetime.now)
    status: PublishStatus = PublishStatus.QUEUED
    progress_percent: Optional[int] = None
    bundle_hash: Optional[str] = None
    bundle_size: Optional[int] = None


@dataclass
class PublishStartResult:
    """Result returned to callers of ``publish_start``"""

    job_id: str
    status: PublishStatus
    is_simulated: bool
    file_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "job_id": self.job_id,
            "status": self.status.value,
            "is_simulated": self.is_simulated,
            "file_count": self.file_count,
        }


@dataclass
class CleanupWarning:
    """Archive deletion failed for a reason other than the file being absent"""

    job_id: str
    path: str
    reason: str
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "job_id": self.job_id,
            "path": self.path,
            "reason": self.reason,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass
class PublishDiagnostics:
    """Redacted diagnostic record; never carries the raw device credential"""

    owner_id: int
    status: PublishStatus
    job_id: Optional[str] = None
    error: Optional[str] = None
    bundle_hash: Optional[str] = None
    bundle_size: Optional[int] = None
    broker_url: Optional[str] = None
    broker_config_source: str = "none"
    broker_enabled: bool = False
    credential_length: int = 0
    credential_fingerprint: Optional[str] = None
    failed_phase: Optional[str] = None
    phases_completed: List[str] = field(default_factory=list)
    error_details: Optional[Dict[str, Any]] = None
    cleanup_warnings: List[CleanupWarning] = field(default_factory=list)
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "job_id": self.job_id,
            "owner_id": self.owner_id,
            "status": self.status.value,
            "error": self.error,
            "bundle_hash": self.bundle_hash,
            "bundle_size": self.bundle_size,
            "broker_url": self.broker_url,
            "broker_config_source": self.broker_config_source,
            "broker_enabled": self.broker_enabled,
            "credential_length": self.credential_length,
            "credential_fingerprint": self.credential_fingerprint,
            "failed_phase": self.failed_phase,
            "phases_completed": list(self.phases_completed),
            "error_details": self.error_details,
            "cleanup_warnings": [w.to_dict() for w in self.cleanup_warnings],
            "timestamp": self.timestamp.isoformat(),
        }
