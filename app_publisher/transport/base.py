# app_publisher/transport/base.py
"""Publish transport abstract base class"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict

from ..models.publish import (
    CancelResponse,
    PublishStatus,
    StartRequest,
    StartResponse,
    StatusResponse,
)

# Human-readable messages per status, real broker vs. simulation
_STATUS_MESSAGES = {
    PublishStatus.QUEUED: ("Preparing to publish...", "Preparing to publish..."),
    PublishStatus.PACKAGING: ("Packaging your app...", "Packaging your app..."),
    PublishStatus.UPLOADING: ("Uploading bundle...", "Simulating upload..."),
    PublishStatus.BUILDING: ("Building for production...", "Simulating build..."),
    PublishStatus.DEPLOYING: ("Deploying to hosting...", "Generating local preview..."),
    PublishStatus.READY: ("Your app is live!", "Ready (local preview)"),
    PublishStatus.FAILED: ("Publish failed", "Publish failed"),
    PublishStatus.CANCELLED: ("Publish cancelled", "Publish cancelled"),
}


def get_status_message(status: PublishStatus, is_simulated: bool = False) -> str:
    """Get a human-readable message for a status"""
    real, simulated = _STATUS_MESSAGES[status]
    return simulated if is_simulated else real


class PublishTransport(ABC):
    """Abstract base class for publish transports

    Every transport exposes the same three operations. A transport whose
    ``start`` returns an ``upload_target`` must also implement ``upload``.
    """

    #: Whether jobs are simulated in-process
    is_simulated: bool = False

    def __init__(self, config: Dict[str, Any] = None):
        """
        Initialize transport

        Args:
            config: Transport-specific configuration
        """
        self.config = config or {}

    @abstractmethod
    async def start(self, request: StartRequest) -> StartResponse:
        """
        Submit a bundle for publishing

        Args:
            request: Owner and bundle details

        Returns:
            Job id in ``queued`` state, plus an upload target when required

        Raises:
            TransportStartError: Broker rejected the request
        """
        pass

    @abstractmethod
    async def status(self, job_id: str) -> StatusResponse:
        """
        Get the current status of a job

        Safe to call repeatedly. Unknown jobs report ``failed``.

        Args:
            job_id: Job identifier returned by ``start``

        Returns:
            Current status
        """
        pass

    @abstractmethod
    async def cancel(self, job_id: str) -> CancelResponse:
        """
        Cancel a job that has not reached a terminal state

        Args:
            job_id: Job identifier returned by ``start``

        Returns:
            ``success`` False with the current status if already terminal
        """
        pass

    async def upload(self, upload_target: str, archive_path: Path) -> None:
        """
        Upload the bundle bytes to the target returned by ``start``

        Args:
            upload_target: URL returned by ``start``
            archive_path: Local bundle file
        """
        raise NotImplementedError(f"{type(self).__name__} does not support uploads")

    def describe(self) -> str:
        """Short description for logs and diagnostics"""
        return type(self).__name__

    async def close(self) -> None:
        """Release transport resources"""
        pass

    async def __aenter__(self):
        """Async context manager entry"""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit"""
        await self.close()
