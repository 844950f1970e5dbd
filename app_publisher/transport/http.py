# app_publisher/transport/http.py
"""HTTP transport talking to a remote publish broker"""

import json
import logging
from pathlib import Path
from typing import Any, Dict

import requests

from ..api.exceptions import (
    AccessDenied,
    AuthenticationFailed,
    BrokerConnectionError,
    BrokerMisconfigured,
    ConfigError,
    NotFound,
    ProtocolError,
    RateLimited,
    ServiceUnavailable,
    TransportStartError,
    UnknownBrokerError,
)
from ..constants import (
    BROKER_CANCEL_PATH,
    BROKER_MISCONFIGURED_CODE,
    BROKER_START_PATH,
    BROKER_STATUS_PATH,
    DEVICE_TOKEN_HEADER,
    JOB_NOT_FOUND_MESSAGE,
)
from ..models.config import BrokerConfig
from ..models.publish import (
    CancelResponse,
    PublishStatus,
    StartRequest,
    StartResponse,
    StatusResponse,
)
from ..utils.async_utils import run_blocking
from .base import PublishTransport
from .schemas import (
    CANCEL_RESPONSE_SCHEMA,
    START_REQUEST_SCHEMA,
    START_RESPONSE_SCHEMA,
    STATUS_RESPONSE_SCHEMA,
    is_error_body,
    validate_payload,
    validate_request,
)

logger = logging.getLogger(__name__)

_STATUS_CLASSES = {
    401: AuthenticationFailed,
    403: AccessDenied,
    404: NotFound,
    429: RateLimited,
}


def classify_error(response: requests.Response) -> TransportStartError:
    """
    Map a non-2xx broker response to the error taxonomy

    Args:
        response: Failed response

    Returns:
        Classified error carrying status code and remediation hint
    """
    body = response.text
    broker_code = None
    detail = None

    try:
        data = json.loads(body) if body else None
    except ValueError:
        data = None

    if is_error_body(data):
        broker_code = data["error"]
        detail = data.get("message")

    status_code = response.status_code
    status_text = response.reason or ""

    if status_code in _STATUS_CLASSES:
        error_class = _STATUS_CLASSES[status_code]
    elif status_code == 503 and broker_code == BROKER_MISCONFIGURED_CODE:
        error_class = BrokerMisconfigured
    elif 500 <= status_code < 600:
        error_class = ServiceUnavailable
    else:
        error_class = UnknownBrokerError

    message = f"Broker request failed: {status_code} {status_text}".rstrip()
    if detail or broker_code:
        message = f"{message} ({detail or broker_code})"

    return error_class(
        message,
        status_code=status_code,
        status_text=status_text,
        response_body=body,
        broker_error_code=broker_code,
    )


class HttpTransport(PublishTransport):
    """Publish transport backed by a remote broker

    ``requests`` is synchronous, so every call runs in the default executor.
    """

    def __init__(self, config: Dict[str, Any] = None):
        """
        Initialize HTTP transport

        Args:
            config: Broker configuration including:
                - url: Broker base URL
                - device_token: Device credential sent with every request
                - timeout: Optional per-request timeout in seconds
                - session: Optional pre-built ``requests.Session``
        """
        super().__init__(config)
        self.base_url = (self.config.get("url") or "").rstrip("/")
        self.device_token = self.config.get("device_token")
        self.timeout = self.config.get("timeout")

        if not self.base_url:
            raise ConfigError(
                "Broker URL is not configured",
                hint="Set broker.url in the settings file or the broker URL environment variable",
            )
        if not self.device_token:
            raise ConfigError(
                "Device token is not configured",
                hint="Check device token configuration",
            )

        self.session = self.config.get("session") or requests.Session()

    @property
    def auth_headers(self) -> Dict[str, str]:
        return {DEVICE_TOKEN_HEADER: self.device_token}

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        """Send an authenticated request; network failures become BrokerConnectionError"""
        url = path if path.startswith(("http://", "https://")) else f"{self.base_url}{path}"
        headers = dict(self.auth_headers)
        headers.update(kwargs.pop("headers", {}))

        try:
            return self.session.request(method, url, headers=headers, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise BrokerConnectionError(f"Cannot reach broker: {e}") from e

    def _json(self, response: requests.Response, schema: Dict[str, Any], what: str) -> Dict[str, Any]:
        if not response.ok:
            raise classify_error(response)

        try:
            data = response.json()
        except ValueError as e:
            raise ProtocolError(
                f"Invalid {what}: body is not JSON",
                status_code=response.status_code,
                status_text=response.reason or "",
            ) from e

        return validate_payload(data, schema, what)

    async def start(self, request: StartRequest) -> StartResponse:
        body = validate_request(request.to_wire(), START_REQUEST_SCHEMA, "start request")

        response = await run_blocking(self._request, "POST", BROKER_START_PATH, json=body)
        data = self._json(response, START_RESPONSE_SCHEMA, "start response")

        logger.info(f"Broker accepted publish: {data['jobId']}")
        return StartResponse(
            job_id=data["jobId"],
            status=PublishStatus(data["status"]),
            upload_target=data.get("uploadUrl"),
        )

    def _put_file(self, upload_target: str, archive_path: Path) -> requests.Response:
        with open(archive_path, "rb") as f:
            return self._request(
                "PUT",
                upload_target,
                data=f,
                headers={"Content-Type": "application/octet-stream"},
            )

    async def upload(self, upload_target: str, archive_path: Path) -> None:
        """PUT the archive to the upload target, streamed from disk

        Raises:
            TransportStartError: Upload rejected by the server
            BrokerConnectionError: Upload target unreachable
            OSError: Archive could not be opened
        """
        response = await run_blocking(self._put_file, upload_target, Path(archive_path))
        if not response.ok:
            raise classify_error(response)

        logger.info(f"Bundle uploaded: {archive_path}")

    async def status(self, job_id: str) -> StatusResponse:
        response = await run_blocking(
            self._request, "GET", BROKER_STATUS_PATH, params={"jobId": job_id}
        )
        if response.status_code == 404:
            return StatusResponse(status=PublishStatus.FAILED, error_message=JOB_NOT_FOUND_MESSAGE)

        data = self._json(response, STATUS_RESPONSE_SCHEMA, "status response")
        progress = data.get("progress")

        return StatusResponse(
            status=PublishStatus(data["status"]),
            progress_percent=int(progress) if progress is not None else None,
            message=data.get("message"),
            live_url=data.get("url"),
            error_message=data.get("error"),
        )

    async def cancel(self, job_id: str) -> CancelResponse:
        response = await run_blocking(
            self._request, "POST", BROKER_CANCEL_PATH, json={"jobId": job_id}
        )
        if response.status_code == 404:
            return CancelResponse(success=False, status=PublishStatus.FAILED)

        data = self._json(response, CANCEL_RESPONSE_SCHEMA, "cancel response")
        return CancelResponse(success=data["success"], status=PublishStatus(data["status"]))

    async def close(self) -> None:
        self.session.close()

    def describe(self) -> str:
        return f"http ({BrokerConfig(url=self.base_url).redacted_url})"
