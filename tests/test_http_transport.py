"""
Tests for the HTTP broker transport.

These tests use the responses library to mock the broker API. Requests run
in the default executor, which responses patches process-wide.
"""

from pathlib import Path

import pytest
import requests
import responses
from responses import matchers

from app_publisher.api.exceptions import (
    AccessDenied,
    AuthenticationFailed,
    BrokerConnectionError,
    BrokerMisconfigured,
    ConfigError,
    InvalidRequestError,
    NotFound,
    ProtocolError,
    RateLimited,
    ServiceUnavailable,
    UnknownBrokerError,
)
from app_publisher.models import PublishStatus, StartRequest
from app_publisher.transport.http import HttpTransport


TEST_BROKER = "https://broker.example.com"
TEST_TOKEN = "dev_test_token_12345"
TEST_HASH = "ab" * 32
UPLOAD_URL = "https://uploads.example.com/bundles/job-1?sig=xyz"


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
async def transport():
    """HTTP transport against the mocked broker."""
    transport = HttpTransport({"url": TEST_BROKER + "/", "device_token": TEST_TOKEN, "timeout": 5})
    yield transport
    await transport.close()


@pytest.fixture
def start_request() -> StartRequest:
    return StartRequest(
        owner_id=42,
        content_hash=TEST_HASH,
        size_bytes=2048,
        owner_name="Demo App",
        local_path_hint="/home/me/demo",
    )


# =============================================================================
# Construction
# =============================================================================


class TestConstruction:

    def test_requires_url(self):
        with pytest.raises(ConfigError):
            HttpTransport({"device_token": TEST_TOKEN})

    def test_requires_device_token(self):
        with pytest.raises(ConfigError) as exc_info:
            HttpTransport({"url": TEST_BROKER})
        assert exc_info.value.hint == "Check device token configuration"

    def test_describe_hides_path_and_credentials(self):
        transport = HttpTransport({"url": "https://user:pw@broker.example.com/v1", "device_token": TEST_TOKEN})
        assert transport.describe() == "http (https://broker.example.com)"
        assert not transport.is_simulated


# =============================================================================
# Start
# =============================================================================


class TestStart:

    async def test_start_sends_body_and_device_token(self, transport, start_request):
        with responses.RequestsMock() as rsps:
            rsps.add(
                responses.POST,
                f"{TEST_BROKER}/publish/start",
                json={"jobId": "job-1", "status": "queued"},
                match=[
                    matchers.header_matcher({"X-Device-Token": TEST_TOKEN}),
                    matchers.json_params_matcher({
                        "ownerId": 42,
                        "bundleHash": TEST_HASH,
                        "bundleSize": 2048,
                        "ownerName": "Demo App",
                    }),
                ],
            )
            response = await transport.start(start_request)

        assert response.job_id == "job-1"
        assert response.status == PublishStatus.QUEUED
        assert response.upload_target is None

    async def test_start_with_upload_target(self, transport, start_request):
        with responses.RequestsMock() as rsps:
            rsps.add(
                responses.POST,
                f"{TEST_BROKER}/publish/start",
                json={"jobId": "job-1", "status": "queued", "uploadUrl": UPLOAD_URL},
            )
            response = await transport.start(start_request)

        assert response.upload_target == UPLOAD_URL

    async def test_invalid_request_is_not_sent(self, transport):
        bad = StartRequest(owner_id=1, content_hash="not-a-hash", size_bytes=1)

        with responses.RequestsMock() as rsps:
            with pytest.raises(InvalidRequestError) as exc_info:
                await transport.start(bad)
            assert len(rsps.calls) == 0

        assert exc_info.value.error_code == "AP013"
        assert exc_info.value.hint
        assert "not-a-hash" in str(exc_info.value)

    @pytest.mark.parametrize(
        "status_code, body, error_class, code",
        [
            (401, {"error": "Unauthorized"}, AuthenticationFailed, "AP003"),
            (403, None, AccessDenied, "AP004"),
            (404, None, NotFound, "AP005"),
            (429, {"error": "TooManyRequests", "message": "slow down"}, RateLimited, "AP006"),
            (503, {"error": "BrokerMisconfigured"}, BrokerMisconfigured, "AP007"),
            (503, {"error": "Maintenance"}, ServiceUnavailable, "AP008"),
            (500, None, ServiceUnavailable, "AP008"),
            (418, None, UnknownBrokerError, "AP010"),
        ],
    )
    async def test_error_classification(self, transport, start_request, status_code, body, error_class, code):
        with responses.RequestsMock() as rsps:
            rsps.add(
                responses.POST,
                f"{TEST_BROKER}/publish/start",
                status=status_code,
                json=body,
            )
            with pytest.raises(error_class) as exc_info:
                await transport.start(start_request)

        error = exc_info.value
        assert type(error) is error_class
        assert error.status_code == status_code
        assert error.error_code == code
        assert error.hint

    async def test_auth_error_details(self, transport, start_request):
        with responses.RequestsMock() as rsps:
            rsps.add(
                responses.POST,
                f"{TEST_BROKER}/publish/start",
                status=401,
                body=f'{{"error": "Unauthorized", "token": "{TEST_TOKEN}"}}',
            )
            with pytest.raises(AuthenticationFailed) as exc_info:
                await transport.start(start_request)

        error = exc_info.value
        assert error.is_auth_error()
        assert error.hint == "Check device token configuration"
        assert error.broker_error_code == "Unauthorized"

        details = error.get_diagnostics()
        assert set(details) == {"status_code", "status_text", "message"}
        assert details["status_code"] == 401
        assert TEST_TOKEN not in str(details)

    async def test_broker_misconfigured_flag(self, transport, start_request):
        with responses.RequestsMock() as rsps:
            rsps.add(
                responses.POST,
                f"{TEST_BROKER}/publish/start",
                status=503,
                json={"error": "BrokerMisconfigured"},
            )
            with pytest.raises(BrokerMisconfigured) as exc_info:
                await transport.start(start_request)

        assert exc_info.value.is_broker_misconfigured()

    async def test_missing_job_id_is_protocol_error(self, transport, start_request):
        with responses.RequestsMock() as rsps:
            rsps.add(responses.POST, f"{TEST_BROKER}/publish/start", json={"status": "queued"})
            with pytest.raises(ProtocolError):
                await transport.start(start_request)

    async def test_non_json_body_is_protocol_error(self, transport, start_request):
        with responses.RequestsMock() as rsps:
            rsps.add(responses.POST, f"{TEST_BROKER}/publish/start", body="<html>oops</html>")
            with pytest.raises(ProtocolError):
                await transport.start(start_request)

    async def test_unreachable_broker(self, transport, start_request):
        with responses.RequestsMock() as rsps:
            rsps.add(
                responses.POST,
                f"{TEST_BROKER}/publish/start",
                body=requests.ConnectionError("connection refused"),
            )
            with pytest.raises(BrokerConnectionError) as exc_info:
                await transport.start(start_request)

        assert exc_info.value.error_code == "AP012"


# =============================================================================
# Upload
# =============================================================================


class TestUpload:

    async def test_upload_streams_archive_from_disk(self, transport, tmp_path: Path):
        payload = b"PK\x03\x04 fake archive" * 1000
        archive = tmp_path / "bundle.zip"
        archive.write_bytes(payload)
        received = {}

        def capture(request):
            body = request.body
            received["body"] = body.read() if hasattr(body, "read") else body
            received["length"] = request.headers.get("Content-Length")
            return (200, {}, "")

        with responses.RequestsMock() as rsps:
            rsps.add_callback(
                responses.PUT,
                UPLOAD_URL,
                callback=capture,
                match=[matchers.header_matcher({"Content-Type": "application/octet-stream"})],
            )
            await transport.upload(UPLOAD_URL, archive)

        assert received["body"] == payload
        assert received["length"] == str(len(payload))

    async def test_upload_missing_archive_sends_nothing(self, transport, tmp_path: Path):
        with responses.RequestsMock() as rsps:
            with pytest.raises(OSError):
                await transport.upload(UPLOAD_URL, tmp_path / "gone.zip")
            assert len(rsps.calls) == 0

    async def test_upload_rejected(self, transport, tmp_path: Path):
        archive = tmp_path / "bundle.zip"
        archive.write_bytes(b"data")

        with responses.RequestsMock() as rsps:
            rsps.add(responses.PUT, UPLOAD_URL, status=503)
            with pytest.raises(ServiceUnavailable):
                await transport.upload(UPLOAD_URL, archive)


# =============================================================================
# Status and Cancel
# =============================================================================


class TestStatus:

    async def test_status_in_progress(self, transport):
        with responses.RequestsMock() as rsps:
            rsps.add(
                responses.GET,
                f"{TEST_BROKER}/publish/status",
                json={"status": "building", "progress": 60, "message": "Building for production..."},
                match=[matchers.query_param_matcher({"jobId": "job-1"})],
            )
            response = await transport.status("job-1")

        assert response.status == PublishStatus.BUILDING
        assert response.progress_percent == 60
        assert response.message == "Building for production..."

    async def test_status_ready(self, transport):
        with responses.RequestsMock() as rsps:
            rsps.add(
                responses.GET,
                f"{TEST_BROKER}/publish/status",
                json={"status": "ready", "progress": 100, "url": "https://demo.apps.example.com"},
            )
            response = await transport.status("job-1")

        assert response.status == PublishStatus.READY
        assert response.live_url == "https://demo.apps.example.com"

    async def test_unknown_job_reports_failed(self, transport):
        with responses.RequestsMock() as rsps:
            rsps.add(responses.GET, f"{TEST_BROKER}/publish/status", status=404)
            response = await transport.status("job-404")

        assert response.status == PublishStatus.FAILED
        assert response.error_message == "Publish not found"

    async def test_unknown_status_value(self, transport):
        with responses.RequestsMock() as rsps:
            rsps.add(responses.GET, f"{TEST_BROKER}/publish/status", json={"status": "exploding"})
            with pytest.raises(ProtocolError):
                await transport.status("job-1")


class TestCancel:

    async def test_cancel(self, transport):
        with responses.RequestsMock() as rsps:
            rsps.add(
                responses.POST,
                f"{TEST_BROKER}/publish/cancel",
                json={"success": True, "status": "cancelled"},
                match=[matchers.json_params_matcher({"jobId": "job-1"})],
            )
            result = await transport.cancel("job-1")

        assert result.success
        assert result.status == PublishStatus.CANCELLED

    async def test_cancel_terminal_job(self, transport):
        with responses.RequestsMock() as rsps:
            rsps.add(
                responses.POST,
                f"{TEST_BROKER}/publish/cancel",
                json={"success": False, "status": "ready"},
            )
            result = await transport.cancel("job-1")

        assert not result.success
        assert result.status == PublishStatus.READY

    async def test_cancel_unknown_job(self, transport):
        with responses.RequestsMock() as rsps:
            rsps.add(responses.POST, f"{TEST_BROKER}/publish/cancel", status=404)
            result = await transport.cancel("job-404")

        assert not result.success
        assert result.status == PublishStatus.FAILED
