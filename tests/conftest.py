"""Shared test fixtures for app_publisher tests."""

from pathlib import Path

import pytest

from app_publisher.core.job_registry import JobRegistry
from app_publisher.models.config import BrokerConfig, ConfigSource
from app_publisher.services.publish_service import PublishService
from app_publisher.transport.stub import StubTransport


TEST_BROKER_URL = "https://broker.example.com"
TEST_DEVICE_TOKEN = "dev_test_token_12345"


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# =============================================================================
# Filesystem Fixtures
# =============================================================================


@pytest.fixture
def sample_app(tmp_path: Path) -> Path:
    """App directory with three shippable files and assorted excluded ones."""
    app = tmp_path / "my-app"
    (app / "src" / "styles").mkdir(parents=True)
    (app / "node_modules" / "react").mkdir(parents=True)
    (app / ".git").mkdir()

    (app / "index.html").write_text("<html><body>hello</body></html>")
    (app / "src" / "app.js").write_text("console.log('hi');\n")
    (app / "src" / "styles" / "site.css").write_text("body { margin: 0; }\n")

    (app / "node_modules" / "react" / "index.js").write_text("module.exports = {};\n")
    (app / ".git" / "HEAD").write_text("ref: refs/heads/main\n")
    (app / ".env").write_text("API_KEY=secret\n")
    (app / "package-lock.json").write_text("{}\n")
    return app


@pytest.fixture
def bundle_dir(tmp_path: Path) -> Path:
    return tmp_path / "bundles"


# =============================================================================
# Transport Fixtures
# =============================================================================


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def stub_transport(clock: FakeClock) -> StubTransport:
    return StubTransport(clock=clock)


@pytest.fixture
def broker_config() -> BrokerConfig:
    return BrokerConfig(
        url=TEST_BROKER_URL,
        device_token=TEST_DEVICE_TOKEN,
        source=ConfigSource.SETTINGS,
    )


@pytest.fixture
def service(stub_transport: StubTransport, bundle_dir: Path, clock: FakeClock) -> PublishService:
    """Publish service on the stub transport with an isolated bundle dir."""
    return PublishService(
        stub_transport,
        bundle_dir=bundle_dir,
        registry=JobRegistry(clock=clock),
        clock=clock,
    )
