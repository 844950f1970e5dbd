"""Configuration data models"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional
from urllib.parse import urlparse

from ..constants import REDACTED_INVALID_URL, STUB_RETENTION_SECONDS
from ..utils.hash_utils import fingerprint_secret


class ConfigSource(Enum):
    """Where the broker URL came from"""
    SETTINGS = "settings"
    ENV = "env"
    NONE = "none"


@dataclass(frozen=True)
class BrokerConfig:
    """Broker connection settings

    A missing ``url`` selects the stub transport. ``device_token`` is only
    required when ``url`` is set.
    """

    url: Optional[str] = None
    device_token: Optional[str] = None
    source: ConfigSource = ConfigSource.NONE

    @property
    def is_enabled(self) -> bool:
        """Broker is enabled if a URL is configured"""
        return bool(self.url)

    @property
    def has_device_token(self) -> bool:
        return bool(self.device_token)

    @property
    def redacted_url(self) -> Optional[str]:
        """Broker URL reduced to scheme, host and port (no userinfo, path or query)"""
        if not self.url:
            return None

        try:
            parsed = urlparse(self.url)
            host = parsed.hostname
            port = parsed.port
        except ValueError:
            return REDACTED_INVALID_URL

        if not parsed.scheme or not host:
            return REDACTED_INVALID_URL
        if port:
            host = f"{host}:{port}"
        return f"{parsed.scheme}://{host}"

    @property
    def token_length(self) -> int:
        return len(self.device_token) if self.device_token else 0

    @property
    def token_fingerprint(self) -> Optional[str]:
        if not self.device_token:
            return None
        return fingerprint_secret(self.device_token)

    def __repr__(self) -> str:
        return (
            f"BrokerConfig(url={self.redacted_url!r}, "
            f"device_token=<{self.token_length} chars>, source={self.source.value!r})"
        )

    def to_diagnostics(self) -> Dict[str, Any]:
        """Diagnostics-safe view (no secrets)"""
        return {
            "broker_url": self.redacted_url,
            "has_broker_url": self.is_enabled,
            "has_device_token": self.has_device_token,
            "is_enabled": self.is_enabled,
            "config_source": self.source.value,
            "credential_length": self.token_length,
            "credential_fingerprint": self.token_fingerprint,
        }


@dataclass
class PublishSettings:
    """Local publish pipeline settings"""

    bundle_dir: Optional[Path] = None
    stub_retention_seconds: float = STUB_RETENTION_SECONDS
    records_file: Optional[Path] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PublishSettings':
        """Create from dictionary"""
        data = dict(data or {})
        bundle_dir = data.pop("bundle_dir", None)
        records_file = data.pop("records_file", None)
        return cls(
            bundle_dir=Path(bundle_dir).expanduser() if bundle_dir else None,
            stub_retention_seconds=float(data.pop("stub_retention_seconds", STUB_RETENTION_SECONDS)),
            records_file=Path(records_file).expanduser() if records_file else None,
            extra=data,
        )
