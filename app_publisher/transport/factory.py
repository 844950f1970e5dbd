"""Publish transport factory"""

import logging
from typing import Any, Dict, Type

from ..models.config import BrokerConfig
from .base import PublishTransport
from .http import HttpTransport
from .stub import StubTransport

logger = logging.getLogger(__name__)


class TransportFactory:
    """Factory for creating publish transport instances"""

    # Registry of transports
    _transports: Dict[str, Type[PublishTransport]] = {
        "http": HttpTransport,
        "stub": StubTransport,
    }

    @classmethod
    def create_from_config(cls, broker: BrokerConfig, **options: Any) -> PublishTransport:
        """Select a transport once from broker configuration

        A configured broker URL selects the HTTP transport, otherwise the
        stub transport simulates publishing locally.

        Args:
            broker: Resolved broker configuration
            **options: Extra transport options (e.g. retention_seconds, timeout)

        Returns:
            Transport instance

        Raises:
            ConfigError: Broker URL set without a device token
        """
        if broker.is_enabled:
            config = {
                "url": broker.url,
                "device_token": broker.device_token,
            }
            transport_type = "http"
        else:
            config = {}
            transport_type = "stub"

        config.update(options)
        transport = cls.create_from_dict(transport_type, config)
        logger.info(f"Using {transport.describe()} publish transport")
        return transport

    @classmethod
    def create_from_dict(cls, transport_type: str, config: Dict[str, Any]) -> PublishTransport:
        """Create transport from type and configuration dict

        Raises:
            ValueError: If transport type is not supported
        """
        if transport_type not in cls._transports:
            raise ValueError(f"Unsupported transport type: {transport_type}")

        transport_class = cls._transports[transport_type]
        return transport_class(config)

    @classmethod
    def register_transport(cls, transport_type: str, transport_class: Type[PublishTransport]):
        """Register a new transport type"""
        cls._transports[transport_type] = transport_class

    @classmethod
    def get_supported_types(cls) -> list:
        return list(cls._transports.keys())
