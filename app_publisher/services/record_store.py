"""Persistence of published live URLs per owner"""

import asyncio
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

import aiofiles
import aiofiles.os
import yaml


class RecordStore(ABC):
    """Records the live URL of each owner's latest successful publish"""

    @abstractmethod
    async def save_live_url(self, owner_id: int, url: str) -> None:
        """
        Persist the live URL for an owner

        Args:
            owner_id: Owning app identifier
            url: Live URL reported by the transport
        """
        pass

    @abstractmethod
    async def get_live_url(self, owner_id: int) -> Optional[str]:
        """Get the last live URL recorded for an owner"""
        pass


class InMemoryRecordStore(RecordStore):
    """Process-local record store"""

    def __init__(self):
        self._urls: Dict[int, str] = {}

    async def save_live_url(self, owner_id: int, url: str) -> None:
        self._urls[owner_id] = url

    async def get_live_url(self, owner_id: int) -> Optional[str]:
        return self._urls.get(owner_id)


class YamlRecordStore(RecordStore):
    """Record store kept in a YAML file

    File layout::

        apps:
          1:
            live_url: file:///home/me/apps/my-app
            published_at: '2025-01-01T12:00:00'
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._lock: Optional[asyncio.Lock] = None

    @property
    def lock(self) -> asyncio.Lock:
        if self._lock is None:
            self._lock = asyncio.Lock()
        return self._lock

    async def _read(self) -> Dict[str, Any]:
        if not await aiofiles.os.path.exists(self.path):
            return {}
        async with aiofiles.open(self.path, "r") as f:
            return yaml.safe_load(await f.read()) or {}

    async def save_live_url(self, owner_id: int, url: str) -> None:
        async with self.lock:
            data = await self._read()
            apps = data.setdefault("apps", {})
            apps[owner_id] = {
                "live_url": url,
                "published_at": datetime.now().isoformat(),
            }

            await aiofiles.os.makedirs(self.path.parent, exist_ok=True)
            async with aiofiles.open(self.path, "w") as f:
                await f.write(yaml.dump(data, default_flow_style=False, sort_keys=False))

    async def get_live_url(self, owner_id: int) -> Optional[str]:
        async with self.lock:
            record = (await self._read()).get("apps", {}).get(owner_id)
        return record.get("live_url") if record else None
