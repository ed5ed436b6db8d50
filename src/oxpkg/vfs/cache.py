"""Process-wide registry of open packages, keyed by source location.

Each location maps to a `PackageHandle` whose state is LOADING, READY or
FAILED. The handle memoizes the load task itself, so every `open()`/`get()`
issued while a load is in flight awaits that same task and receives the same
`Package` instance.

Lifecycle is explicit: `open()` starts (or joins) a load, `close()` drops the
handle. A FAILED handle keeps its error for `get()`; calling `open()` again
discards it and starts a fresh load.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from oxpkg.core.errors import PackageNotOpenError
from oxpkg.core.package import Package

from .storage import PackageStore

logger = logging.getLogger(__name__)


class HandleState(str, Enum):
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


@dataclass
class PackageHandle:
    location: str
    task: "asyncio.Future[Package]"

    @property
    def state(self) -> HandleState:
        if not self.task.done():
            return HandleState.LOADING
        if self.task.cancelled() or self.task.exception() is not None:
            return HandleState.FAILED
        return HandleState.READY

    @property
    def error(self) -> Optional[BaseException]:
        if self.state is not HandleState.FAILED:
            return None
        if self.task.cancelled():
            return asyncio.CancelledError()
        return self.task.exception()

    async def wait(self) -> Package:
        # shield: one caller being cancelled must not cancel the shared load
        return await asyncio.shield(self.task)


class PackageCache:
    def __init__(self, store: PackageStore) -> None:
        self.store = store
        self._handles: dict[str, PackageHandle] = {}

    async def _load(self, location: str) -> Package:
        data = await self.store.read_bytes(location)
        package = await asyncio.to_thread(Package.from_archive_bytes, data)
        logger.info("opened package %s (%d entries)", location, len(package))
        return package

    def _start(self, location: str) -> PackageHandle:
        task = asyncio.ensure_future(self._load(location))
        # Mark the error as retrieved; callers see it through wait().
        task.add_done_callback(lambda t: t.cancelled() or t.exception())
        handle = PackageHandle(location=location, task=task)
        self._handles[location] = handle
        return handle

    async def open(self, location: str) -> Package:
        """Open `location`, or join the load already in flight for it."""
        handle = self._handles.get(location)
        if handle is None or handle.state is HandleState.FAILED:
            handle = self._start(location)
        return await handle.wait()

    async def get(self, location: str) -> Package:
        """Package for an already-opened location.

        Raises:
            PackageNotOpenError: `location` was never opened (or was closed).
        """
        handle = self._handles.get(location)
        if handle is None:
            raise PackageNotOpenError(location)
        return await handle.wait()

    def close(self, location: str) -> None:
        if self._handles.pop(location, None) is not None:
            logger.info("closed package %s", location)

    def is_open(self, location: str) -> bool:
        return location in self._handles

    def state(self, location: str) -> Optional[HandleState]:
        handle = self._handles.get(location)
        return handle.state if handle is not None else None

    def locations(self) -> list[str]:
        return list(self._handles)
