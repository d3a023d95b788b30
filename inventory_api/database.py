# inventory_api/database.py
import asyncio
import json
import logging
import os
import tempfile
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator, Dict, List, Union

from .errors import LockTimeout, StoreCorrupt

logger = logging.getLogger(__name__)

# The whole store is one JSON document. This module is the only code that
# touches the file; everyone else goes through a StoreHandle.

COLLECTIONS = ("products", "transactions", "customers")

Store = Dict[str, List[Dict[str, Any]]]


def empty_store() -> Store:
    return {name: [] for name in COLLECTIONS}


class StoreHandle:
    """Owns the store file and the lock that serializes access to it.

    One handle is created per process and passed to whoever needs the store.
    ``read`` and ``write`` each take the lock for a single I/O call; ``cycle``
    takes it once for a whole read-modify-write.
    """

    def __init__(self, path: Union[str, Path], lock_timeout: float = 5.0):
        self.path = Path(path)
        self.lock_timeout = lock_timeout
        self._lock = asyncio.Lock()

    # ---------------------------
    # Locking
    # ---------------------------
    async def _acquire(self) -> None:
        try:
            await asyncio.wait_for(self._lock.acquire(), timeout=self.lock_timeout)
        except asyncio.TimeoutError:
            logger.warning("Timed out after %.1fs waiting for lock on %s", self.lock_timeout, self.path)
            raise LockTimeout(f"Timed out waiting for lock on {self.path.name}")

    @asynccontextmanager
    async def _locked(self) -> AsyncIterator[None]:
        await self._acquire()
        try:
            yield
        finally:
            self._lock.release()

    # ---------------------------
    # Startup
    # ---------------------------
    async def initialize(self) -> None:
        """Create the store, or reset it if it is empty or unreadable."""
        async with self._locked():
            await asyncio.to_thread(self._initialize_sync)

    def _initialize_sync(self) -> None:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.info("%s not found, creating empty store", self.path)
            self._dump(empty_store())
            return

        if not raw.strip():
            logger.warning("%s is empty, initializing with default structure", self.path)
            self._dump(empty_store())
            return

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("Initializing %s due to error: %s", self.path, e)
            self._dump(empty_store())
            return

        if not isinstance(data, dict):
            logger.warning("Initializing %s: top level is not an object", self.path)
            self._dump(empty_store())
            return

        missing = [name for name in COLLECTIONS if not isinstance(data.get(name), list)]
        if missing:
            logger.warning("Adding missing collections to %s: %s", self.path, ", ".join(missing))
            for name in missing:
                data[name] = []
            self._dump(data)

    # ---------------------------
    # Raw I/O (caller holds the lock)
    # ---------------------------
    def _load(self) -> Store:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as e:
            logger.error("Error reading %s: %s", self.path, e)
            raise StoreCorrupt(f"Database file could not be read: {e}")
        if not raw.strip():
            logger.error("%s is empty", self.path)
            raise StoreCorrupt("Database file is empty")
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.error("Error parsing %s: %s", self.path, e)
            raise StoreCorrupt(f"Database file is not valid JSON: {e}")
        if not isinstance(data, dict):
            logger.error("%s does not hold a JSON object", self.path)
            raise StoreCorrupt("Database file does not hold a JSON object")
        for name in COLLECTIONS:
            if not isinstance(data.setdefault(name, []), list):
                logger.error("%s: collection %s is not a list", self.path, name)
                raise StoreCorrupt(f"Database collection '{name}' is not a list")
        return data

    def _dump(self, data: Store) -> None:
        text = json.dumps(data, indent=2)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(prefix=f"{self.path.stem}_", suffix=".tmp", dir=str(self.path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.path)
        except Exception as e:
            logger.error("Error writing %s: %s", self.path, e)
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    # ---------------------------
    # Public access
    # ---------------------------
    async def read(self) -> Store:
        async with self._locked():
            return await asyncio.to_thread(self._load)

    async def write(self, data: Store) -> None:
        async with self._locked():
            await asyncio.to_thread(self._dump, data)

    @asynccontextmanager
    async def cycle(self) -> AsyncIterator["StoreCycle"]:
        """Hold the lock across one read-modify-write.

            async with store.cycle() as tx:
                db = await tx.read()
                ...
                await tx.write(db)
        """
        async with self._locked():
            yield StoreCycle(self)


class StoreCycle:
    """Read/write access for the holder of a StoreHandle lock."""

    def __init__(self, handle: StoreHandle):
        self._handle = handle

    async def read(self) -> Store:
        return await asyncio.to_thread(self._handle._load)

    async def write(self, data: Store) -> None:
        await asyncio.to_thread(self._handle._dump, data)
