"""JSON file mirror of the daily log."""
import asyncio
import json
import logging
import os
from pathlib import Path
from typing import List, Optional

from stockwatch.domain.entities import LogEntry

logger = logging.getLogger(__name__)


def dump_log(entries: List[LogEntry]) -> str:
    """Serialize log entries to the on-disk JSON array format."""
    return json.dumps([entry.model_dump(by_alias=True) for entry in entries], indent=2)


class JsonLogStore:
    """Append-only in-memory log, rewritten in full to a JSON file."""

    def __init__(self, path):
        self.path = Path(path)
        self._entries: List[LogEntry] = []
        self._pending: Optional[asyncio.Task] = None

    @property
    def entries(self) -> List[LogEntry]:
        return list(self._entries)

    def append(self, entry: LogEntry) -> None:
        self._entries.append(entry)

    def _write_text(self, payload: str) -> bool:
        """Write via a temp file and replace; errors are logged, not raised."""
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(payload, encoding="utf-8")
            os.replace(tmp_path, self.path)
            return True
        except OSError as e:
            logger.error(f"Error writing daily log file {self.path}: {e}")
            return False

    def persist(self) -> bool:
        """Synchronously rewrite the file with the current entries."""
        return self._write_text(dump_log(self._entries))

    def schedule_persist(self) -> asyncio.Task:
        """Persist a snapshot in the background without blocking the caller.

        Writes are chained so the file always ends at the latest snapshot.
        """
        payload = dump_log(self._entries)
        previous = self._pending

        async def _write() -> bool:
            if previous is not None:
                await previous
            return await asyncio.to_thread(self._write_text, payload)

        self._pending = asyncio.create_task(_write())
        return self._pending

    async def flush(self) -> None:
        """Wait for outstanding background writes."""
        if self._pending is not None:
            await self._pending
            self._pending = None

    def clear(self) -> bool:
        """Delete the backing file; failure is logged."""
        try:
            self.path.unlink()
            logger.info(f"Deleted daily log file {self.path}")
            return True
        except FileNotFoundError:
            return True
        except OSError as e:
            logger.error(f"Error deleting daily log file {self.path}: {e}")
            return False
