"""JSONL file session repository: one session object per line.

The file is shared between the webhook server and the inactivity sweep,
which run as separate processes.  Nothing is cached: every read goes to
disk, and every save re-reads the file, replaces only its own record and
rewrites atomically (temp file + rename) while holding a cross-process
file lock.  File IO runs in the default thread pool.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
from functools import partial
from pathlib import Path
from typing import Any, Optional

from filelock import FileLock, Timeout as FileLockTimeout
from pydantic import ValidationError

from dialogue.models.session import Session
from dialogue.store.base import SessionRepository

log = logging.getLogger("dialogue.store.jsonl")


class JsonlSessionRepository(SessionRepository):
    def __init__(self, path: str | Path, lock_timeout: float = 10.0) -> None:
        self._path = Path(path)
        self._file_lock = FileLock(str(self._path) + ".lock", timeout=lock_timeout)
        self._write_lock = asyncio.Lock()

    async def _run_in_executor(self, func, *args, **kwargs) -> Any:
        """Run blocking file IO in the default thread pool."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, partial(func, *args, **kwargs))

    def _read_file(self) -> dict[str, dict]:
        records: dict[str, dict] = {}
        if not self._path.exists():
            return records
        for lineno, line in enumerate(self._path.read_text(encoding="utf-8").splitlines(), 1):
            line = line.strip()
            if not line:
                continue
            try:
                data = json.loads(line)
            except json.JSONDecodeError:
                log.warning("Skipping malformed session line %d in %s", lineno, self._path)
                continue
            if isinstance(data, dict) and data.get("user_id"):
                records[data["user_id"]] = data
        return records

    def _write_file(self, records: dict[str, dict]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        lines = [json.dumps(r, ensure_ascii=False) for r in records.values()]
        tmp.write_text("\n".join(lines) + ("\n" if lines else ""), encoding="utf-8")
        os.replace(tmp, self._path)

    def _merge_record(self, record: dict) -> None:
        """Re-read the file and write it back with ``record`` replaced."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with self._file_lock:
            records = self._read_file()
            records[record["user_id"]] = record
            self._write_file(records)

    def _parse(self, data: dict) -> Optional[Session]:
        try:
            return Session.model_validate(data)
        except ValidationError as e:
            log.warning("Discarding unreadable session %s: %s", data.get("user_id"), e)
            return None

    async def load(self, user_id: str) -> Optional[Session]:
        records = await self._run_in_executor(self._read_file)
        data = records.get(user_id)
        return self._parse(data) if data is not None else None

    async def save(self, session: Session) -> None:
        record = session.model_dump(mode="json")
        async with self._write_lock:
            try:
                await self._run_in_executor(self._merge_record, record)
            except FileLockTimeout:
                log.error("Timed out waiting for %s; session not saved", self._file_lock.lock_file)
                raise

    async def list_sessions(self) -> list[Session]:
        records = await self._run_in_executor(self._read_file)
        sessions = [self._parse(data) for data in records.values()]
        return [s for s in sessions if s is not None]
