"""File-backed key-value store for data that never reaches Supabase (tasks, calendar events).

Values are stored as strings under string keys, the same contract as browser localStorage.
"""
import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Dict, Optional

from portal.config import settings

logger = logging.getLogger(__name__)


class LocalStore:
    def __init__(self, path: str):
        self.path = Path(path)
        self._lock = threading.Lock()

    def _read_all(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        with self.path.open("r", encoding="utf-8") as fh:
            content = fh.read()
        if not content.strip():
            return {}
        data = json.loads(content)
        if not isinstance(data, dict):
            raise ValueError(f"Local store at {self.path} is not a JSON object")
        return data

    def _write_all(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=".store-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
        except Exception:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    def get_item(self, key: str) -> Optional[str]:
        with self._lock:
            return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            data = self._read_all()
            data[key] = value
            self._write_all(data)
        logger.debug(f"Stored {len(value)} chars under {key}")


_store: Optional[LocalStore] = None


def get_local_store() -> LocalStore:
    global _store
    if _store is None:
        _store = LocalStore(settings.local_store_path)
    return _store
