# core/kv_store.py

import json
import logging
from pathlib import Path
from typing import Dict, Optional

from core.errors import PersistenceError

log = logging.getLogger(__name__)


class PreferenceStore:
    """
    Tiny key-value preference store backed by one JSON file.
    Values are opaque bytes; they are kept as UTF-8 text inside the file.
    """

    def __init__(self, path: str = "cryptofolio_prefs.json"):
        self.path = Path(path)

    # ---------- persistence ----------
    def _read_all(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise PersistenceError(f"Cannot read preferences at {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise PersistenceError(f"Preferences at {self.path} are not a JSON object")
        return data

    def _write_all(self, data: Dict[str, str]):
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(data, indent=2), encoding="utf-8")
            tmp.replace(self.path)
        except OSError as e:
            raise PersistenceError(f"Cannot write preferences at {self.path}: {e}") from e

    # ---------- api ----------
    def read(self, key: str) -> Optional[bytes]:
        value = self._read_all().get(key)
        if value is None:
            return None
        return value.encode("utf-8")

    def write(self, key: str, value: bytes):
        try:
            text = value.decode("utf-8")
        except UnicodeDecodeError as e:
            raise PersistenceError(f"Value for {key!r} is not UTF-8 text") from e
        try:
            data = self._read_all()
        except PersistenceError as e:
            # unreadable file gets replaced rather than blocking every later write
            log.warning("Overwriting unreadable preferences: %s", e)
            data = {}
        data[key] = text
        self._write_all(data)
        log.debug("Wrote %d bytes under %r to %s", len(value), key, self.path)

