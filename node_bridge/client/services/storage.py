"""
Option and transient storage for the bridge client.

``OptionStore`` keeps durable key/value options in a JSON file (the CMS
option table). ``TransientCache`` is a single-process dict with per-key
expiry, used to rate-limit the admin health probe.
"""

import json
import threading
import time
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from ...utils.logging_config import get_logger

logger = get_logger(__name__)


class OptionStore:
    """Durable options persisted as JSON."""

    def __init__(self, path: Path):
        self._path = Path(path)
        self._lock = threading.Lock()

    def _load(self) -> Dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Failed to load options from %s: %s", self._path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def get(self, name: str, default: Any = None) -> Any:
        with self._lock:
            return self._load().get(name, default)

    def set(self, name: str, value: Any) -> None:
        with self._lock:
            data = self._load()
            data[name] = value
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp = self._path.with_suffix(self._path.suffix + ".tmp")
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            tmp.replace(self._path)


class TransientCache:
    """Dict-based cache with expiry (single-process only)."""

    def __init__(self, clock=time.monotonic):
        self._store: Dict[str, Tuple[Any, Optional[float]]] = {}  # key -> (value, expire_ts)
        self._clock = clock

    def get(self, key: str) -> Optional[Any]:
        entry = self._store.get(key)
        if entry is None:
            return None
        value, expires = entry
        if expires is not None and self._clock() > expires:
            del self._store[key]
            return None
        return value

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        expires = (self._clock() + ttl) if ttl is not None else None
        self._store[key] = (value, expires)
