"""
In-memory TTL cache for read-heavy API responses

Entries expire after ``ttl`` seconds. Keys are namespaced strings such as
``products:list:...`` so a whole namespace can be invalidated when the
underlying data changes (product edits, stock movements).
"""
import threading
import time
from typing import Any, Dict, Optional, Tuple


class TTLCache:
    """Thread-safe key/value cache with per-entry expiry"""

    def __init__(self, ttl: int = 300):
        self.ttl = ttl
        self._entries: Dict[str, Tuple[float, Any]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            expires_at, value = entry
            if time.time() >= expires_at:
                del self._entries[key]
                return None
            return value

    def set(self, key: str, value: Any, ttl: Optional[int] = None):
        expires_at = time.time() + (self.ttl if ttl is None else ttl)
        with self._lock:
            self._entries[key] = (expires_at, value)

    def invalidate(self, prefix: str = ""):
        """Drop every entry whose key starts with prefix (all entries by default)"""
        with self._lock:
            for key in [k for k in self._entries if k.startswith(prefix)]:
                del self._entries[key]

    def __len__(self) -> int:
        return len(self._entries)


def make_key(namespace: str, *parts: Any) -> str:
    return ":".join([namespace, *(str(p) for p in parts)])
