"""File-based caching layer for upstream API responses."""

from __future__ import annotations

import hashlib
import json
import logging
import time
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_CACHE_DIR = Path.home() / ".cache" / "dev-chronicle"
DEFAULT_TTL = 300  # upstream data is refreshed every five minutes


class FileCache:
    """JSON file cache with TTL support, one file per upstream request.

    Files are named ``<source>-<digest>.json`` so GitHub and Zenn responses
    share one directory without colliding.
    """

    def __init__(
        self,
        source: str,
        cache_dir: Path = DEFAULT_CACHE_DIR,
        ttl: int = DEFAULT_TTL,
    ) -> None:
        self._source = source
        self._cache_dir = cache_dir
        self._ttl = ttl
        self._cache_dir.mkdir(parents=True, exist_ok=True)

    def path_for(self, url: str, params: dict[str, Any] | None = None) -> Path:
        raw = json.dumps([self._source, url, params or {}], sort_keys=True)
        digest = hashlib.sha256(raw.encode()).hexdigest()
        return self._cache_dir / f"{self._source}-{digest}.json"

    def get(self, url: str, params: dict[str, Any] | None = None) -> Any | None:
        path = self.path_for(url, params)
        if not path.exists():
            return None
        try:
            entry = json.loads(path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError):
            logger.debug("Unreadable cache entry %s", path.name)
            return None
        if time.time() - entry.get("ts", 0) > self._ttl:
            path.unlink(missing_ok=True)
            return None
        return entry.get("value")

    def set(self, url: str, params: dict[str, Any] | None, value: Any) -> None:
        path = self.path_for(url, params)
        entry = {"ts": time.time(), "url": url, "value": value}
        try:
            path.write_text(json.dumps(entry, ensure_ascii=False), encoding="utf-8")
        except OSError as exc:
            logger.warning("Could not write %s cache entry for %s: %s", self._source, url, exc)
