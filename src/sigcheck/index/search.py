"""Checksum lookups over a directory index."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Dict, List

from sigcheck.index.indexer import DirectoryIndex
from sigcheck.utils.files import CHUNK_SIZE, checksums_match, compute_crc32

LOGGER = logging.getLogger(__name__)


class ChecksumCache:
    """Thread-safe memo of file checksums for a single reconciliation run."""

    def __init__(self, *, chunk_size: int = CHUNK_SIZE) -> None:
        self.chunk_size = chunk_size
        self._lock = threading.Lock()
        self._values: Dict[Path, str] = {}

    def get(self, path: Path) -> str:
        with self._lock:
            cached = self._values.get(path)
        if cached is not None:
            return cached

        checksum = compute_crc32(path, chunk_size=self.chunk_size)
        with self._lock:
            return self._values.setdefault(path, checksum)


class ChecksumSearcher:
    """Finds indexed files by name or by content checksum."""

    def __init__(
        self,
        index: DirectoryIndex,
        cache: ChecksumCache,
        *,
        parallel_threshold: int = 100,
        max_workers: int = 8,
    ) -> None:
        self.index = index
        self.cache = cache
        self.parallel_threshold = parallel_threshold
        self.max_workers = max_workers

    def find_by_name(self, name: str) -> Path | None:
        return self.index.find(name)

    def checksum_of(self, path: Path) -> str:
        return self.cache.get(path)

    def find_by_checksum(self, checksum: str) -> Path | None:
        """Return an indexed path whose content has ``checksum``.

        Small indexes are scanned in discovery order and the first match
        wins. Above ``parallel_threshold`` files the scan fans out over a
        thread pool and the first worker to find a match wins.
        """
        if not checksum:
            return None
        candidates = self.index.paths()
        if len(candidates) > self.parallel_threshold:
            return self._find_parallel(checksum, candidates)
        for path in candidates:
            if checksums_match(checksum, self.cache.get(path)):
                return path
        return None

    def _find_parallel(self, checksum: str, candidates: List[Path]) -> Path | None:
        found = threading.Event()

        def _check(path: Path) -> Path | None:
            if found.is_set():
                return None
            if checksums_match(checksum, self.cache.get(path)):
                found.set()
                return path
            return None

        LOGGER.debug(
            "Searching %d files for checksum %s with %d workers",
            len(candidates),
            checksum,
            self.max_workers,
        )
        with ThreadPoolExecutor(
            max_workers=self.max_workers, thread_name_prefix="sigcheck-crc"
        ) as executor:
            futures = [executor.submit(_check, path) for path in candidates]
            try:
                for future in as_completed(futures):
                    match = future.result()
                    if match is not None:
                        return match
            finally:
                found.set()
                for future in futures:
                    future.cancel()
        return None
