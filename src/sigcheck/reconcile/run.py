"""Per-run reconciliation state."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Set

from sigcheck.config import AppConfig
from sigcheck.index.indexer import DirectoryIndex, build_index
from sigcheck.index.search import ChecksumCache, ChecksumSearcher


@dataclass(slots=True)
class ReconciliationRun:
    """Index, checksum cache and claimed paths shared by one run.

    A run is built fresh for every reconciliation; checksums are not reused
    across runs because the directory may have changed in between.
    """

    config: AppConfig
    index: DirectoryIndex
    searcher: ChecksumSearcher
    claimed: Set[Path] = field(default_factory=set)

    @classmethod
    def start(cls, root: Path, config: AppConfig | None = None) -> "ReconciliationRun":
        config = config or AppConfig()
        index = build_index(root, signature_suffix=config.signature_suffix)
        cache = ChecksumCache(chunk_size=config.chunk_size)
        searcher = ChecksumSearcher(
            index,
            cache,
            parallel_threshold=config.parallel_threshold,
            max_workers=config.resolve_workers(),
        )
        return cls(config=config, index=index, searcher=searcher)

    def claim(self, path: Path | None) -> None:
        if path is not None:
            self.claimed.add(path)

    def is_claimed(self, path: Path) -> bool:
        return path in self.claimed
