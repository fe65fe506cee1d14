"""Application configuration defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass

DOCUMENT_EXTENSIONS = (".pdf", ".xls", ".xlsx", ".doc", ".docx", ".gge")
SIGNATURE_SUFFIX = ".sig"


@dataclass(slots=True)
class AppConfig:
    chunk_size: int = 8192
    parallel_threshold: int = 100
    max_workers: int | None = None
    document_extensions: tuple[str, ...] = DOCUMENT_EXTENSIONS
    signature_suffix: str = SIGNATURE_SUFFIX

    def __post_init__(self) -> None:
        if self.chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        if self.max_workers is not None and self.max_workers <= 0:
            raise ValueError("max_workers must be positive")
        self.document_extensions = tuple(ext.lower() for ext in self.document_extensions)

    def resolve_workers(self) -> int:
        """Number of threads used by the parallel checksum search."""
        if self.max_workers is not None:
            return self.max_workers
        return min(32, (os.cpu_count() or 1) + 4)
