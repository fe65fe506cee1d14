"""Discovery of signed files the manifest never mentions."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List

from sigcheck.models import CheckResult, CheckStatus
from sigcheck.reconcile import messages
from sigcheck.reconcile.run import ReconciliationRun

LOGGER = logging.getLogger(__name__)


class UnclaimedFileScanner:
    """Reports unclaimed documents that carry a signature file.

    Unsigned stray files are ignored to keep the report focused.
    """

    def __init__(self, run: ReconciliationRun) -> None:
        self.run = run
        self.index = run.index
        self.extensions = run.config.document_extensions
        self.suffix = run.config.signature_suffix

    def scan(self) -> List[CheckResult]:
        results: List[CheckResult] = []
        for path in self.index.paths():
            if self.run.is_claimed(path):
                continue
            if path.suffix.lower() not in self.extensions:
                continue
            signatures = self.related_signatures(path.name)
            if not signatures:
                continue
            LOGGER.debug("Unclaimed signed file %s", path)
            results.append(self._build_result(path, signatures))
        return results

    def related_signatures(self, name: str) -> List[Path]:
        exact = (name + self.suffix).casefold()
        needle = name.casefold()
        related: List[Path] = []
        for path in self.index.signature_paths():
            candidate = path.name.casefold()
            if candidate == exact or needle in candidate:
                related.append(path)
        for path in self.index.signatures_for(name):
            if path not in related:
                related.append(path)
        return [path for path in related if not self.run.is_claimed(path)]

    def _build_result(self, path: Path, signatures: List[Path]) -> CheckResult:
        names = [signature.name for signature in signatures]
        result = CheckResult(
            filename=path.name,
            status=CheckStatus.INFO,
            signature_filenames=names,
            file_path=path,
            file_found=True,
            signature_found=True,
            actual_checksum=self.run.searcher.checksum_of(path),
        )
        for line in messages.unclaimed_file(path.name, names):
            result.add_message(line)
        return result
