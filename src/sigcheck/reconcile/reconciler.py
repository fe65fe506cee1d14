"""Manifest reconciliation pipeline."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, List, Sequence

from sigcheck.config import AppConfig
from sigcheck.models import CheckResult, CheckStatus, DeclaredFile, Document
from sigcheck.reconcile import messages
from sigcheck.reconcile.run import ReconciliationRun
from sigcheck.reconcile.unclaimed import UnclaimedFileScanner
from sigcheck.utils.files import checksums_match

LOGGER = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


class ManifestReconciler:
    """Classifies every declared file of a manifest against a directory index."""

    def __init__(self, run: ReconciliationRun) -> None:
        self.run = run
        self.searcher = run.searcher
        self.index = run.index

    def check_documents(
        self,
        documents: Sequence[Document],
        *,
        on_progress: ProgressCallback | None = None,
    ) -> List[CheckResult]:
        total = sum(len(document.files) for document in documents)
        results: List[CheckResult] = []
        for document in documents:
            for declared in document.files:
                results.append(self.check_file(document, declared))
                if on_progress is not None:
                    on_progress(len(results), total)
        return results

    def check_file(self, document: Document, declared: DeclaredFile) -> CheckResult:
        result = CheckResult(
            filename=declared.filename,
            declared_checksum=declared.checksum,
            doc_name=document.name,
            doc_type=document.doc_type,
            doc_number=document.number,
            doc_date=document.date,
        )
        self._match_file(result, declared)
        if declared.signatures:
            self._check_signatures(result, declared)
        self._check_undeclared_signatures(result, declared)
        LOGGER.debug("%s: %s", declared.filename, result.status.value)
        return result

    def _match_file(self, result: CheckResult, declared: DeclaredFile) -> None:
        path = self.searcher.find_by_name(declared.filename)
        if path is not None:
            result.file_found = True
            result.file_path = path
            result.actual_checksum = self.searcher.checksum_of(path)
            if checksums_match(declared.checksum, result.actual_checksum):
                result.status = CheckStatus.SUCCESS
                result.add_message(messages.file_matches(declared.filename))
            else:
                result.status = CheckStatus.WARNING
                result.add_message(messages.file_checksum_differs(declared.filename))
            self.run.claim(path)
            return

        path = self.searcher.find_by_checksum(declared.checksum)
        if path is not None:
            result.file_found = True
            result.file_path = path
            result.actual_checksum = declared.checksum
            result.status = CheckStatus.WARNING
            result.add_message(messages.file_renamed(declared.filename, path.name))
            self.run.claim(path)
            return

        result.status = CheckStatus.ERROR
        for line in messages.file_missing(declared.filename):
            result.add_message(line)

    def _check_signatures(self, result: CheckResult, declared: DeclaredFile) -> None:
        for signature in declared.signatures:
            result.signature_filenames.append(signature.filename)
            path = self.searcher.find_by_name(signature.filename)
            if path is not None:
                result.signature_found = True
                self.run.claim(path)
                if checksums_match(signature.checksum, self.searcher.checksum_of(path)):
                    result.add_message(messages.signature_matches(signature.filename))
                else:
                    result.add_message(messages.signature_checksum_differs(signature.filename))
                    result.escalate(CheckStatus.WARNING)
                continue

            path = self.searcher.find_by_checksum(signature.checksum)
            if path is not None:
                result.signature_found = True
                self.run.claim(path)
                result.add_message(messages.signature_renamed(path.name, declared.filename))
            else:
                result.add_message(messages.signature_missing(signature.filename))
            result.escalate(CheckStatus.WARNING)

    def _check_undeclared_signatures(self, result: CheckResult, declared: DeclaredFile) -> None:
        if not declared.filename:
            return

        candidates: List[Path] = list(self.index.signatures_for(declared.filename))
        needle = declared.filename.casefold()
        for path in self.index.signature_paths():
            if needle in path.name.casefold() and path not in candidates:
                candidates.append(path)

        declared_names = {signature.filename.casefold() for signature in declared.signatures}
        extras = [
            path
            for path in candidates
            if path.name.casefold() not in declared_names and not self.run.is_claimed(path)
        ]
        if not extras:
            return

        names = [path.name for path in extras]
        for line in messages.undeclared_signatures(names, has_declared=bool(declared.signatures)):
            result.add_message(line)
        result.escalate(CheckStatus.WARNING)


def reconcile(
    documents: Sequence[Document],
    root: Path,
    config: AppConfig | None = None,
    *,
    on_progress: ProgressCallback | None = None,
) -> List[CheckResult]:
    """Check ``documents`` against the files under ``root``.

    Returns one result per declared file in manifest order, followed by
    informational results for signed files the manifest never mentions.
    """
    run = ReconciliationRun.start(Path(root), config)
    results = ManifestReconciler(run).check_documents(documents, on_progress=on_progress)
    unclaimed = UnclaimedFileScanner(run).scan()
    LOGGER.info("Checked %d declared files, %d unclaimed signed files", len(results), len(unclaimed))
    results.extend(unclaimed)
    return results
