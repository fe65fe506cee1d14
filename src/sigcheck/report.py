"""Result statistics, filtering and plain-text report export."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterable, List, Sequence

from sigcheck.models import CheckResult, CheckStatus

SEPARATOR = "=" * 80

STATUS_LABELS = {
    CheckStatus.SUCCESS: "Success",
    CheckStatus.WARNING: "Warning",
    CheckStatus.ERROR: "Error",
    CheckStatus.INFO: "Info",
}


@dataclass(slots=True)
class ReportStats:
    total: int = 0
    success: int = 0
    warning: int = 0
    error: int = 0
    info: int = 0

    def increment(self, status: CheckStatus) -> None:
        self.total += 1
        if status is CheckStatus.SUCCESS:
            self.success += 1
        elif status is CheckStatus.WARNING:
            self.warning += 1
        elif status is CheckStatus.ERROR:
            self.error += 1
        else:
            self.info += 1

    def as_dict(self) -> Dict[str, int]:
        return asdict(self)


def summarize(results: Iterable[CheckResult]) -> ReportStats:
    stats = ReportStats()
    for result in results:
        stats.increment(result.status)
    return stats


def _matches_search(result: CheckResult, needle: str) -> bool:
    haystacks = (
        result.doc_name,
        result.doc_type,
        result.doc_number,
        result.filename,
        result.signature_filename,
        result.message,
    )
    return any(needle in value.casefold() for value in haystacks)


def filter_results(
    results: Iterable[CheckResult],
    *,
    status: CheckStatus | None = None,
    section: str | None = None,
    search: str | None = None,
) -> List[CheckResult]:
    """Narrow results by status, document name and free-text search."""
    filtered = list(results)
    if status is not None:
        filtered = [result for result in filtered if result.status is status]
    if section:
        filtered = [result for result in filtered if result.doc_name == section]
    if search and search.strip():
        needle = search.strip().casefold()
        filtered = [result for result in filtered if _matches_search(result, needle)]
    return filtered


def sections(results: Iterable[CheckResult]) -> List[str]:
    """Distinct non-empty document names, sorted."""
    return sorted({result.doc_name for result in results if result.doc_name.strip()})


def render_text_report(
    results: Sequence[CheckResult],
    *,
    manifest_path: Path,
    directory: Path,
    generated_at: datetime | None = None,
) -> str:
    generated_at = generated_at or datetime.now()
    stats = summarize(results)
    lines = [
        "File check report",
        f"Date: {generated_at:%Y-%m-%d %H:%M:%S}",
        f"Manifest: {manifest_path}",
        f"Directory: {directory}",
        SEPARATOR,
        "",
        "Statistics:",
        f"  Total files: {stats.total}",
        f"  Success: {stats.success}",
        f"  Warnings: {stats.warning}",
        f"  Errors: {stats.error}",
        f"  Info: {stats.info}",
        "",
        SEPARATOR,
        "",
    ]
    for result in results:
        lines.append(f"File: {result.filename}")
        lines.append(f"Status: {STATUS_LABELS[result.status]}")
        lines.append(f"Message: {result.message}")
        if result.file_path is not None:
            lines.append(f"Path: {result.file_path}")
        lines.append("")
    return "\n".join(lines)


def write_text_report(
    results: Sequence[CheckResult],
    destination: Path,
    *,
    manifest_path: Path,
    directory: Path,
) -> Path:
    destination = Path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_text(
        render_text_report(results, manifest_path=manifest_path, directory=directory),
        encoding="utf-8",
    )
    return destination
