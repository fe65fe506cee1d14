"""Core SigCheck data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Tuple


class CheckStatus(str, Enum):
    """Outcome of checking one file."""

    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"

    @property
    def severity(self) -> int:
        return _SEVERITY[self]


_SEVERITY = {
    CheckStatus.SUCCESS: 0,
    CheckStatus.INFO: 1,
    CheckStatus.WARNING: 2,
    CheckStatus.ERROR: 3,
}


@dataclass(frozen=True, slots=True)
class DeclaredSignature:
    """Signature file listed for a declared file."""

    filename: str
    checksum: str
    file_format: str = ""


@dataclass(frozen=True, slots=True)
class DeclaredFile:
    """File entry of a manifest document."""

    filename: str
    checksum: str
    file_format: str = ""
    signatures: Tuple[DeclaredSignature, ...] = ()


@dataclass(frozen=True, slots=True)
class Document:
    """Manifest document owning an ordered list of declared files."""

    doc_type: str = ""
    name: str = ""
    number: str = ""
    date: str = ""
    issue_author: str = ""
    files: Tuple[DeclaredFile, ...] = ()


@dataclass(slots=True)
class CheckResult:
    """Findings for one declared or discovered file.

    Built incrementally: ``status`` only moves up the severity scale through
    :meth:`escalate` and ``message_lines`` is append-only.
    """

    filename: str
    status: CheckStatus = CheckStatus.SUCCESS
    signature_filenames: List[str] = field(default_factory=list)
    message_lines: List[str] = field(default_factory=list)
    file_path: Path | None = None
    file_found: bool = False
    signature_found: bool = False
    declared_checksum: str = ""
    actual_checksum: str = ""
    doc_name: str = ""
    doc_type: str = ""
    doc_number: str = ""
    doc_date: str = ""

    def escalate(self, status: CheckStatus) -> None:
        if status.severity > self.status.severity:
            self.status = status

    def add_message(self, line: str) -> None:
        self.message_lines.append(line)

    @property
    def message(self) -> str:
        return "\n".join(self.message_lines)

    @property
    def signature_filename(self) -> str:
        return ", ".join(self.signature_filenames)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "filename": self.filename,
            "status": self.status.value,
            "signature_filenames": list(self.signature_filenames),
            "message": self.message,
            "file_path": str(self.file_path) if self.file_path is not None else "",
            "file_found": self.file_found,
            "signature_found": self.signature_found,
            "declared_checksum": self.declared_checksum,
            "actual_checksum": self.actual_checksum,
            "doc_name": self.doc_name,
            "doc_type": self.doc_type,
            "doc_number": self.doc_number,
            "doc_date": self.doc_date,
        }
