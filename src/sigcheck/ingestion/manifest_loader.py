"""XML manifest decoding.

A manifest holds ``Document`` elements anywhere in the tree::

    <Document>
      <DocType>...</DocType> <DocName>...</DocName> <DocNumber>...</DocNumber>
      <DocDate>...</DocDate> <DocIssueAuthor>...</DocIssueAuthor>
      <File>
        <FileName>report.pdf</FileName>
        <FileFormat>pdf</FileFormat>
        <FileChecksum>DEADBEEF</FileChecksum>
        <SignFile>...same three fields...</SignFile>
      </File>
    </Document>

Older manifests carry at most one ``SignFile`` per file, newer ones may
repeat it or wrap several in ``SignFiles``; both decode to a tuple.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import List

from sigcheck.models import DeclaredFile, DeclaredSignature, Document

LOGGER = logging.getLogger(__name__)


class ManifestError(Exception):
    """Raised when a manifest cannot be read or decoded."""


def _text(element: ET.Element, tag: str) -> str:
    child = element.find(tag)
    if child is None or child.text is None:
        return ""
    return child.text.strip()


def _signature_elements(file_element: ET.Element) -> List[ET.Element]:
    elements: List[ET.Element] = []
    for child in file_element:
        if child.tag == "SignFile":
            elements.append(child)
        elif child.tag == "SignFiles":
            elements.extend(child.findall("SignFile"))
    return elements


def _parse_signature(element: ET.Element) -> DeclaredSignature:
    return DeclaredSignature(
        filename=_text(element, "FileName"),
        checksum=_text(element, "FileChecksum"),
        file_format=_text(element, "FileFormat"),
    )


def _parse_file(element: ET.Element) -> DeclaredFile:
    return DeclaredFile(
        filename=_text(element, "FileName"),
        checksum=_text(element, "FileChecksum"),
        file_format=_text(element, "FileFormat"),
        signatures=tuple(_parse_signature(sig) for sig in _signature_elements(element)),
    )


def _parse_document(element: ET.Element) -> Document:
    return Document(
        doc_type=_text(element, "DocType"),
        name=_text(element, "DocName"),
        number=_text(element, "DocNumber"),
        date=_text(element, "DocDate"),
        issue_author=_text(element, "DocIssueAuthor"),
        files=tuple(_parse_file(child) for child in element.findall("File")),
    )


def _documents_from(root: ET.Element) -> List[Document]:
    return [_parse_document(element) for element in root.iter("Document")]


def parse_manifest(text: str) -> List[Document]:
    """Decode a manifest held in a string."""
    try:
        root = ET.fromstring(text)
    except ET.ParseError as exc:
        raise ManifestError(f"Malformed manifest: {exc}") from exc
    return _documents_from(root)


def load_manifest(path: Path) -> List[Document]:
    """Decode the manifest stored at ``path``."""
    path = Path(path)
    try:
        tree = ET.parse(path)
    except ET.ParseError as exc:
        raise ManifestError(f"Malformed manifest {path}: {exc}") from exc
    except OSError as exc:
        raise ManifestError(f"Unable to read manifest {path}: {exc}") from exc

    documents = _documents_from(tree.getroot())
    LOGGER.info(
        "Loaded %d documents (%d files) from %s",
        len(documents),
        sum(len(document.files) for document in documents),
        path,
    )
    return documents
