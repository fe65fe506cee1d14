"""Tests for XML manifest decoding."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from sigcheck.ingestion.manifest_loader import ManifestError, load_manifest, parse_manifest
from sigcheck.models import DeclaredSignature

SINGLE_SIGNATURE = """<?xml version="1.0" encoding="utf-8"?>
<Package>
  <Documents>
    <Document>
      <DocType>01</DocType>
      <DocName>Explanatory note</DocName>
      <DocNumber>EN-1</DocNumber>
      <DocDate>2024-03-01</DocDate>
      <DocIssueAuthor>Design bureau</DocIssueAuthor>
      <File>
        <FileName>note.pdf</FileName>
        <FileFormat>pdf</FileFormat>
        <FileChecksum>DEADBEEF</FileChecksum>
        <SignFile>
          <FileName>note.pdf.sig</FileName>
          <FileFormat>sig</FileFormat>
          <FileChecksum>CAFEBABE</FileChecksum>
        </SignFile>
      </File>
      <File>
        <FileName>plan.docx</FileName>
        <FileFormat>docx</FileFormat>
        <FileChecksum>0BADF00D</FileChecksum>
      </File>
    </Document>
  </Documents>
</Package>
"""

MULTIPLE_SIGNATURES = """<Package>
  <Document>
    <DocName>Drawings</DocName>
    <File>
      <FileName>sheet.pdf</FileName>
      <FileChecksum>11111111</FileChecksum>
      <SignFile><FileName>a_sheet.pdf.sig</FileName><FileChecksum>22222222</FileChecksum></SignFile>
      <SignFile><FileName>b_sheet.pdf.sig</FileName><FileChecksum>33333333</FileChecksum></SignFile>
    </File>
    <File>
      <FileName>table.xlsx</FileName>
      <FileChecksum>44444444</FileChecksum>
      <SignFiles>
        <SignFile><FileName>table.xlsx.sig</FileName><FileChecksum>55555555</FileChecksum></SignFile>
        <SignFile><FileName>x_table.xlsx.sig</FileName><FileChecksum>66666666</FileChecksum></SignFile>
      </SignFiles>
    </File>
  </Document>
  <Document>
    <DocName>Empty</DocName>
  </Document>
</Package>
"""


class TestParseManifest:
    """Test parse_manifest."""

    def test_document_fields(self) -> None:
        documents = parse_manifest(SINGLE_SIGNATURE)

        assert len(documents) == 1
        document = documents[0]
        assert document.doc_type == "01"
        assert document.name == "Explanatory note"
        assert document.number == "EN-1"
        assert document.date == "2024-03-01"
        assert document.issue_author == "Design bureau"

    def test_single_signature_is_list_of_one(self) -> None:
        """The old single-signature form decodes to a one-element tuple."""
        note, plan = parse_manifest(SINGLE_SIGNATURE)[0].files

        assert note.filename == "note.pdf"
        assert note.file_format == "pdf"
        assert note.checksum == "DEADBEEF"
        assert note.signatures == (
            DeclaredSignature(filename="note.pdf.sig", checksum="CAFEBABE", file_format="sig"),
        )
        assert plan.signatures == ()

    def test_repeated_sign_file_elements(self) -> None:
        sheet = parse_manifest(MULTIPLE_SIGNATURES)[0].files[0]

        assert [sig.filename for sig in sheet.signatures] == ["a_sheet.pdf.sig", "b_sheet.pdf.sig"]

    def test_sign_files_wrapper(self) -> None:
        table = parse_manifest(MULTIPLE_SIGNATURES)[0].files[1]

        assert [sig.checksum for sig in table.signatures] == ["55555555", "66666666"]

    def test_missing_fields_are_empty(self) -> None:
        documents = parse_manifest(MULTIPLE_SIGNATURES)

        assert documents[0].doc_type == ""
        assert documents[0].files[0].file_format == ""
        assert documents[1].files == ()

    def test_whitespace_is_stripped(self) -> None:
        text = "<Document><File><FileName>\n  a.pdf  \n</FileName></File></Document>"

        assert parse_manifest(text)[0].files[0].filename == "a.pdf"

    def test_root_document(self) -> None:
        """A bare Document root is accepted."""
        assert len(parse_manifest("<Document><DocName>x</DocName></Document>")) == 1

    def test_no_documents(self) -> None:
        assert parse_manifest("<Package/>") == []

    def test_malformed_xml(self) -> None:
        with pytest.raises(ManifestError, match="Malformed manifest"):
            parse_manifest("<Package><Document></Package>")


class TestLoadManifest:
    """Test load_manifest."""

    def test_load_from_file(self, tmp_path: Path) -> None:
        manifest = tmp_path / "manifest.xml"
        manifest.write_text(SINGLE_SIGNATURE, encoding="utf-8")

        documents = load_manifest(manifest)

        assert [f.filename for f in documents[0].files] == ["note.pdf", "plan.docx"]

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ManifestError, match="Unable to read manifest"):
            load_manifest(tmp_path / "absent.xml")

    def test_malformed_file(self, tmp_path: Path) -> None:
        manifest = tmp_path / "broken.xml"
        manifest.write_text("<Package>", encoding="utf-8")

        with pytest.raises(ManifestError) as excinfo:
            load_manifest(manifest)

        assert excinfo.value.__cause__ is not None

    def test_unreadable_file(self, tmp_path: Path) -> None:
        manifest = tmp_path / "manifest.xml"
        manifest.write_text(SINGLE_SIGNATURE, encoding="utf-8")

        with patch(
            "sigcheck.ingestion.manifest_loader.ET.parse",
            side_effect=PermissionError("denied"),
        ):
            with pytest.raises(ManifestError, match="Unable to read manifest"):
                load_manifest(manifest)
