"""Tests for directory indexing."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

from sigcheck.index.indexer import DirectoryIndex, build_index, signature_keys


class TestSignatureKeys:
    """Test signature_keys helper."""

    def test_plain_signature(self) -> None:
        assert signature_keys("report.pdf.sig") == ["report.pdf"]

    def test_prefixed_signature(self) -> None:
        """The part after the last underscore is also a key."""
        assert signature_keys("ivanov_report.pdf.sig") == ["ivanov_report.pdf", "report.pdf"]

    def test_last_underscore_wins(self) -> None:
        assert signature_keys("a_b_report.pdf.sig") == ["a_b_report.pdf", "report.pdf"]

    def test_leading_underscore_ignored(self) -> None:
        assert signature_keys("_report.pdf.sig") == ["_report.pdf"]

    def test_not_a_signature(self) -> None:
        assert signature_keys("report.pdf") == []

    def test_empty_alternative_skipped(self) -> None:
        assert signature_keys("report_.sig") == ["report_"]


class TestBuildIndex:
    """Test build_index."""

    def test_indexes_all_files_recursively(self, tmp_path: Path) -> None:
        (tmp_path / "a.pdf").write_bytes(b"a")
        nested = tmp_path / "sub" / "deeper"
        nested.mkdir(parents=True)
        (nested / "b.txt").write_bytes(b"b")

        index = build_index(tmp_path)

        assert len(index) == 2
        assert index.find("a.pdf") == tmp_path / "a.pdf"
        assert index.find("b.txt") == nested / "b.txt"

    def test_lookup_is_case_insensitive(self, tmp_path: Path) -> None:
        (tmp_path / "Report.PDF").write_bytes(b"x")

        index = build_index(tmp_path)

        assert index.find("report.pdf") == tmp_path / "Report.PDF"
        assert "REPORT.pdf" in index
        assert "other.pdf" not in index

    def test_missing_name(self, tmp_path: Path) -> None:
        assert build_index(tmp_path).find("absent.pdf") is None

    def test_paths_are_absolute(self, tmp_path: Path) -> None:
        (tmp_path / "a.pdf").write_bytes(b"a")

        index = build_index(tmp_path)

        assert all(path.is_absolute() for path in index.paths())

    def test_collision_keeps_single_entry(self, tmp_path: Path) -> None:
        """A recurring basename resolves to one of its paths."""
        for sub in ("one", "two"):
            (tmp_path / sub).mkdir()
            (tmp_path / sub / "same.pdf").write_bytes(sub.encode())

        index = build_index(tmp_path)

        assert len(index) == 1
        assert index.find("same.pdf") in {tmp_path / "one" / "same.pdf", tmp_path / "two" / "same.pdf"}

    def test_signature_index(self, tmp_path: Path) -> None:
        (tmp_path / "report.pdf").write_bytes(b"r")
        (tmp_path / "report.pdf.sig").write_bytes(b"s1")
        (tmp_path / "petrov_report.pdf.sig").write_bytes(b"s2")

        index = build_index(tmp_path)

        found = {path.name for path in index.signatures_for("REPORT.pdf")}
        assert found == {"report.pdf.sig", "petrov_report.pdf.sig"}
        assert {path.name for path in index.signature_paths()} == {
            "report.pdf.sig",
            "petrov_report.pdf.sig",
        }

    def test_signatures_for_unknown(self, tmp_path: Path) -> None:
        assert build_index(tmp_path).signatures_for("nothing.pdf") == []

    def test_walk_errors_are_swallowed(self, tmp_path: Path) -> None:
        """Unreadable subtrees leave a partial index."""
        good = tmp_path / "good.pdf"
        good.write_bytes(b"g")

        def fake_walk(root, onerror=None):
            onerror(PermissionError(13, "Permission denied", str(tmp_path / "locked")))
            yield str(tmp_path), [], ["good.pdf"]

        with patch("sigcheck.index.indexer.os.walk", side_effect=fake_walk):
            index = build_index(tmp_path)

        assert index.find("good.pdf") == good


class TestDirectoryIndex:
    """Test DirectoryIndex directly."""

    def test_add_overwrites_on_collision(self, tmp_path: Path) -> None:
        """The path added last wins."""
        index = DirectoryIndex(tmp_path)
        first = tmp_path / "a" / "x.pdf"
        second = tmp_path / "b" / "X.pdf"

        index.add(first)
        index.add(second)

        assert len(index) == 1
        assert index.find("x.pdf") == second

    def test_items_yield_names(self, tmp_path: Path) -> None:
        index = DirectoryIndex(tmp_path)
        index.add(tmp_path / "a.pdf")

        assert list(index.items()) == [("a.pdf", tmp_path / "a.pdf")]

    def test_build_signature_index_deduplicates(self, tmp_path: Path) -> None:
        index = DirectoryIndex(tmp_path)
        index.add(tmp_path / "a.pdf.sig")

        index.build_signature_index()
        index.build_signature_index()

        assert index.signatures_for("a.pdf") == [tmp_path / "a.pdf.sig"]

    def test_signature_items(self, tmp_path: Path) -> None:
        """Both key forms are listed with their signature paths."""
        index = DirectoryIndex(tmp_path)
        index.add(tmp_path / "report.pdf")
        index.add(tmp_path / "ivanov_report.pdf.sig")

        index.build_signature_index()

        assert dict(index.signature_items()) == {
            "ivanov_report.pdf": [tmp_path / "ivanov_report.pdf.sig"],
            "report.pdf": [tmp_path / "ivanov_report.pdf.sig"],
        }

    def test_signature_items_are_copies(self, tmp_path: Path) -> None:
        index = DirectoryIndex(tmp_path)
        index.add(tmp_path / "a.pdf.sig")
        index.build_signature_index()

        for _key, paths in index.signature_items():
            paths.clear()

        assert index.signatures_for("a.pdf") == [tmp_path / "a.pdf.sig"]

    def test_signature_paths_built_once(self, tmp_path: Path) -> None:
        """Signature paths are collected by build_signature_index, not per call."""
        index = DirectoryIndex(tmp_path)
        index.add(tmp_path / "a.pdf")
        index.add(tmp_path / "a.pdf.sig")
        index.build_signature_index()

        with patch("sigcheck.index.indexer.is_signature_name") as mock_is_sig:
            first = index.signature_paths()
            second = index.signature_paths()

        mock_is_sig.assert_not_called()
        assert first == second == [tmp_path / "a.pdf.sig"]
        first.clear()
        assert index.signature_paths() == [tmp_path / "a.pdf.sig"]
