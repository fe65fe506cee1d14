"""Directory indexing."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict, Iterator, List, Tuple

from sigcheck.config import SIGNATURE_SUFFIX
from sigcheck.utils.files import is_signature_name, strip_signature_suffix

LOGGER = logging.getLogger(__name__)


def _key(name: str) -> str:
    return name.casefold()


def signature_keys(name: str, suffix: str = SIGNATURE_SUFFIX) -> List[str]:
    """Base names a signature file is registered under.

    ``report.pdf.sig`` is registered under ``report.pdf``; a name following
    the ``<prefix>_<basefile>.sig`` convention is also registered under the
    part after the last underscore.
    """
    if not is_signature_name(name, suffix):
        return []
    keys = [strip_signature_suffix(name, suffix)]
    underscore = name.rfind("_")
    if underscore > 0:
        alternative = strip_signature_suffix(name[underscore + 1 :], suffix)
        if alternative and alternative not in keys:
            keys.append(alternative)
    return [key for key in keys if key]


class DirectoryIndex:
    """Case-insensitive basename index of a directory tree.

    Basenames that recur in several subdirectories resolve to the path
    visited last; walk order depends on the filesystem.
    """

    def __init__(self, root: Path, *, signature_suffix: str = SIGNATURE_SUFFIX) -> None:
        self.root = Path(root)
        self.signature_suffix = signature_suffix
        self._files: Dict[str, Path] = {}
        self._signatures: Dict[str, List[Path]] = {}
        self._signature_paths: List[Path] = []

    def __len__(self) -> int:
        return len(self._files)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and _key(name) in self._files

    def add(self, path: Path) -> None:
        key = _key(path.name)
        previous = self._files.get(key)
        if previous is not None and previous != path:
            LOGGER.debug("Basename collision for %s: %s replaces %s", path.name, path, previous)
        self._files[key] = path

    def find(self, name: str) -> Path | None:
        return self._files.get(_key(name))

    def paths(self) -> List[Path]:
        return list(self._files.values())

    def items(self) -> Iterator[Tuple[str, Path]]:
        for path in self._files.values():
            yield path.name, path

    def signature_paths(self) -> List[Path]:
        """All indexed signature files, in discovery order.

        Filled by :meth:`build_signature_index`.
        """
        return list(self._signature_paths)

    def signatures_for(self, name: str) -> List[Path]:
        return list(self._signatures.get(_key(name), ()))

    def signature_items(self) -> Iterator[Tuple[str, List[Path]]]:
        for key, paths in self._signatures.items():
            yield key, list(paths)

    def build_signature_index(self) -> None:
        self._signatures.clear()
        self._signature_paths = [
            path for path in self._files.values() if is_signature_name(path.name, self.signature_suffix)
        ]
        for path in self._signature_paths:
            for key in signature_keys(path.name, self.signature_suffix):
                bucket = self._signatures.setdefault(_key(key), [])
                if path not in bucket:
                    bucket.append(path)


def build_index(root: Path, *, signature_suffix: str = SIGNATURE_SUFFIX) -> DirectoryIndex:
    """Walk ``root`` once and index every file below it.

    Unreadable subtrees are logged and skipped, leaving a partial index.
    """
    root = Path(root).absolute()
    index = DirectoryIndex(root, signature_suffix=signature_suffix)

    def _on_error(exc: OSError) -> None:
        LOGGER.warning("Skipping unreadable path %s: %s", exc.filename, exc.strerror or exc)

    for dirpath, _dirnames, filenames in os.walk(root, onerror=_on_error):
        for filename in filenames:
            index.add(Path(dirpath) / filename)

    index.build_signature_index()
    LOGGER.info(
        "Indexed %d files (%d signatures) under %s",
        len(index),
        len(index.signature_paths()),
        root,
    )
    return index
