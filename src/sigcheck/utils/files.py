"""Utility helpers for working with files."""

from __future__ import annotations

import logging
import zlib
from pathlib import Path

from sigcheck.config import SIGNATURE_SUFFIX

LOGGER = logging.getLogger(__name__)

CHUNK_SIZE = 8192


def compute_crc32(path: Path, *, chunk_size: int = CHUNK_SIZE) -> str:
    """Compute the CRC-32 of a file as 8 uppercase hex digits.

    Returns an empty string when the file cannot be read; an empty digest
    never matches anything in :func:`checksums_match`.
    """
    crc = 0
    try:
        with Path(path).open("rb") as handle:
            for chunk in iter(lambda: handle.read(chunk_size), b""):
                crc = zlib.crc32(chunk, crc)
    except OSError as exc:
        LOGGER.debug("Unable to checksum %s: %s", path, exc)
        return ""
    return f"{crc & 0xFFFFFFFF:08X}"


def checksums_match(declared: str, actual: str) -> bool:
    """Case-insensitive digest comparison; empty digests never match."""
    if not declared or not actual:
        return False
    return declared.strip().casefold() == actual.strip().casefold()


def is_signature_name(name: str, suffix: str = SIGNATURE_SUFFIX) -> bool:
    return name.casefold().endswith(suffix.casefold())


def strip_signature_suffix(name: str, suffix: str = SIGNATURE_SUFFIX) -> str:
    if is_signature_name(name, suffix):
        return name[: len(name) - len(suffix)]
    return name
