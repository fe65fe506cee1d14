"""Finding texts attached to check results.

Each line starts with a glyph naming the kind of finding: ``✓`` ok,
``⚠`` needs attention, ``✗`` missing, ``ℹ`` informational. Continuation
lines are indented with ``•`` (list item) or ``→`` (required action).
"""

from __future__ import annotations

from typing import List, Sequence

OK = "✓"
WARN = "⚠"
FAIL = "✗"
INFO = "ℹ"


def file_matches(name: str) -> str:
    return f"{OK} File '{name}' found, checksum matches"


def file_checksum_differs(name: str) -> str:
    return f"{WARN} File '{name}' found but checksum differs; the file may have been modified"


def file_renamed(name: str, actual_name: str) -> str:
    return (
        f"{WARN} File found by checksum under a different name '{actual_name}'; "
        f"the manifest entry '{name}' should be updated to the new filename"
    )


def file_missing(name: str) -> List[str]:
    return [
        f"{FAIL} File '{name}' is declared in the manifest but absent from the directory",
        f"{WARN} Either remove the entry from the manifest or add the missing file to the directory",
    ]


def signature_matches(name: str) -> str:
    return f"{OK} Signature '{name}' found and matches"


def signature_checksum_differs(name: str) -> str:
    return f"{WARN} Signature '{name}' found but checksum differs"


def signature_renamed(actual_name: str, file_name: str) -> str:
    return (
        f"{WARN} Signature found by checksum under a different name '{actual_name}'; "
        f"the manifest signature for '{file_name}' should be updated"
    )


def signature_missing(name: str) -> str:
    return f"{FAIL} Signature '{name}' not found"


def _bullets(names: Sequence[str]) -> List[str]:
    return [f"  • {name}" for name in names]


def undeclared_signatures(names: Sequence[str], *, has_declared: bool) -> List[str]:
    """Lines reporting signature files beside a declared file that the manifest omits."""
    if has_declared:
        if len(names) == 1:
            return [
                f"{WARN} Additional signature '{names[0]}' found in the directory but not declared in the manifest",
                "  → Add this signature to the manifest",
            ]
        return [
            f"{WARN} {len(names)} additional signatures found in the directory but not declared in the manifest:",
            *_bullets(names),
            "  → Add these signatures to the manifest",
        ]
    if len(names) == 1:
        return [
            f"{WARN} Signature '{names[0]}' found in the directory but not declared in the manifest",
            "  → Add the signature to the manifest",
        ]
    return [
        f"{WARN} {len(names)} signatures found in the directory but not declared in the manifest:",
        *_bullets(names),
        "  → Add the signatures to the manifest",
    ]


def unclaimed_file(name: str, signatures: Sequence[str]) -> List[str]:
    if len(signatures) == 1:
        return [
            f"{INFO} File '{name}' with signature '{signatures[0]}' is present in the directory "
            "but not referenced in the manifest; it should be added"
        ]
    return [
        f"{INFO} File '{name}' with {len(signatures)} signatures is present in the directory "
        "but not referenced in the manifest:",
        *_bullets(signatures),
        "  → Add the file and all of its signatures to the manifest",
    ]
