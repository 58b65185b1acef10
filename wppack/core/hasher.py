"""Deterministic hashing helpers for artifact checksums and build listings."""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any

_CHUNK_SIZE = 1024 * 1024


def canonical_json_bytes(obj: Any) -> bytes:
    """Produce canonical JSON bytes — deterministic, sorted, compact."""
    return json.dumps(
        obj, sort_keys=True, separators=(",", ":"), ensure_ascii=True
    ).encode("utf-8")


def sha256_hex(data: bytes) -> str:
    """Return the SHA-256 hex digest of raw bytes."""
    return hashlib.sha256(data).hexdigest()


def file_sha256(path: Path) -> str:
    """SHA-256 hex digest of a file's contents, streamed in chunks."""
    digest = hashlib.sha256()
    with path.open("rb") as fp:
        for chunk in iter(lambda: fp.read(_CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()


def tree_listing(root: Path) -> list[str]:
    """Sorted POSIX-style relative paths of every file under *root*.

    Returns an empty list when *root* does not exist.
    """
    if not root.is_dir():
        return []
    return sorted(
        p.relative_to(root).as_posix() for p in root.rglob("*") if p.is_file()
    )


def listing_hash(listing: list[str]) -> str:
    """SHA-256 of canonical(sorted listing).

    Two runs over an unchanged source tree must produce the same value.
    """
    return sha256_hex(canonical_json_bytes(sorted(listing)))
