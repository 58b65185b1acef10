"""Direct ZIP archive creation.

Archives always nest their contents under a single top-level folder named
after the plugin's distribution slug, so extracting one yields a directory
that can be dropped into ``wp-content/plugins`` without renaming.
"""

from __future__ import annotations

import fnmatch
import logging
import os
import zipfile
from collections.abc import Iterator, Sequence
from pathlib import Path, PurePosixPath

logger = logging.getLogger(__name__)


class ArchiveError(RuntimeError):
    """Raised when an archive cannot be produced or inspected."""


def is_excluded(relative: PurePosixPath, patterns: Sequence[str]) -> bool:
    """Whether *relative* matches any exclusion glob.

    A pattern without ``/`` is matched against every path component
    (``.git`` excludes that directory at any depth, ``*.zip`` any zip file).
    A pattern containing ``/`` is matched against the full relative path and
    each of its ancestors (``build/**``, ``assets/*.map``). A leading ``/``
    anchors a plain name at the root: ``/build`` excludes the top-level
    ``build`` directory but keeps ``src/blocks/build``.
    """
    parts = relative.parts
    for pattern in patterns:
        pattern = pattern.strip()
        anchored = pattern.startswith("/")
        pattern = pattern.strip("/")
        if not pattern:
            continue
        if not anchored and "/" not in pattern:
            if any(fnmatch.fnmatchcase(part, pattern) for part in parts):
                return True
            continue
        for depth in range(1, len(parts) + 1):
            if fnmatch.fnmatchcase("/".join(parts[:depth]), pattern):
                return True
    return False


def iter_archive_members(
    source: Path,
    excludes: Sequence[str] = (),
    skip: Sequence[Path] = (),
) -> Iterator[tuple[Path, PurePosixPath]]:
    """Yield ``(absolute, relative)`` file pairs under *source*, sorted.

    Excluded directories are pruned without descending into them.
    """
    skip_resolved = {p.resolve() for p in skip}
    for root, dirs, files in os.walk(source):
        root_path = Path(root)
        rel_root = PurePosixPath(root_path.relative_to(source).as_posix())
        dirs[:] = sorted(
            d for d in dirs
            if not is_excluded(_join(rel_root, d), excludes)
        )
        for name in sorted(files):
            relative = _join(rel_root, name)
            path = root_path / name
            if is_excluded(relative, excludes) or path.resolve() in skip_resolved:
                continue
            yield path, relative


def _join(root: PurePosixPath, name: str) -> PurePosixPath:
    return PurePosixPath(name) if str(root) == "." else root / name


def build_archive(
    source: Path,
    destination: Path,
    top_level_folder: str,
    excludes: Sequence[str] = (),
) -> Path:
    """Zip *source* into *destination* under ``top_level_folder/``.

    The archive is written to a temporary sibling file first and moved into
    place, so an interrupted run never leaves a truncated archive behind.
    An existing archive at *destination* is overwritten.
    """
    if not source.is_dir():
        raise ArchiveError(f"archive source is not a directory: {source}")
    if not top_level_folder or "/" in top_level_folder:
        raise ArchiveError(f"invalid top-level folder name: {top_level_folder!r}")

    destination.parent.mkdir(parents=True, exist_ok=True)
    partial = destination.with_name(destination.name + ".partial")

    count = 0
    try:
        with zipfile.ZipFile(partial, "w", compression=zipfile.ZIP_DEFLATED, compresslevel=9) as zf:
            for path, relative in iter_archive_members(
                source, excludes, skip=[destination, partial]
            ):
                zf.write(path, arcname=f"{top_level_folder}/{relative.as_posix()}")
                count += 1
        os.replace(partial, destination)
    except OSError as exc:
        partial.unlink(missing_ok=True)
        raise ArchiveError(f"failed to write {destination}: {exc}") from exc

    logger.info("Wrote %s (%d files under %s/)", destination, count, top_level_folder)
    return destination


def archive_top_level_folders(archive: Path) -> set[str]:
    """Return the set of first path components of every entry in *archive*.

    A conventional plugin archive yields exactly ``{slug}``.
    """
    try:
        with zipfile.ZipFile(archive) as zf:
            names = zf.namelist()
    except (OSError, zipfile.BadZipFile) as exc:
        raise ArchiveError(f"cannot read archive {archive}: {exc}") from exc
    return {name.split("/", 1)[0] for name in names if name}


def has_distribution_layout(archive: Path, top_level_folder: str) -> bool:
    """Whether every entry of *archive* sits under ``top_level_folder/``."""
    folders = archive_top_level_folders(archive)
    return folders == {top_level_folder}
