"""Plugin version resolution.

The version is resolved once per run from the first source that yields a
non-empty value:

    1. the manifest's ``version`` field (``package.json``),
    2. a ``Version:`` line in the plugin header file, primary path first,
    3. the configured fallback constant.

Resolution never fails: unreadable or malformed sources are logged and
skipped.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from wppack.models.config import BuildConfig, VersionSource

logger = logging.getLogger(__name__)

# Matches header lines such as " * Version: 11.5.1" or "Version:   2.3.0  ".
_HEADER_VERSION = re.compile(r"^[\s*#/@]*Version:[ \t]*(\S.*?)[ \t]*$", re.MULTILINE)


class ResolvedVersion(BaseModel):
    """A version string together with the source it came from."""

    model_config = ConfigDict(frozen=True)

    version: str
    source: VersionSource
    origin: str = ""  # file the value was read from, if any

    def __str__(self) -> str:
        return self.version


def read_manifest_version(manifest: Path) -> str | None:
    """Return the non-empty ``version`` field of a JSON manifest, else None."""
    if not manifest.is_file():
        return None
    try:
        data = json.loads(manifest.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.warning("Could not read manifest %s: %s", manifest, exc)
        return None
    if not isinstance(data, dict):
        return None
    value = data.get("version")
    if not isinstance(value, str):
        return None
    return value.strip() or None


def read_header_version(header: Path) -> str | None:
    """Return the first ``Version:`` value declared in a plugin header file."""
    if not header.is_file():
        return None
    try:
        text = header.read_text(encoding="utf-8", errors="ignore")
    except OSError as exc:
        logger.warning("Could not read plugin header %s: %s", header, exc)
        return None
    match = _HEADER_VERSION.search(text)
    if not match:
        return None
    return match.group(1).strip() or None


def resolve_version(project_root: Path, config: BuildConfig | None = None) -> ResolvedVersion:
    """Resolve the plugin version for *project_root*.

    An empty manifest field is treated as absent and falls through to the
    header files.
    """
    config = config or BuildConfig()

    manifest = project_root / config.manifest_file
    version = read_manifest_version(manifest)
    if version:
        logger.debug("Version %s read from manifest %s", version, manifest)
        return ResolvedVersion(
            version=version, source=VersionSource.MANIFEST, origin=str(manifest)
        )

    for candidate in config.header_candidates:
        header = project_root / candidate
        version = read_header_version(header)
        if version:
            logger.debug("Version %s read from plugin header %s", version, header)
            return ResolvedVersion(
                version=version, source=VersionSource.HEADER, origin=str(header)
            )

    logger.warning(
        "No version found in %s or plugin header; using fallback %s",
        config.manifest_file,
        config.fallback_version,
    )
    return ResolvedVersion(version=config.fallback_version, source=VersionSource.FALLBACK)
