"""Archive artifact models (immutable once produced)."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict


class ArtifactKind(str, Enum):
    """The two distributable archive flavours."""

    PRODUCTION = "production"
    DEVELOPMENT = "development"


class Artifact(BaseModel):
    """A produced archive file.

    Artifacts are never mutated. A re-run overwrites the file on disk and
    produces a new ``Artifact`` describing it.
    """

    model_config = ConfigDict(frozen=True)

    path: Path
    kind: ArtifactKind
    version_tag: str
    size_bytes: int = 0
    sha256: str = ""
    top_level_folder: str = ""
    produced_by: str = "direct"  # "direct" or "task_runner"
