#!/usr/bin/env python3
"""Helpers for resolving where merged presentations are written.

A bare filename lands in the given output directory; any other path is used
as-is.  The ``.pptx`` extension is appended when missing.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .assembly import PresentationArtifact

logger = logging.getLogger(__name__)

__all__ = ["resolve_output_path", "save_artifact"]

DEFAULT_FILENAME = "merged-presentation.pptx"


def resolve_output_path(filename: str | Path, output_dir: str | Path | None = None) -> Path:
    """Return the absolute destination for *filename*, creating its directory."""
    name = str(filename) or DEFAULT_FILENAME
    if not name.lower().endswith(".pptx"):
        name = f"{name}.pptx"

    path = Path(name).expanduser()
    if not path.is_absolute() and len(path.parts) == 1 and output_dir is not None:
        path = Path(output_dir).expanduser() / path

    path = path.resolve()
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def save_artifact(
    artifact: PresentationArtifact,
    filename: str | Path = DEFAULT_FILENAME,
    output_dir: str | Path | None = None,
) -> Optional[Path]:
    """Write *artifact* to disk.

    Returns the written path, or ``None`` when the artifact is empty (i.e.
    assembly failed); nothing is written in that case.
    """
    if artifact.is_empty:
        logger.error("Refusing to save empty presentation artifact")
        return None

    path = resolve_output_path(filename, output_dir)
    path.write_bytes(artifact.data)
    logger.info("Presentation written to %s (%d bytes)", path, len(artifact))
    return path
