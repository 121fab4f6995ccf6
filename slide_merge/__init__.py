"""Slide Merge

Turns PDF pages and raster images into individually selectable slides and
writes the chosen ones out as one 16:9 PPTX deck.

Importing the package configures root logging once (unless the host already
installed handlers).  The level comes from `SLIDEMERGE_LOG_LEVEL` and
defaults to INFO; modules log through `logging.getLogger(__name__)`.
"""

from __future__ import annotations

import logging
import os

# ------------------------------------------------------------------
# Default logging – honour env var, otherwise INFO.
# ------------------------------------------------------------------
LOG_LEVEL = os.getenv("SLIDEMERGE_LOG_LEVEL", "INFO").upper()
if not logging.getLogger().handlers:
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

# Public API re-exports ------------------------------------------------
from .assembly import AssemblyEngine, PresentationArtifact  # noqa: E402  (import after logger)
from .config import MergeConfig  # noqa: E402
from .environment import Environment  # noqa: E402
from .geometry import Placement, fit_to_canvas  # noqa: E402
from .merger import SlideMerger  # noqa: E402
from .models import Dimensions, PresentationGroup, Slide, SlideKind  # noqa: E402
from .processor import FileProcessor, SourceFile  # noqa: E402
from .storage import SlideStore  # noqa: E402

__all__ = [
    "AssemblyEngine",
    "Dimensions",
    "Environment",
    "FileProcessor",
    "MergeConfig",
    "Placement",
    "PresentationArtifact",
    "PresentationGroup",
    "Slide",
    "SlideKind",
    "SlideMerger",
    "SlideStore",
    "SourceFile",
    "fit_to_canvas",
]
