#!/usr/bin/env python3
"""
Assembly engine: serialises the selected slides into one PPTX artifact.

Assembly is all-or-nothing.  Any exception while building the deck yields an
empty artifact, which callers must treat as the failure signal.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

from .config import MergeConfig
from .environment import Environment
from .geometry import Placement, fit_to_canvas
from .models import PresentationGroup, Slide
from .placeholder import is_placeholder
from .writer import PPTX_MIME_TYPE, TextStyle

logger = logging.getLogger(__name__)

BACKGROUND_COLOR = "FFFFFF"
CAPTION_STYLE = TextStyle(font_size=18, color="666666", font_face="Arial", align="center")
# Caption box (x, y, w, h) in inches
CAPTION_BOX = (0.5, 2.5, 9.0, 0.6)


@dataclass(frozen=True)
class PresentationArtifact:
    """Serialised presentation.  Zero-length ``data`` means assembly failed."""
    data: bytes = b""
    mime_type: str = PPTX_MIME_TYPE

    def __len__(self) -> int:
        return len(self.data)

    @property
    def is_empty(self) -> bool:
        return not self.data


def flatten_selected_groups(groups: Iterable[PresentationGroup]) -> List[Slide]:
    """Slides of every selected group, in group order.

    Group selection gates all of its slides; per-slide flags are not consulted.
    """
    slides: List[Slide] = []
    for group in groups:
        if group.selected:
            slides.extend(group.slides)
    return slides


def provenance_note(slide: Slide) -> str:
    note = f"Created with slidemerge\n\nSource: {slide.source_file}"
    if slide.kind.is_paginated:
        note += f" (Page {slide.page_number})"
    return note


class AssemblyEngine:
    """
    Builds the output presentation through the environment's writer.
    """

    def __init__(self, environment: Optional[Environment] = None,
                 config: Optional[MergeConfig] = None):
        self.environment = environment or Environment.default()
        self.config = config or MergeConfig()

    async def merge_slides(self, slides: Iterable[Slide]) -> PresentationArtifact:
        """Assemble every slide whose ``selected`` flag is set."""
        selected = [slide for slide in slides if slide.selected]
        return await self._assemble(selected)

    async def merge_presentations(self, groups: Iterable[PresentationGroup]) -> PresentationArtifact:
        """Assemble all slides of the selected groups."""
        return await self._assemble(flatten_selected_groups(groups))

    async def _assemble(self, slides: List[Slide]) -> PresentationArtifact:
        if not self.environment.can_write_presentations:
            logger.warning("Attempted to merge slides in a non-interactive environment")
            return PresentationArtifact()

        logger.info("Assembling %d slides", len(slides))
        try:
            data = await asyncio.to_thread(self._build, slides)
        except Exception:
            logger.exception("Error generating PPTX")
            return PresentationArtifact()
        return PresentationArtifact(data)

    def placement_for(self, slide: Slide) -> Placement:
        """Where the slide's full image goes on the output canvas, in inches."""
        cfg = self.config
        if slide.dimensions is None:
            return Placement.full_bleed(cfg.slide_width, cfg.slide_height)
        return fit_to_canvas(cfg.slide_width, cfg.slide_height,
                             slide.dimensions.width, slide.dimensions.height)

    def _build(self, slides: List[Slide]) -> bytes:
        cfg = self.config
        writer = self.environment.writer_factory(
            width=cfg.slide_width, height=cfg.slide_height, author=cfg.author, title=cfg.title
        )

        for slide in slides:
            page = writer.add_page()
            page.add_annotation(provenance_note(slide))
            page.set_background(BACKGROUND_COLOR)

            if slide.full_image and not is_placeholder(slide.full_image):
                p = self.placement_for(slide)
                page.place_image(slide.full_image, p.x, p.y, p.w, p.h)
            else:
                page.place_text(
                    f'Content from "{slide.source_file}" could not be loaded',
                    *CAPTION_BOX, CAPTION_STYLE,
                )

        return writer.serialize()
