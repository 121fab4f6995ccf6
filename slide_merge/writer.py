#!/usr/bin/env python3
"""
PowerPoint writer used by the assembly engine.

Wraps python-pptx behind a page-oriented API: every page is a blank 16:9
slide on which images and text are placed in inch coordinates.
"""

import io
import logging
from dataclasses import dataclass
from typing import Optional

from PIL import Image
from pptx import Presentation
from pptx.dml.color import RGBColor
from pptx.enum.text import PP_ALIGN
from pptx.util import Inches, Pt

logger = logging.getLogger(__name__)

PPTX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.presentationml.presentation"

BLANK_LAYOUT = 6

# Formats python-pptx can embed as-is; everything else is transcoded.
_EMBEDDABLE_FORMATS = {"PNG", "JPEG", "GIF", "BMP", "TIFF"}
# Multi-frame camera JPEGs; the first frame is kept as a plain JPEG.
_JPEG_FAMILY = {"MPO"}

_ALIGNMENTS = {
    "left": PP_ALIGN.LEFT,
    "center": PP_ALIGN.CENTER,
    "right": PP_ALIGN.RIGHT,
}


@dataclass(frozen=True)
class TextStyle:
    font_size: float = 18
    color: str = "666666"
    font_face: str = "Arial"
    align: str = "center"


def _embeddable(data: bytes) -> bytes:
    """Return *data*, or a re-encoding if python-pptx cannot embed its format."""
    buf = io.BytesIO()
    with Image.open(io.BytesIO(data)) as img:
        if img.format in _EMBEDDABLE_FORMATS:
            return data
        if img.format in _JPEG_FAMILY:
            logger.debug("Re-encoding first frame of %s image as JPEG", img.format)
            img.seek(0)
            img.convert("RGB").save(buf, format="JPEG", quality=95)
            return buf.getvalue()
        logger.debug("Transcoding %s image to PNG for embedding", img.format)
        converted = img.convert("RGBA")
    converted.save(buf, format="PNG")
    return buf.getvalue()


class WriterPage:
    """One output slide."""

    def __init__(self, slide):
        self._slide = slide

    def set_background(self, color: str) -> None:
        fill = self._slide.background.fill
        fill.solid()
        fill.fore_color.rgb = RGBColor.from_string(color.lstrip("#").upper())

    def place_image(self, data: bytes, x: float, y: float, w: float, h: float) -> None:
        self._slide.shapes.add_picture(
            io.BytesIO(_embeddable(data)), Inches(x), Inches(y), width=Inches(w), height=Inches(h)
        )

    def place_text(self, text: str, x: float, y: float, w: float, h: float,
                   style: Optional[TextStyle] = None) -> None:
        style = style or TextStyle()
        textbox = self._slide.shapes.add_textbox(Inches(x), Inches(y), Inches(w), Inches(h))
        text_frame = textbox.text_frame
        text_frame.word_wrap = True
        paragraph = text_frame.paragraphs[0]
        paragraph.alignment = _ALIGNMENTS.get(style.align, PP_ALIGN.LEFT)
        run = paragraph.add_run()
        run.text = text
        run.font.size = Pt(style.font_size)
        run.font.name = style.font_face
        run.font.color.rgb = RGBColor.from_string(style.color.lstrip("#").upper())

    def add_annotation(self, text: str) -> None:
        """Store *text* in the slide's speaker notes."""
        self._slide.notes_slide.notes_text_frame.text = text


class PresentationWriter:
    """
    Builds a single presentation in memory.
    """

    def __init__(self, width: float = 10.0, height: float = 5.625,
                 author: str = "", title: str = ""):
        self._prs = Presentation()
        self._prs.slide_width = Inches(width)
        self._prs.slide_height = Inches(height)
        if author:
            self._prs.core_properties.author = author
        if title:
            self._prs.core_properties.title = title

    @property
    def page_count(self) -> int:
        return len(self._prs.slides)

    def add_page(self) -> WriterPage:
        slide = self._prs.slides.add_slide(self._prs.slide_layouts[BLANK_LAYOUT])
        return WriterPage(slide)

    def serialize(self) -> bytes:
        buf = io.BytesIO()
        self._prs.save(buf)
        return buf.getvalue()
