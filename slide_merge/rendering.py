#!/usr/bin/env python3
"""
PyMuPDF-backed rendering engine for paginated documents.

The decoder only talks to the small surface defined here (open a document,
count and fetch pages, render a page onto a Pillow surface, release it), so
tests can substitute a fake engine without touching PDF files.
"""

import logging
from typing import Tuple

import fitz
from PIL import Image

logger = logging.getLogger(__name__)


class DocumentOpenError(RuntimeError):
    """Raised when the engine cannot parse a document."""


class RenderPage:
    """One loaded page.  Call :meth:`release` once it has been rendered."""

    def __init__(self, page: "fitz.Page"):
        self._page = page

    def native_size(self) -> Tuple[float, float]:
        """Page size at scale 1.0, in PDF points."""
        rect = self._page.rect
        return rect.width, rect.height

    def render(self, surface: Image.Image, scale: float) -> None:
        """Draw the page at *scale* over *surface* (which keeps its background)."""
        if self._page is None:
            raise RuntimeError("Page has already been released")
        pix = self._page.get_pixmap(matrix=fitz.Matrix(scale, scale), alpha=True)
        mode = "RGBA" if pix.n == 4 else "RGB"
        layer = Image.frombytes(mode, (pix.width, pix.height), pix.samples)
        # Pixmap sizes are rounded by MuPDF; stretch by at most a pixel to match
        if layer.size != surface.size:
            layer = layer.resize(surface.size, Image.LANCZOS)
        if mode == "RGBA":
            surface.paste(layer, (0, 0), layer)
        else:
            surface.paste(layer, (0, 0))

    def release(self) -> None:
        self._page = None


class DocumentHandle:
    """An open document."""

    def __init__(self, document: "fitz.Document"):
        self._document = document

    @property
    def page_count(self) -> int:
        return self._document.page_count

    def get_page(self, index: int) -> RenderPage:
        return RenderPage(self._document.load_page(index))

    def close(self) -> None:
        self._document.close()


class PyMuPDFEngine:
    """Opens PDF bytes with PyMuPDF."""

    filetype = "pdf"

    def open(self, data: bytes) -> DocumentHandle:
        try:
            document = fitz.open(stream=data, filetype=self.filetype)
        except (RuntimeError, ValueError) as e:
            raise DocumentOpenError(f"Could not open document: {e}") from e
        if document.needs_pass:
            document.close()
            raise DocumentOpenError("Document is encrypted")
        logger.debug("Opened document with %d pages", document.page_count)
        return DocumentHandle(document)
