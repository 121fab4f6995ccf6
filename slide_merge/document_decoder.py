#!/usr/bin/env python3
"""
Turns one paginated document into a list of slides.

Each page is rendered twice: a small thumbnail at a fixed scale, and a
full-resolution image sized to fill a 16:9 canvas without distortion.  A page
that fails to render is replaced by a placeholder slide; a document that
cannot be opened (or takes too long to open) is replaced by a fixed number of
placeholder slides.  Neither failure is raised to the caller.
"""

import asyncio
import io
import logging
from typing import List, Optional

from PIL import Image

from .config import MergeConfig
from .geometry import fit_to_canvas
from .models import Dimensions, Slide, SlideKind
from .observer import CompletionEvent, ProcessingObserver, ProgressEvent
from .placeholder import placeholder_slide, placeholder_slides

logger = logging.getLogger(__name__)


def encode_jpeg(image: Image.Image, quality: int) -> bytes:
    """Encode a Pillow image as JPEG bytes."""
    buf = io.BytesIO()
    image.convert("RGB").save(buf, format="JPEG", quality=quality)
    return buf.getvalue()


def _close_late_handle(opening: "asyncio.Future") -> None:
    """Close a document whose open finished after the caller gave up on it."""
    if opening.cancelled() or opening.exception() is not None:
        return
    logger.debug("Closing document that opened after the timeout")
    opening.result().close()


class DocumentDecoder:
    """
    Decoder for paginated documents (PDF).
    """

    kind = SlideKind.PDF

    def __init__(self, engine, config: Optional[MergeConfig] = None,
                 observer: Optional[ProcessingObserver] = None):
        """
        Args:
            engine: Rendering engine exposing ``open(bytes)`` (see ``rendering.py``)
            config: Page cap, timeout, canvas and encoder settings
            observer: Receives progress and completion events
        """
        self.engine = engine
        self.config = config or MergeConfig()
        self.observer = observer or ProcessingObserver()

    async def decode(self, file_name: str, data: bytes) -> List[Slide]:
        """
        Decode *data* into slides, one per page up to ``config.max_pages``.

        Always emits exactly one completion event for *file_name*.
        """
        logger.info("Processing document: %s, size: %d bytes", file_name, len(data))
        try:
            slides = await self._decode_document(file_name, data)
        except Exception as e:
            logger.error("Error processing document %s: %s", file_name, e)
            slides = placeholder_slides(file_name, self.kind, self.config.placeholder_count)
        finally:
            self.observer.on_complete(CompletionEvent(file_name))

        logger.info("Completed processing document: %s, extracted %d slides", file_name, len(slides))
        return slides

    async def _open(self, data: bytes):
        timeout = self.config.open_timeout
        opening = asyncio.ensure_future(asyncio.to_thread(self.engine.open, data))
        try:
            # Shielded so a timeout abandons the open instead of cancelling it
            return await asyncio.wait_for(asyncio.shield(opening), timeout=timeout)
        except asyncio.TimeoutError:
            opening.add_done_callback(_close_late_handle)
            raise TimeoutError(f"Document loading timed out after {timeout:g} seconds") from None

    async def _decode_document(self, file_name: str, data: bytes) -> List[Slide]:
        handle = await self._open(data)
        try:
            num_pages = handle.page_count
            logger.info("Document loaded: %s, pages: %d", file_name, num_pages)

            max_pages = min(num_pages, self.config.max_pages)
            if num_pages > max_pages:
                logger.warning(
                    "%s has %d pages, only processing first %d", file_name, num_pages, max_pages
                )

            self.observer.on_progress(ProgressEvent(file_name, 0, max_pages))

            slides = []
            for index in range(max_pages):
                slides.append(await self._decode_page(handle, file_name, index))
                self.observer.on_progress(ProgressEvent(file_name, index + 1, max_pages))
            return slides
        finally:
            handle.close()

    async def _decode_page(self, handle, file_name: str, index: int) -> Slide:
        page = None
        try:
            logger.debug("Rendering page %d of %s", index + 1, file_name)
            page = await asyncio.to_thread(handle.get_page, index)
            return await asyncio.to_thread(self._render_page, page, file_name, index)
        except Exception as e:
            logger.error("Error rendering page %d of %s: %s", index + 1, file_name, e)
            return placeholder_slide(f"{file_name} (Error on page {index + 1})", self.kind, index)
        finally:
            # Only one page's render resources are alive at a time
            if page is not None:
                page.release()

    def _render_page(self, page, file_name: str, index: int) -> Slide:
        cfg = self.config
        width, height = page.native_size()

        thumbnail = self._draw(page, width, height, cfg.thumbnail_scale)

        placement = fit_to_canvas(cfg.render_width, cfg.render_height, width, height)
        full = self._draw(page, width, height, placement.scale)

        return Slide(
            source_file=file_name,
            kind=self.kind,
            page_index=index,
            thumbnail=encode_jpeg(thumbnail, cfg.thumbnail_quality),
            full_image=encode_jpeg(full, cfg.full_image_quality),
            selected=True,
            dimensions=Dimensions(
                width=width,
                height=height,
                scaled_width=full.width,
                scaled_height=full.height,
            ),
        )

    @staticmethod
    def _draw(page, width: float, height: float, scale: float) -> Image.Image:
        # Pages have no background of their own
        size = (max(1, round(width * scale)), max(1, round(height * scale)))
        surface = Image.new("RGB", size, "white")
        page.render(surface, scale)
        return surface
