#!/usr/bin/env python3
"""
Turns one raster image file into exactly one slide.
"""

import asyncio
import io
import logging
from typing import Callable, Optional

from PIL import Image

from .config import MergeConfig
from .document_decoder import encode_jpeg
from .geometry import fit_to_canvas
from .models import Dimensions, Slide, SlideKind
from .placeholder import placeholder_slide

logger = logging.getLogger(__name__)


def load_image(data: bytes) -> Image.Image:
    """Decode *data* fully so truncated files fail here rather than later."""
    image = Image.open(io.BytesIO(data))
    image.load()
    return image


class ImageDecoder:
    """
    Decoder for raster images.

    The original file bytes become the slide's full image (no re-encoding);
    only the thumbnail is derived.
    """

    kind = SlideKind.IMAGE

    def __init__(self, config: Optional[MergeConfig] = None,
                 loader: Callable[[bytes], Image.Image] = load_image):
        self.config = config or MergeConfig()
        self.loader = loader

    async def decode(self, file_name: str, data: bytes) -> Slide:
        try:
            return await asyncio.to_thread(self._decode, file_name, data)
        except Exception as e:
            logger.error("Error loading image %s: %s", file_name, e)
            return placeholder_slide(file_name, self.kind, 0, dimensions=self._default_dimensions())

    def _default_dimensions(self) -> Dimensions:
        w, h = self.config.default_image_width, self.config.default_image_height
        return Dimensions(w, h, w, h)

    def _decode(self, file_name: str, data: bytes) -> Slide:
        cfg = self.config
        image = self.loader(data)
        try:
            # Degenerate images report 0; fall back so later ratios stay finite
            width = image.width or cfg.default_image_width
            height = image.height or cfg.default_image_height
            logger.info("Image loaded: %s, dimensions: %dx%d", file_name, width, height)
            thumbnail = self._thumbnail(image, width, height)
        finally:
            image.close()

        return Slide(
            source_file=file_name,
            kind=self.kind,
            page_index=0,
            thumbnail=encode_jpeg(thumbnail, cfg.image_thumbnail_quality),
            full_image=data,
            selected=True,
            dimensions=Dimensions(width, height, width, height),
        )

    def _thumbnail(self, image: Image.Image, width: int, height: int) -> Image.Image:
        cfg = self.config
        fit = fit_to_canvas(cfg.thumbnail_max_width, cfg.thumbnail_max_height, width, height)
        size = (max(1, round(fit.w)), max(1, round(fit.h)))

        thumbnail = Image.new("RGB", size, "white")
        if image.width and image.height:
            layer = image.convert("RGBA").resize(size, Image.LANCZOS)
            thumbnail.paste(layer, (0, 0), layer)
        return thumbnail
