"""Aspect-preserving placement of content on a fixed canvas.

The same rule is used to choose the render resolution of a document page
(1920x1080 pixel canvas) and to position the rendered image on the output
slide (10x5.625 inch canvas).  Because both canvases share a 16:9 ratio, a
page that fills the render canvas is placed edge-to-edge on the slide.
"""
from __future__ import annotations

from dataclasses import dataclass

__all__ = ["Placement", "fit_to_canvas"]


@dataclass(frozen=True)
class Placement:
    """Position and size of content on a canvas, in canvas units."""

    x: float
    y: float
    w: float
    h: float
    scale: float = 1.0  # content units -> canvas units

    @classmethod
    def full_bleed(cls, canvas_width: float, canvas_height: float) -> "Placement":
        """Placement covering the whole canvas (used when native size is unknown)."""
        return cls(0.0, 0.0, float(canvas_width), float(canvas_height))


def fit_to_canvas(
    canvas_width: float,
    canvas_height: float,
    content_width: float,
    content_height: float,
) -> Placement:
    """Scale content uniformly to the largest size that fits the canvas, centred.

    Content wider than the canvas ratio fills the width and is centred
    vertically; everything else fills the height and is centred horizontally.

    Raises:
        ValueError: if any dimension is not positive.
    """
    if canvas_width <= 0 or canvas_height <= 0:
        raise ValueError(f"Canvas must have positive size, got {canvas_width}x{canvas_height}")
    if content_width <= 0 or content_height <= 0:
        raise ValueError(f"Content must have positive size, got {content_width}x{content_height}")

    canvas_ratio = canvas_width / canvas_height
    content_ratio = content_width / content_height

    if content_ratio > canvas_ratio:
        w = float(canvas_width)
        h = canvas_width / content_ratio
        return Placement(0.0, (canvas_height - h) / 2, w, h, canvas_width / content_width)

    h = float(canvas_height)
    w = canvas_height * content_ratio
    return Placement((canvas_width - w) / 2, 0.0, w, h, canvas_height / content_height)
