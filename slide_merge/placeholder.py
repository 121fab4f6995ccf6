"""The fallback bitmap used whenever a unit cannot be extracted."""
import base64
from typing import List, Optional

from .models import Dimensions, Slide, SlideKind

__all__ = ["PLACEHOLDER_PNG", "is_placeholder", "placeholder_slide", "placeholder_slides"]

# 1x1 PNG.  Assembly recognises it by exact bytes and writes a caption instead.
PLACEHOLDER_PNG = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mP8z8DwHwAFBQIAX8jx0gAAAABJRU5ErkJggg=="
)


def is_placeholder(image: Optional[bytes]) -> bool:
    """True only for the exact placeholder bytes; look-alikes do not count."""
    return image is not None and bytes(image) == PLACEHOLDER_PNG


def placeholder_slide(
    source_file: str,
    kind: SlideKind,
    page_index: int = 0,
    dimensions: Optional[Dimensions] = None,
) -> Slide:
    """A selected slide whose thumbnail and full image are the placeholder."""
    return Slide(
        source_file=source_file,
        kind=kind,
        page_index=page_index,
        thumbnail=PLACEHOLDER_PNG,
        full_image=PLACEHOLDER_PNG,
        selected=True,
        dimensions=dimensions,
    )


def placeholder_slides(source_file: str, kind: SlideKind, count: int = 5) -> List[Slide]:
    """``count`` placeholder slides with contiguous page indices and no dimensions."""
    return [placeholder_slide(source_file, kind, index) for index in range(count)]
