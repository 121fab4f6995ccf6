"""Runtime configuration for slide extraction and assembly.

All policy values (page cap, open timeout, canvas sizes, encoder qualities)
live on :class:`MergeConfig`.  The defaults reproduce the behaviour of the
browser tool this package grew out of; a handful can be overridden from the
environment so that batch jobs can raise the page cap without code changes:

``SLIDEMERGE_MAX_PAGES``
    Maximum number of pages rendered per document (default ``50``).
``SLIDEMERGE_OPEN_TIMEOUT``
    Seconds to wait for a document to open (default ``30``).  A timed-out
    open keeps running on its worker thread and its document is closed when
    it finishes; ``asyncio.run`` waits for that thread on shutdown, so a
    process can take up to the length of the stuck open to exit.
``SLIDEMERGE_PLACEHOLDER_COUNT``
    Placeholder slides emitted for a document that cannot be opened
    (default ``5``).
"""
from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

__all__ = ["MergeConfig"]

_ENV_OVERRIDES = {
    "SLIDEMERGE_MAX_PAGES": ("max_pages", int),
    "SLIDEMERGE_OPEN_TIMEOUT": ("open_timeout", float),
    "SLIDEMERGE_PLACEHOLDER_COUNT": ("placeholder_count", int),
}


@dataclass(frozen=True)
class MergeConfig:
    """Policy values shared by the decoders and the assembly engine."""

    max_pages: int = 50
    open_timeout: float = 30.0
    placeholder_count: int = 5

    # Full-resolution render canvas, in pixels (16:9)
    render_width: int = 1920
    render_height: int = 1080

    # Output slide canvas, in inches (16:9)
    slide_width: float = 10.0
    slide_height: float = 5.625

    thumbnail_scale: float = 0.2
    thumbnail_max_width: int = 300
    thumbnail_max_height: int = 225
    thumbnail_quality: int = 70
    image_thumbnail_quality: int = 80
    full_image_quality: int = 90

    default_image_width: int = 800
    default_image_height: int = 600

    stub_legacy_decks: bool = False

    author: str = "Slide Merge"
    title: str = "Merged Presentation"

    def validate(self) -> "MergeConfig":
        """Raise ``ValueError`` if any limit is unusable; return ``self`` otherwise."""
        positive = {
            "max_pages": self.max_pages,
            "open_timeout": self.open_timeout,
            "placeholder_count": self.placeholder_count,
            "render_width": self.render_width,
            "render_height": self.render_height,
            "slide_width": self.slide_width,
            "slide_height": self.slide_height,
            "thumbnail_scale": self.thumbnail_scale,
            "thumbnail_max_width": self.thumbnail_max_width,
            "thumbnail_max_height": self.thumbnail_max_height,
            "default_image_width": self.default_image_width,
            "default_image_height": self.default_image_height,
        }
        for name, value in positive.items():
            if value <= 0:
                raise ValueError(f"{name} must be positive, got {value!r}")

        for name in ("thumbnail_quality", "image_thumbnail_quality", "full_image_quality"):
            quality = getattr(self, name)
            if not 1 <= quality <= 100:
                raise ValueError(f"{name} must be between 1 and 100, got {quality!r}")

        # Pages rendered to fill the render canvas must land edge-to-edge on the slide.
        render_ratio = self.render_width / self.render_height
        slide_ratio = self.slide_width / self.slide_height
        if abs(render_ratio - slide_ratio) > 1e-9:
            raise ValueError(
                f"Render canvas {self.render_width}x{self.render_height} and slide canvas "
                f"{self.slide_width}x{self.slide_height} must share one aspect ratio"
            )
        return self

    def with_overrides(self, **changes) -> "MergeConfig":
        """Return a validated copy with ``None`` values in *changes* ignored."""
        changes = {k: v for k, v in changes.items() if v is not None}
        return replace(self, **changes).validate()

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "MergeConfig":
        """Build a config from defaults plus ``SLIDEMERGE_*`` environment variables."""
        environ = os.environ if environ is None else environ
        changes = {}
        for var, (field_name, cast) in _ENV_OVERRIDES.items():
            raw = environ.get(var)
            if raw is None or not raw.strip():
                continue
            try:
                changes[field_name] = cast(raw)
            except ValueError:
                raise ValueError(f"Invalid value for {var}: {raw!r}") from None
        return cls().with_overrides(**changes)
