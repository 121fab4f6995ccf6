"""
Data models for extracted slides and per-file presentation groups.
"""
import base64
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


def new_id() -> str:
    """Return a fresh opaque identifier."""
    return uuid.uuid4().hex


def _b64(data: Optional[bytes]) -> Optional[str]:
    return base64.b64encode(data).decode("ascii") if data is not None else None


def _unb64(text: Optional[str]) -> Optional[bytes]:
    return base64.b64decode(text) if text is not None else None


class SlideKind(str, Enum):
    """Where a slide came from."""
    PDF = "pdf"        # page of a paginated document
    IMAGE = "image"    # raster image file
    DECK = "deck"      # legacy slide deck (placeholder only)

    @property
    def is_paginated(self) -> bool:
        return self is SlideKind.PDF


@dataclass
class Dimensions:
    """Native content size and the size actually rendered into ``full_image``."""
    width: float
    height: float
    scaled_width: float
    scaled_height: float

    def to_dict(self) -> Dict[str, float]:
        return {
            "width": self.width,
            "height": self.height,
            "scaledWidth": self.scaled_width,
            "scaledHeight": self.scaled_height,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Dimensions":
        return cls(
            width=data["width"],
            height=data["height"],
            scaled_width=data.get("scaledWidth", data["width"]),
            scaled_height=data.get("scaledHeight", data["height"]),
        )


@dataclass
class Slide:
    """
    One visual unit extracted from a source file.

    ``thumbnail`` and ``full_image`` hold encoded image bytes (JPEG for
    rendered pages, the untouched file contents for images).
    """
    source_file: str
    kind: SlideKind
    page_index: int
    thumbnail: bytes
    full_image: Optional[bytes] = None
    selected: bool = True
    dimensions: Optional[Dimensions] = None
    id: str = field(default_factory=new_id)

    @property
    def page_number(self) -> int:
        """1-based page number for display."""
        return self.page_index + 1

    def to_dict(self) -> Dict[str, Any]:
        """Serialise to a JSON-compatible record."""
        return {
            "id": self.id,
            "file": self.source_file,
            "fileType": self.kind.value,
            "index": self.page_index,
            "thumbnail": _b64(self.thumbnail),
            "fullImage": _b64(self.full_image),
            "selected": self.selected,
            "dimensions": self.dimensions.to_dict() if self.dimensions else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Slide":
        """Inverse of :meth:`to_dict`."""
        dimensions = data.get("dimensions")
        return cls(
            id=data["id"],
            source_file=data["file"],
            kind=SlideKind(data["fileType"]),
            page_index=int(data["index"]),
            thumbnail=_unb64(data["thumbnail"]),
            full_image=_unb64(data.get("fullImage")),
            selected=bool(data.get("selected", True)),
            dimensions=Dimensions.from_dict(dimensions) if dimensions else None,
        )


@dataclass
class PresentationGroup:
    """
    All slides extracted from one source file, selectable as a unit.

    A group always holds at least one slide; files that yield nothing are
    never turned into groups.
    """
    source_file_name: str
    kind: SlideKind
    slides: List[Slide]
    selected: bool = True
    thumbnail: Optional[bytes] = None
    id: str = field(default_factory=new_id)

    def __post_init__(self):
        if not self.slides:
            raise ValueError(f"Presentation group for '{self.source_file_name}' has no slides")
        if self.thumbnail is None:
            self.thumbnail = self.slides[0].thumbnail

    @classmethod
    def from_slides(cls, source_file_name: str, kind: SlideKind, slides: List[Slide]) -> "PresentationGroup":
        """Build a group, ordering ``slides`` by page index."""
        ordered = sorted(slides, key=lambda s: s.page_index)
        return cls(source_file_name=source_file_name, kind=kind, slides=ordered)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "fileName": self.source_file_name,
            "fileType": self.kind.value,
            "slides": [slide.to_dict() for slide in self.slides],
            "selected": self.selected,
            "thumbnail": _b64(self.thumbnail),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PresentationGroup":
        return cls(
            id=data["id"],
            source_file_name=data["fileName"],
            kind=SlideKind(data["fileType"]),
            slides=[Slide.from_dict(s) for s in data["slides"]],
            selected=bool(data.get("selected", True)),
            thumbnail=_unb64(data.get("thumbnail")),
        )
