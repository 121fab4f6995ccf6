"""Capability descriptor handed to every component.

Collaborators are resolved once, when the host builds an :class:`Environment`,
and injected from there.  Components branch on the descriptor instead of
probing their surroundings: an environment without collaborators makes every
entry point return an empty result.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from .rendering import PyMuPDFEngine
from .writer import PresentationWriter

logger = logging.getLogger(__name__)

__all__ = ["Environment"]


@dataclass
class Environment:
    """Which collaborators are available to the pipeline."""

    engine: Optional[object] = None
    writer_factory: Optional[Callable[..., PresentationWriter]] = None
    interactive: bool = True

    @property
    def can_render_documents(self) -> bool:
        return self.interactive and self.engine is not None

    @property
    def can_write_presentations(self) -> bool:
        return self.interactive and self.writer_factory is not None

    @classmethod
    def default(cls) -> "Environment":
        """PyMuPDF for documents, python-pptx for output."""
        return cls(engine=PyMuPDFEngine(), writer_factory=PresentationWriter)

    @classmethod
    def unavailable(cls) -> "Environment":
        """No file or canvas primitives; every entry point yields an empty result."""
        return cls(interactive=False)
