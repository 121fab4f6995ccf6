#!/usr/bin/env python3
"""
Batch dispatcher: classifies input files by extension and routes them to the
document or image decoder.

Files are processed one after another so the output order always matches
the input order, and pages keep their order within a file.  Decoders build
their results locally; the processor does the single append per file.
"""

import asyncio
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union

from .config import MergeConfig
from .document_decoder import DocumentDecoder
from .environment import Environment
from .image_decoder import ImageDecoder
from .models import PresentationGroup, Slide, SlideKind
from .observer import ProcessingObserver
from .placeholder import placeholder_slides

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = ("jpg", "jpeg", "png", "gif", "bmp", "webp")
# Vector images need a rasterizer Pillow does not provide
VECTOR_IMAGE_EXTENSIONS = ("svg",)
DOCUMENT_EXTENSIONS = ("pdf",)
LEGACY_DECK_EXTENSIONS = ("ppt", "pptx")


def get_file_extension(filename: str) -> str:
    """Lower-cased text after the last dot, or ``""``."""
    if "." not in filename:
        return ""
    return filename.rsplit(".", 1)[-1].lower()


def is_image_file(extension: str) -> bool:
    return extension in IMAGE_EXTENSIONS


@dataclass
class SourceFile:
    """A named blob supplied by the host."""
    name: str
    data: bytes

    @classmethod
    async def from_path(cls, path: Union[str, os.PathLike]) -> "SourceFile":
        path = Path(path)
        data = await asyncio.to_thread(path.read_bytes)
        return cls(name=path.name, data=data)


InputFile = Union[SourceFile, str, os.PathLike]


class FileProcessor:
    """
    Runs a batch of input files through the decoders.
    """

    def __init__(self, environment: Optional[Environment] = None,
                 config: Optional[MergeConfig] = None,
                 observer: Optional[ProcessingObserver] = None):
        self.environment = environment or Environment.default()
        self.config = config or MergeConfig()
        self.observer = observer or ProcessingObserver()

        self.document_decoder = None
        if self.environment.can_render_documents:
            self.document_decoder = DocumentDecoder(self.environment.engine, self.config, self.observer)
        self.image_decoder = ImageDecoder(self.config)

    async def process_files(self, files: Iterable[InputFile]) -> List[Slide]:
        """Decode every supported file into one flat, ordered list of slides."""
        if not self.environment.interactive:
            logger.warning("Attempted to process files in a non-interactive environment")
            return []

        slides: List[Slide] = []
        for file in files:
            result = await self._process_file(file)
            if result:
                slides.extend(result[1])
        return slides

    async def process_files_as_groups(self, files: Iterable[InputFile]) -> List[PresentationGroup]:
        """Decode every supported file into one presentation group per file."""
        if not self.environment.interactive:
            logger.warning("Attempted to process files in a non-interactive environment")
            return []

        groups: List[PresentationGroup] = []
        for file in files:
            result = await self._process_file(file)
            if not result:
                continue
            kind, slides = result
            if not slides:
                logger.info("Discarding %s: no slides extracted", _name_of(file))
                continue
            groups.append(PresentationGroup.from_slides(_name_of(file), kind, slides))
        return groups

    async def _process_file(self, file: InputFile) -> Optional[Tuple[SlideKind, List[Slide]]]:
        name = _name_of(file)
        extension = get_file_extension(name)

        if extension in DOCUMENT_EXTENSIONS:
            source = await self._load(file)
            if self.document_decoder is None:
                logger.warning("No rendering engine available, using placeholders for %s", name)
                return SlideKind.PDF, placeholder_slides(name, SlideKind.PDF, self.config.placeholder_count)
            return SlideKind.PDF, await self.document_decoder.decode(name, source.data)

        if is_image_file(extension):
            source = await self._load(file)
            return SlideKind.IMAGE, [await self.image_decoder.decode(name, source.data)]

        if extension in LEGACY_DECK_EXTENSIONS and self.config.stub_legacy_decks:
            # Slide decks are not parsed; they only reserve their place in the batch
            return SlideKind.DECK, placeholder_slides(name, SlideKind.DECK, self.config.placeholder_count)

        if extension in VECTOR_IMAGE_EXTENSIONS:
            logger.warning("Skipping %s: vector images are not supported", name)
            return None

        logger.info("Skipping unsupported file: %s", name)
        return None

    async def _load(self, file: InputFile) -> SourceFile:
        if isinstance(file, SourceFile):
            return file
        try:
            return await SourceFile.from_path(file)
        except OSError as e:
            # Unreadable input degrades like an undecodable one
            logger.error("Could not read %s: %s", file, e)
            return SourceFile(name=_name_of(file), data=b"")


def _name_of(file: InputFile) -> str:
    if isinstance(file, SourceFile):
        return file.name
    return Path(file).name
