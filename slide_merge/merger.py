#!/usr/bin/env python3
"""
Main slide merger module that ties together the file processor, the assembly
engine and the slide store.
"""

import logging
from pathlib import Path
from typing import Iterable, List, Optional

from .assembly import AssemblyEngine, PresentationArtifact
from .config import MergeConfig
from .environment import Environment
from .models import PresentationGroup
from .observer import LoggingObserver, ProcessingObserver
from .paths import save_artifact
from .processor import FileProcessor, InputFile
from .storage import SlideStore

logger = logging.getLogger(__name__)


class SlideMerger:
    """
    Main class for merging documents and images into one presentation.
    """

    def __init__(
        self,
        *,
        environment: Optional[Environment] = None,
        config: Optional[MergeConfig] = None,
        observer: Optional[ProcessingObserver] = None,
        store: Optional[SlideStore] = None,
        output_dir=None,
    ):
        """Create a new :class:`SlideMerger`.

        Parameters
        ----------
        environment
            Available collaborators; defaults to PyMuPDF + python-pptx.
        config
            Policy values; defaults to :meth:`MergeConfig.from_env`.
        observer
            Receives document progress events.
        store
            Optional :class:`SlideStore` used by :meth:`save`, :meth:`load`
            and :meth:`clear`.
        output_dir
            Directory for bare output filenames.  Defaults to the current
            working directory.
        """
        self.environment = environment or Environment.default()
        self.config = config or MergeConfig.from_env()
        self.store = store
        self.output_dir = Path(output_dir) if output_dir else Path.cwd()

        self.processor = FileProcessor(self.environment, self.config, observer)
        self.assembly = AssemblyEngine(self.environment, self.config)

    async def process(self, files: Iterable[InputFile]) -> List[PresentationGroup]:
        """Decode *files* into one presentation group per file."""
        return await self.processor.process_files_as_groups(files)

    async def merge(self, groups: Iterable[PresentationGroup]) -> PresentationArtifact:
        """Assemble the selected groups into one presentation."""
        return await self.assembly.merge_presentations(groups)

    def save_artifact(self, artifact: PresentationArtifact, filename: str) -> Optional[Path]:
        return save_artifact(artifact, filename, self.output_dir)

    def _require_store(self) -> SlideStore:
        if self.store is None:
            raise ValueError("SlideMerger was created without a store")
        return self.store

    def save(self, groups: List[PresentationGroup]) -> None:
        """Persist *groups* and their slides."""
        store = self._require_store()
        store.save_presentations(groups)
        store.save_slides(slide for group in groups for slide in group.slides)

    def load(self) -> List[PresentationGroup]:
        return self._require_store().get_presentations()

    def clear(self) -> None:
        self._require_store().clear_database()


def main(argv=None):
    """Command-line entry point for the slide merger."""
    import argparse
    import asyncio
    import sys

    def _build_parser() -> argparse.ArgumentParser:
        p = argparse.ArgumentParser(prog="slidemerge", description="Merge PDFs and images into one PPTX presentation.")
        p.add_argument("inputs", nargs="*", type=Path, help="PDF and image files, in slide order")
        p.add_argument("--output", "-o", type=Path, default=Path("merged-presentation.pptx"), help="Destination PPTX path")
        p.add_argument("--db", type=Path, help="SQLite file to persist extracted groups in (and to merge from when no inputs are given)")
        p.add_argument("--exclude", action="append", default=[], metavar="NAME", help="Deselect the group for this file name (repeatable)")
        p.add_argument("--max-pages", type=int, help="Maximum pages rendered per document")
        p.add_argument("--open-timeout", type=float, help="Seconds to wait for a document to open")
        p.add_argument("--stub-legacy", action="store_true", help="Add placeholder slides for .ppt/.pptx inputs instead of skipping them")
        p.add_argument("--debug", action="store_true", help="Enable verbose logging")
        return p

    async def _merge_async(args) -> int:
        config = MergeConfig.from_env().with_overrides(
            max_pages=args.max_pages,
            open_timeout=args.open_timeout,
            stub_legacy_decks=args.stub_legacy or None,
        )
        store = SlideStore(args.db) if args.db else None
        merger = SlideMerger(config=config, observer=LoggingObserver(), store=store,
                             output_dir=args.output.parent)
        try:
            if args.inputs:
                missing = [p for p in args.inputs if not p.exists()]
                for path in missing:
                    logger.error("Input file '%s' not found", path)
                if missing:
                    return 1
                groups = await merger.process(args.inputs)
                if store is not None:
                    merger.clear()
                    merger.save(groups)
            elif store is not None:
                groups = merger.load()
            else:
                logger.error("Nothing to merge: give input files or --db")
                return 1

            for group in groups:
                if group.source_file_name in args.exclude:
                    group.selected = False

            artifact = await merger.merge(groups)
            output_path = merger.save_artifact(artifact, args.output.name)
            if output_path is None:
                return 1
            logger.info("✅ Presentation written to %s", output_path)
            return 0
        finally:
            if store is not None:
                store.close()

    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    sys.exit(asyncio.run(_merge_async(args)))


if __name__ == "__main__":
    main()
