"""Progress notifications emitted while documents are decoded."""
import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProgressEvent:
    """``page_index`` is 0 right after opening, then the number of pages done."""
    file_name: str
    page_index: int
    total_pages: int


@dataclass(frozen=True)
class CompletionEvent:
    file_name: str


class ProcessingObserver:
    """Receives decoder lifecycle events.  The base class ignores them."""

    def on_progress(self, event: ProgressEvent) -> None:
        pass

    def on_complete(self, event: CompletionEvent) -> None:
        pass


class LoggingObserver(ProcessingObserver):
    """Observer that reports progress through the module logger."""

    def on_progress(self, event: ProgressEvent) -> None:
        logger.info("%s: page %d/%d", event.file_name, event.page_index, event.total_pages)

    def on_complete(self, event: CompletionEvent) -> None:
        logger.info("%s: done", event.file_name)


class RecordingObserver(ProcessingObserver):
    """Keeps every event in order; handy for hosts that poll and for tests."""

    def __init__(self):
        self.events = []

    def on_progress(self, event: ProgressEvent) -> None:
        self.events.append(event)

    def on_complete(self, event: CompletionEvent) -> None:
        self.events.append(event)

    @property
    def progress(self):
        return [e for e in self.events if isinstance(e, ProgressEvent)]

    @property
    def completions(self):
        return [e for e in self.events if isinstance(e, CompletionEvent)]
