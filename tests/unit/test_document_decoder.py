"""Test decoding paginated documents into slides."""

import asyncio
import io

import pytest
from PIL import Image

from conftest import FakeEngine, FakeHandle, make_pdf
from slide_merge.config import MergeConfig
from slide_merge.document_decoder import DocumentDecoder
from slide_merge.models import SlideKind
from slide_merge.observer import CompletionEvent, ProgressEvent, RecordingObserver
from slide_merge.placeholder import is_placeholder
from slide_merge.rendering import PyMuPDFEngine


def decode(decoder, data, name="deck.pdf"):
    return asyncio.run(decoder.decode(name, data))


def test_one_slide_per_page_in_order(pdf_bytes):
    decoder = DocumentDecoder(PyMuPDFEngine())
    slides = decode(decoder, pdf_bytes)

    assert [s.page_index for s in slides] == [0, 1, 2]
    assert all(s.kind is SlideKind.PDF for s in slides)
    assert all(s.source_file == "deck.pdf" for s in slides)
    assert all(s.selected for s in slides)
    assert len({s.id for s in slides}) == 3


def test_full_image_fills_16_9_canvas(pdf_bytes):
    slides = decode(DocumentDecoder(PyMuPDFEngine()), pdf_bytes)
    landscape, portrait, wide = (s.dimensions for s in slides)

    # 16:9 page fills the whole render canvas
    assert (landscape.width, landscape.height) == (800, 450)
    assert (landscape.scaled_width, landscape.scaled_height) == (1920, 1080)

    # Portrait page fills the height
    assert portrait.scaled_height == 1080
    assert portrait.scaled_width == round(612 * 1080 / 792)

    # Very wide page fills the width
    assert wide.scaled_width == 1920
    assert wide.scaled_height == round(300 * 1920 / 1000)


def test_images_are_jpeg_with_white_background(pdf_bytes):
    slide = decode(DocumentDecoder(PyMuPDFEngine()), pdf_bytes)[0]

    with Image.open(io.BytesIO(slide.full_image)) as full:
        assert full.format == "JPEG"
        assert full.size == (1920, 1080)
        # Bottom-right corner has no text, so it shows the canvas fill
        r, g, b = full.convert("RGB").getpixel((1900, 1060))
        assert min(r, g, b) > 240

    with Image.open(io.BytesIO(slide.thumbnail)) as thumb:
        assert thumb.format == "JPEG"
        assert thumb.size == (160, 90)  # 0.2 x native size


def test_page_cap_limits_slides():
    handle = FakeHandle(page_count=60)
    slides = decode(DocumentDecoder(FakeEngine(handle)), b"%PDF")

    assert len(slides) == 50
    assert [s.page_index for s in slides] == list(range(50))
    assert handle.requested == list(range(50))


def test_page_cap_is_configurable():
    handle = FakeHandle(page_count=10)
    decoder = DocumentDecoder(FakeEngine(handle), MergeConfig(max_pages=4))
    assert len(decode(decoder, b"%PDF")) == 4


def test_open_failure_yields_five_placeholders():
    slides = decode(DocumentDecoder(PyMuPDFEngine()), b"this is not a pdf")

    assert len(slides) == 5
    assert [s.page_index for s in slides] == [0, 1, 2, 3, 4]
    for slide in slides:
        assert slide.selected is True
        assert slide.dimensions is None
        assert is_placeholder(slide.full_image)
        assert slide.source_file == "deck.pdf"


def test_open_timeout_degrades_to_placeholders():
    engine = FakeEngine(FakeHandle(page_count=3), delay=0.5)
    decoder = DocumentDecoder(engine, MergeConfig(open_timeout=0.05))
    slides = decode(decoder, b"%PDF")

    assert len(slides) == 5
    assert all(is_placeholder(s.full_image) for s in slides)


def test_document_opened_after_timeout_is_closed():
    handle = FakeHandle(page_count=2)
    decoder = DocumentDecoder(FakeEngine(handle, delay=0.3), MergeConfig(open_timeout=0.05))

    async def decode_then_wait():
        slides = await decoder.decode("slow.pdf", b"%PDF")
        await asyncio.sleep(0.6)
        return slides

    slides = asyncio.run(decode_then_wait())

    assert len(slides) == 5
    assert handle.requested == []
    assert handle.closed

def test_page_failure_substitutes_one_placeholder():
    handle = FakeHandle(page_count=4, failing={2})
    slides = decode(DocumentDecoder(FakeEngine(handle)), b"%PDF")

    assert [s.page_index for s in slides] == [0, 1, 2, 3]
    assert is_placeholder(slides[2].full_image)
    assert slides[2].source_file == "deck.pdf (Error on page 3)"
    assert slides[2].dimensions is None
    assert not any(is_placeholder(s.full_image) for s in slides[:2] + slides[3:])


def test_pages_are_released_one_at_a_time():
    handle = FakeHandle(page_count=5, failing={1})
    decode(DocumentDecoder(FakeEngine(handle)), b"%PDF")

    assert handle.max_live == 1
    assert handle.released == 5
    assert handle.live == 0
    assert handle.closed


def test_progress_and_completion_events():
    observer = RecordingObserver()
    handle = FakeHandle(page_count=3)
    decode(DocumentDecoder(FakeEngine(handle), observer=observer), b"%PDF")

    assert observer.events == [
        ProgressEvent("deck.pdf", 0, 3),
        ProgressEvent("deck.pdf", 1, 3),
        ProgressEvent("deck.pdf", 2, 3),
        ProgressEvent("deck.pdf", 3, 3),
        CompletionEvent("deck.pdf"),
    ]


def test_progress_total_reflects_page_cap():
    observer = RecordingObserver()
    decoder = DocumentDecoder(FakeEngine(FakeHandle(page_count=8)), MergeConfig(max_pages=2), observer)
    decode(decoder, b"%PDF")

    assert observer.progress[0] == ProgressEvent("deck.pdf", 0, 2)
    assert len(observer.progress) == 3


def test_completion_emitted_once_on_failure():
    observer = RecordingObserver()
    decoder = DocumentDecoder(FakeEngine(error=RuntimeError("corrupt")), observer=observer)
    decode(decoder, b"%PDF")

    assert observer.progress == []
    assert observer.completions == [CompletionEvent("deck.pdf")]


@pytest.mark.parametrize("count", [1, 7])
def test_real_document_page_counts(count):
    data = make_pdf([(595, 842)] * count)
    slides = decode(DocumentDecoder(PyMuPDFEngine()), data)
    assert [s.page_index for s in slides] == list(range(count))
