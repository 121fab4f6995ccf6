import io
import sys
import time
from pathlib import Path

import pytest

# Ensure project root is on sys.path so `import slide_merge` works
project_root = Path(__file__).resolve().parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

import fitz  # noqa: E402
from PIL import Image  # noqa: E402


def make_pdf(sizes):
    """Build an in-memory PDF with one page per (width, height) in points."""
    doc = fitz.open()
    for i, (width, height) in enumerate(sizes):
        page = doc.new_page(width=width, height=height)
        page.insert_text((20, 40), f"Page {i + 1}", fontsize=14)
    data = doc.tobytes()
    doc.close()
    return data


def make_image(width, height, fmt="PNG", color=(200, 30, 30)):
    buf = io.BytesIO()
    Image.new("RGB", (width, height), color).save(buf, format=fmt)
    return buf.getvalue()


def make_mpo(width, height):
    """Two-frame JPEG as saved by many phone cameras; Pillow reports it as MPO."""
    first = Image.new("RGB", (width, height), (200, 30, 30))
    second = Image.new("RGB", (width, height), (30, 30, 200))
    buf = io.BytesIO()
    first.save(buf, format="MPO", save_all=True, append_images=[second])
    return buf.getvalue()


class FakePage:
    def __init__(self, handle, size, fail=False):
        self.handle = handle
        self.size = size
        self.fail = fail

    def native_size(self):
        return self.size

    def render(self, surface, scale):
        if self.fail:
            raise RuntimeError("render failed")
        surface.paste((0, 0, 255), (0, 0, max(1, surface.width // 2), max(1, surface.height // 2)))

    def release(self):
        self.handle.live -= 1
        self.handle.released += 1


class FakeHandle:
    """Document whose pages are all ``size``; indices in ``failing`` raise on render."""

    def __init__(self, page_count, size=(800, 450), failing=()):
        self.page_count = page_count
        self.size = size
        self.failing = set(failing)
        self.live = 0
        self.max_live = 0
        self.released = 0
        self.requested = []
        self.closed = False

    def get_page(self, index):
        self.requested.append(index)
        self.live += 1
        self.max_live = max(self.max_live, self.live)
        return FakePage(self, self.size, fail=index in self.failing)

    def close(self):
        self.closed = True


class FakeEngine:
    def __init__(self, handle=None, delay=0.0, error=None):
        self.handle = handle
        self.delay = delay
        self.error = error

    def open(self, data):
        if self.delay:
            time.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.handle


@pytest.fixture
def pdf_bytes():
    return make_pdf([(800, 450), (612, 792), (1000, 300)])


@pytest.fixture
def png_bytes():
    return make_image(640, 480)
