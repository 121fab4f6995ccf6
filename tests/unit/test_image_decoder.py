"""Test decoding raster images into slides."""

import asyncio
import io

from PIL import Image

from conftest import make_image
from slide_merge.image_decoder import ImageDecoder
from slide_merge.models import SlideKind
from slide_merge.placeholder import is_placeholder


def decode(decoder, data, name="photo.png"):
    return asyncio.run(decoder.decode(name, data))


def test_image_becomes_single_slide(png_bytes):
    slide = decode(ImageDecoder(), png_bytes)

    assert slide.kind is SlideKind.IMAGE
    assert slide.page_index == 0
    assert slide.selected is True
    assert slide.source_file == "photo.png"
    d = slide.dimensions
    assert (d.width, d.height, d.scaled_width, d.scaled_height) == (640, 480, 640, 480)


def test_full_image_is_original_bytes():
    data = make_image(320, 200, fmt="GIF")
    slide = decode(ImageDecoder(), data, "anim.gif")
    assert slide.full_image == data


def test_thumbnail_fits_box():
    landscape = decode(ImageDecoder(), make_image(1200, 400))
    portrait = decode(ImageDecoder(), make_image(300, 900))

    with Image.open(io.BytesIO(landscape.thumbnail)) as thumb:
        assert thumb.format == "JPEG"
        assert thumb.size == (300, 100)

    with Image.open(io.BytesIO(portrait.thumbnail)) as thumb:
        assert thumb.size == (75, 225)


def test_undecodable_image_yields_placeholder_with_default_dimensions():
    slide = decode(ImageDecoder(), b"not an image at all", "broken.jpg")

    assert is_placeholder(slide.full_image)
    assert slide.selected is True
    assert slide.page_index == 0
    assert (slide.dimensions.width, slide.dimensions.height) == (800, 600)


def test_zero_dimensions_default_to_800x600():
    decoder = ImageDecoder(loader=lambda data: Image.new("RGB", (0, 0)))
    slide = decode(decoder, b"ignored")

    assert slide.dimensions.width == 800
    assert slide.dimensions.height == 600
    with Image.open(io.BytesIO(slide.thumbnail)) as thumb:
        assert thumb.size == (300, 225)
