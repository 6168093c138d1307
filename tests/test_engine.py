from io import BytesIO

import numpy as np
import pytest

from PIL import Image

from khajiit_wares import config
from khajiit_wares.compositor import fit_to_width
from khajiit_wares.engine import ALT_TEXT, compose, decode_photo, draw_on_image, encode_jpeg
from khajiit_wares.errors import DecodeError, GeometryError, GlyphLayoutError


def open_jpeg(data: bytes) -> Image.Image:
    image = Image.open(BytesIO(data))
    assert image.format == "JPEG"
    return image.convert("RGB")


def has_white(band: np.ndarray) -> bool:
    return bool((band.min(axis=-1) > 220).any())


def test_khajiit_scenario(font, make_photo, photo_color):
    out = compose(make_photo(800, 600), config.TOP_TEXT, config.BOTTOM_TEXT, font)

    image = open_jpeg(out)
    assert image.size == (800, 600)

    pixels = np.asarray(image).astype(int)
    margin = config.OUTER_MARGIN
    assert has_white(pixels[margin:300])
    assert has_white(pixels[300 : 600 - margin])
    # The outer margin itself keeps the photo.
    assert np.abs(pixels[: margin - 2] - photo_color).max() < 12
    assert np.abs(pixels[600 - margin + 2 :] - photo_color).max() < 12


def test_narrow_photo_downscales_captions(renderer, font, make_photo):
    caption = renderer.render(config.TOP_TEXT)
    assert caption.width > 100

    assert fit_to_width(caption, 100).width == 100

    image = open_jpeg(compose(make_photo(100, 200), config.TOP_TEXT, config.BOTTOM_TEXT, font))
    assert image.size == (100, 200)


def test_short_photo_is_a_geometry_error(renderer, photo_color):
    top = fit_to_width(renderer.render(config.TOP_TEXT), 800)
    bottom = fit_to_width(renderer.render(config.BOTTOM_TEXT), 800)
    needed = top.height + bottom.height + 2 * config.OUTER_MARGIN

    fits = Image.new("RGBA", (800, needed), photo_color)
    assert draw_on_image(fits, renderer, config.TOP_TEXT, config.BOTTOM_TEXT).size == (800, needed)

    too_short = Image.new("RGBA", (800, needed - 1), photo_color)
    with pytest.raises(GeometryError):
        draw_on_image(too_short, renderer, config.TOP_TEXT, config.BOTTOM_TEXT)


def test_tiny_photo_through_compose(font, make_photo):
    with pytest.raises(GeometryError):
        compose(make_photo(800, 40), config.TOP_TEXT, config.BOTTOM_TEXT, font)


@pytest.mark.parametrize("data", [b"", b"definitely not an image", b"\x89PNG\r\n\x1a\n\x00\x00"])
def test_undecodable_bytes(font, data):
    with pytest.raises(DecodeError):
        compose(data, config.TOP_TEXT, config.BOTTOM_TEXT, font)


def test_blank_caption(font, make_photo):
    with pytest.raises(GlyphLayoutError):
        compose(make_photo(800, 600), "   ", config.BOTTOM_TEXT, font)


def test_output_is_jpeg_whatever_the_input(font, make_photo):
    out = compose(make_photo(640, 480, fmt="JPEG"), "WARES", "COIN", font)

    assert open_jpeg(out).size == (640, 480)


def test_decode_photo_converts_to_rgba(make_photo):
    photo = decode_photo(make_photo(12, 7, fmt="GIF"))

    assert photo.mode == "RGBA"
    assert photo.size == (12, 7)


def test_encode_jpeg_flattens_alpha():
    image = Image.new("RGBA", (8, 8), (10, 20, 30, 0))

    assert open_jpeg(encode_jpeg(image)).size == (8, 8)


def test_alt_text_is_fixed():
    assert ALT_TEXT == "Khajiit has wares, if you have coin."
