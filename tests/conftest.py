from io import BytesIO

import pytest

from PIL import Image

from khajiit_wares.meme_text_renderer import MemeTextRenderer, load_font

PHOTO_COLOR = (30, 120, 200)


@pytest.fixture
def font():
    return load_font(None, 128)


@pytest.fixture
def renderer(font):
    return MemeTextRenderer(font)


@pytest.fixture
def photo_color():
    return PHOTO_COLOR


@pytest.fixture
def make_photo():
    """Return a factory producing encoded solid-colour photos."""

    def _make(width: int, height: int, fmt: str = "PNG", color=PHOTO_COLOR) -> bytes:
        buffered = BytesIO()
        Image.new("RGB", (width, height), color).save(buffered, format=fmt)
        return buffered.getvalue()

    return _make
