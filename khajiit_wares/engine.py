"""Caption compositing pipeline.

``compose`` turns raw photo bytes and two caption strings into JPEG bytes:
decode, render both captions, fit them to the photo width, blend them in
at the outer margin and encode. Every step works on buffers owned by the
call, so a single font can be shared by concurrent callers. Failures are
raised as :class:`~khajiit_wares.errors.EngineError` subclasses and no
partially composited image is ever returned.
"""

import logging

from io import BytesIO

from PIL import Image, ImageFont

from khajiit_wares import config
from khajiit_wares.compositor import composite, fit_to_width
from khajiit_wares.errors import DecodeError, EncodeError
from khajiit_wares.meme_text_renderer import CaptionStyle, MemeTextRenderer

logger = logging.getLogger(__name__)

ALT_TEXT = config.ALT_TEXT


def decode_photo(data: bytes) -> Image.Image:
    try:
        with Image.open(BytesIO(data)) as image:
            image.load()
            photo = image.convert("RGBA")
    except (OSError, ValueError, Image.DecompressionBombError) as error:
        raise DecodeError(f"Unable to decode source image: {error}") from error

    if photo.width == 0 or photo.height == 0:
        raise DecodeError(f"Source image has no area: {photo.size}")
    return photo


def encode_jpeg(image: Image.Image, quality: int = config.JPEG_QUALITY) -> bytes:
    buffered = BytesIO()
    try:
        image.convert("RGB").save(buffered, format="JPEG", quality=quality)
    except (OSError, ValueError) as error:
        raise EncodeError(f"Unable to encode image: {error}") from error
    return buffered.getvalue()


def draw_on_image(
    photo: Image.Image,
    renderer: MemeTextRenderer,
    top_text: str,
    bottom_text: str,
) -> Image.Image:
    """Return a new image with both captions blended onto *photo*."""
    top = fit_to_width(renderer.render(top_text), photo.width)
    bottom = fit_to_width(renderer.render(bottom_text), photo.width)
    return composite(photo, top, bottom, renderer.style.outer_margin)


def compose(
    photo_bytes: bytes,
    top_text: str,
    bottom_text: str,
    font: ImageFont.FreeTypeFont,
    style: CaptionStyle | None = None,
) -> bytes:
    renderer = MemeTextRenderer(font, style)
    photo = decode_photo(photo_bytes)
    logger.debug("Decoded %dx%d source photo", photo.width, photo.height)

    image = draw_on_image(photo, renderer, top_text, bottom_text)
    out = encode_jpeg(image, renderer.style.jpeg_quality)
    logger.debug("Encoded composite as %d bytes of JPEG", len(out))
    return out
