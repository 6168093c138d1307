import logging

from PIL import Image

from khajiit_wares.errors import GeometryError

logger = logging.getLogger(__name__)


def fit_to_width(caption: Image.Image, target_width: int) -> Image.Image:
    """Make *caption* exactly ``target_width`` pixels wide.

    Narrow captions are centred on a transparent canvas without resampling,
    wide ones are downscaled with their aspect ratio kept.
    """
    width, height = caption.size
    if width < target_width:
        out = Image.new("RGBA", (target_width, height), (0, 0, 0, 0))
        out.paste(caption, ((target_width - width) // 2, 0))
        return out

    if width > target_width:
        new_height = max(1, round(height * target_width / width))
        logger.debug("Downscaling caption %dx%d to %dx%d", width, height, target_width, new_height)
        return caption.resize((target_width, new_height), Image.Resampling.BICUBIC)

    return caption


def composite(
    photo: Image.Image,
    top: Image.Image,
    bottom: Image.Image,
    margin: int,
) -> Image.Image:
    """Blend *top* and *bottom* onto a copy of *photo* at the outer margin."""
    photo_width, photo_height = photo.size
    for name, caption in (("top", top), ("bottom", bottom)):
        if caption.width != photo_width:
            raise GeometryError(
                f"{name} caption is {caption.width}px wide, photo is {photo_width}px"
            )

    needed = top.height + bottom.height + 2 * margin
    if needed > photo_height:
        raise GeometryError(
            f"Captions need {needed}px of height, photo is only {photo_height}px tall"
        )

    # convert() always returns a new image, so the source photo stays untouched.
    out = photo.convert("RGBA")
    out.alpha_composite(top.convert("RGBA"), dest=(0, margin))
    out.alpha_composite(bottom.convert("RGBA"), dest=(0, photo_height - bottom.height - margin))
    return out
