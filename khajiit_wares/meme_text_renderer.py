import functools
import logging

from dataclasses import dataclass

import numpy as np

from PIL import Image, ImageDraw, ImageFont

from khajiit_wares import config
from khajiit_wares.blending import blend_color, clip_region, to_image
from khajiit_wares.errors import GlyphLayoutError

logger = logging.getLogger(__name__)


@functools.lru_cache(maxsize=None)
def load_font(path: str | None = None, size: int = config.FONT_SIZE) -> ImageFont.FreeTypeFont:
    """Load a TrueType font once per (path, size) and share it read-only.

    Without a path, Pillow's bundled scalable font is used.
    """
    if path:
        logger.info("Loading caption font %s at %spx", path, size)
        return ImageFont.truetype(path, size)
    logger.info("Loading Pillow default font at %spx", size)
    return ImageFont.load_default(size=size)


@dataclass(frozen=True)
class CaptionStyle:
    border_size: int = config.BORDER_SIZE
    text_margin: int = config.TEXT_MARGIN
    outer_margin: int = config.OUTER_MARGIN
    fill_color: tuple[int, int, int] = config.TEXT_FILL_COLOR
    border_color: tuple[int, int, int] = config.TEXT_STROKE_COLOR
    jpeg_quality: int = config.JPEG_QUALITY

    def __post_init__(self) -> None:
        if self.border_size < 0 or self.outer_margin < 0:
            raise ValueError("border_size and outer_margin must be non-negative")
        # The text margin is the padding that absorbs the border dilation.
        if self.text_margin < self.border_size:
            raise ValueError(
                f"text_margin ({self.text_margin}) must be at least "
                f"border_size ({self.border_size})"
            )


@dataclass(frozen=True)
class PositionedGlyph:
    char: str
    x: int
    y: int
    coverage: np.ndarray


@dataclass(frozen=True)
class GlyphRun:
    text: str
    glyphs: tuple[PositionedGlyph, ...]
    width: int
    height: int


class MemeTextRenderer:
    """Renders a single-line caption as an outlined RGBA bitmap.

    Rendering happens in three steps:

    1. Glyphs are laid out left to right from a baseline cursor at
       ``(margin, margin + ascent)``, using the font's advances and pair
       kerning, and each glyph's ink is cropped into a coverage array.
    2. Every glyph's coverage is smeared across a square kernel of
       ``2 * border_size + 1`` pixels in the border colour (a cheap
       dilation), for all glyphs.
    3. The fill colour is then painted with the unshifted coverage, so the
       fill always sits on top of the border.

    The renderer holds no mutable state; one instance can serve any number
    of captions.
    """

    def __init__(self, font: ImageFont.FreeTypeFont, style: CaptionStyle | None = None) -> None:
        self._font = font
        self._style = style or CaptionStyle()

    @property
    def style(self) -> CaptionStyle:
        return self._style

    def _glyph_coverage(self, char: str) -> tuple[int, int, np.ndarray] | None:
        """Return (left, top, coverage) relative to the pen on the baseline."""
        left, top, right, bottom = self._font.getbbox(char, anchor="ls")
        if right <= left or bottom <= top:
            return None

        mask = Image.new("L", (right - left, bottom - top), 0)
        ImageDraw.Draw(mask).text((-left, -top), char, font=self._font, fill=255, anchor="ls")
        ink = mask.getbbox()
        if ink is None:
            return None

        coverage = np.asarray(mask.crop(ink), dtype=np.float32) / 255.0
        return left + ink[0], top + ink[1], coverage

    def _kerning(self, previous: str, char: str) -> float:
        pair = self._font.getlength(previous + char)
        return pair - self._font.getlength(previous) - self._font.getlength(char)

    def layout_glyphs(self, text: str) -> GlyphRun:
        """Position every inked glyph of *text* inside a padded caption canvas."""
        margin = self._style.text_margin
        ascent, descent = self._font.getmetrics()
        baseline = margin + ascent

        placed: list[tuple[str, float, int, np.ndarray]] = []
        pen_x = float(margin)
        previous = ""
        for char in text:
            if previous:
                pen_x += self._kerning(previous, char)
            glyph = self._glyph_coverage(char)
            if glyph is not None:
                left, top, coverage = glyph
                placed.append((char, round(pen_x) + left, baseline + top, coverage))
            pen_x += self._font.getlength(char)
            previous = char

        if not placed:
            raise GlyphLayoutError(f"Caption {text!r} has no renderable glyphs")

        min_x = min(x for _, x, _, _ in placed)
        max_x = max(x + coverage.shape[1] for _, x, _, coverage in placed)
        shift = margin - min_x
        glyphs = tuple(
            PositionedGlyph(char=char, x=x + shift, y=y, coverage=coverage)
            for char, x, y, coverage in placed
        )
        return GlyphRun(
            text=text,
            glyphs=glyphs,
            width=(max_x - min_x) + 2 * margin,
            height=(ascent + descent) + 2 * margin,
        )

    @staticmethod
    def rasterize(run: GlyphRun) -> np.ndarray:
        """Merge the run's glyphs into one (height, width) coverage bitmap.

        The outline passes read per-glyph coverage directly; this merged view is
        for inspecting a layout, e.g. to find which pixels the fill pass touches.
        """
        coverage = np.zeros((run.height, run.width), dtype=np.float32)
        for glyph in run.glyphs:
            clipped = clip_region(coverage.shape, glyph.x, glyph.y, *glyph.coverage.shape)
            if clipped is None:
                continue
            canvas_region, patch_region = clipped
            target = coverage[canvas_region]
            target += glyph.coverage[patch_region] * (1.0 - target)
        return coverage

    def synthesize_outline(self, run: GlyphRun) -> Image.Image:
        """Paint the border pass for all glyphs, then the fill pass for all glyphs."""
        radius = self._style.border_size
        border = np.asarray(self._style.border_color, dtype=np.float32) / 255.0
        fill = np.asarray(self._style.fill_color, dtype=np.float32) / 255.0
        canvas = np.zeros((run.height, run.width, 4), dtype=np.float32)

        for glyph in run.glyphs:
            for dy in range(-radius, radius + 1):
                for dx in range(-radius, radius + 1):
                    blend_color(canvas, glyph.x + dx, glyph.y + dy, glyph.coverage, border)

        for glyph in run.glyphs:
            blend_color(canvas, glyph.x, glyph.y, glyph.coverage, fill)

        return to_image(canvas)

    def render(self, text: str) -> Image.Image:
        run = self.layout_glyphs(text)
        logger.debug(
            "Laid out %d glyphs for %r on a %dx%d canvas",
            len(run.glyphs),
            text,
            run.width,
            run.height,
        )
        return self.synthesize_outline(run)
