class EngineError(Exception):
    """Base class for every failure raised by the caption engine."""


class DecodeError(EngineError):
    """The source bytes could not be decoded into a photo."""


class GlyphLayoutError(EngineError):
    """A caption produced no glyph with a visible bounding box."""


class GeometryError(EngineError):
    """A caption bitmap does not fit the target photo."""


class EncodeError(EngineError):
    """The composited image could not be written as JPEG."""


class SourceError(Exception):
    """A source image could not be fetched."""
