"""Exception hierarchy for Glyphnest."""


class GlyphNestError(Exception):
    """Base exception for all Glyphnest errors."""

    pass


class FontError(GlyphNestError):
    """Errors related to font loading."""

    pass


class FontLoadError(FontError):
    """Error loading a font file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load font '{path}': {reason}")


class GlyphError(GlyphNestError):
    """Errors related to glyph lookup or analysis."""

    pass


class GlyphNotFoundError(GlyphError):
    """Requested character has no glyph in the font."""

    def __init__(self, glyph: str) -> None:
        self.glyph = glyph
        super().__init__(f"No glyph for character {glyph!r} in font")


class GlyphRasterError(GlyphError):
    """Error rendering or tracing a glyph."""

    def __init__(self, glyph: str, reason: str) -> None:
        self.glyph = glyph
        self.reason = reason
        super().__init__(f"Error rasterizing glyph {glyph!r}: {reason}")


class PlacementError(GlyphNestError):
    """Errors raised while computing a placement."""

    pass


class PlacementTimeoutError(PlacementError):
    """A dispatched placement did not finish in time."""

    def __init__(self, character_id: str, timeout: float) -> None:
        self.character_id = character_id
        self.timeout = timeout
        super().__init__(
            f"Placement for '{character_id}' did not finish within {timeout:.2f}s"
        )
