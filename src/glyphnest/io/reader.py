"""Font reader for loading TTF/OTF fonts.

This module provides the FontReader class for loading font files,
resolving characters to glyphs and reading font-wide metrics.
"""

from pathlib import Path
from typing import Any

from fontTools.ttLib import TTFont

from glyphnest.domain import FontMetrics
from glyphnest.exceptions import GlyphError, GlyphNotFoundError


class FontReader:
    """Loads TTF/OTF fonts and resolves characters to glyphs.

    Example:
        reader = FontReader(Path("font.ttf"))
        reader.load()
        glyph_name = reader.glyph_name_for("A")
        metrics = reader.font_metrics
    """

    def __init__(self, font_path: Path) -> None:
        """Initialize the font reader.

        Args:
            font_path: Path to the TTF or OTF font file
        """
        self._font_path = font_path
        self._font: TTFont | None = None
        self._cmap: dict[int, str] = {}
        self._glyph_set: Any = None

    @property
    def path(self) -> Path:
        return self._font_path

    def load(self) -> None:
        """Load the font file.

        Raises:
            FileNotFoundError: If font file does not exist
            Exception: If font file is invalid or cannot be loaded
        """
        if not self._font_path.exists():
            raise FileNotFoundError(f"Font file not found: {self._font_path}")

        self._font = TTFont(str(self._font_path))
        self._cmap = self._font.getBestCmap() or {}
        self._glyph_set = self._font.getGlyphSet()

    def _require_font(self) -> TTFont:
        if self._font is None:
            raise RuntimeError("Font not loaded. Call load() first.")
        return self._font

    @property
    def format(self) -> str:
        """Return font format.

        Returns:
            'TrueType' for TTF fonts, 'OpenType' for OTF fonts

        Raises:
            RuntimeError: If font has not been loaded yet
        """
        font = self._require_font()

        if "CFF " in font or "CFF2" in font:
            return "OpenType"
        return "TrueType"

    @property
    def units_per_em(self) -> int:
        """Return font's units per em.

        Raises:
            RuntimeError: If font has not been loaded yet
        """
        return self._require_font()["head"].unitsPerEm  # type: ignore[attr-defined]

    @property
    def glyph_count(self) -> int:
        """Return total number of glyphs in the font.

        Raises:
            RuntimeError: If font has not been loaded yet
        """
        return self._require_font()["maxp"].numGlyphs

    @property
    def font_metrics(self) -> FontMetrics:
        """Return the font's vertical metrics from the hhea table.

        Raises:
            RuntimeError: If font has not been loaded yet
        """
        font = self._require_font()
        hhea = font["hhea"]
        return FontMetrics(
            units_per_em=self.units_per_em,
            ascender=hhea.ascent,  # type: ignore[attr-defined]
            descender=hhea.descent,  # type: ignore[attr-defined]
        )

    @property
    def glyph_set(self) -> Any:
        """Return the fontTools glyph set.

        Raises:
            RuntimeError: If font has not been loaded yet
        """
        self._require_font()
        return self._glyph_set

    def glyph_name_for(self, char: str) -> str:
        """Resolve a character to its glyph name through the cmap.

        Args:
            char: A single character

        Returns:
            Glyph name

        Raises:
            GlyphError: If char is not exactly one character
            GlyphNotFoundError: If the font has no glyph for char
            RuntimeError: If font has not been loaded yet
        """
        self._require_font()

        if len(char) != 1:
            raise GlyphError(f"Expected a single character, got {char!r}")

        name = self._cmap.get(ord(char))
        if name is None:
            raise GlyphNotFoundError(char)
        return name

    def has_glyph(self, char: str) -> bool:
        """Check if the font maps char to a glyph."""
        self._require_font()
        return len(char) == 1 and ord(char) in self._cmap

    def advance_width(self, glyph_name: str) -> int:
        """Return the horizontal advance of a glyph in font units."""
        return self.glyph_set[glyph_name].width

    def close(self) -> None:
        """Close the font file and free resources."""
        if self._font is not None:
            self._font.close()
            self._font = None
            self._cmap = {}
            self._glyph_set = None

    def __enter__(self) -> "FontReader":
        """Context manager entry."""
        self.load()
        return self

    def __exit__(self, _exc_type: object, _exc_val: object, _exc_tb: object) -> None:
        """Context manager exit."""
        self.close()
