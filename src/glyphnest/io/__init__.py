"""Font I/O layer for glyphnest.

This module handles reading font files using fonttools. It provides a
clean abstraction layer between fonttools and the shape analyzer.

Key responsibilities:
- Load TTF/OTF fonts
- Resolve characters to glyph names
- Read font metrics (units per em, ascender, descender)

Key classes:
- FontReader: Load fonts and look up glyphs
"""

from glyphnest.io.reader import FontReader

__all__ = [
    "FontReader",
]
