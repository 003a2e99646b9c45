"""Glyphnest - Pack glyphs into the negative space of other glyphs.

Glyphnest places successive characters of a font into a viewport so that each
new glyph is as large as possible without overlapping the glyphs already
placed. Glyph outlines are rasterized, edge-traced and reduced to convex hulls,
and a stochastic search picks the position, rotation and scale of every new
glyph.

Example:
    $ glyphnest place NotoSans-Regular.ttf "nesting"

This prints the placement (x, y, rotation, scale) of every character.
"""

__version__ = "0.1.0"
__author__ = "Dimosthenis Kaponis"

__all__ = ["__author__", "__version__"]
