"""End-to-end nesting of several glyphs.

Places a sequence of glyphs one after another and verifies the resulting
layout geometrically: every glyph stays within the viewport margin and no
two hulls overlap.
"""

import pytest

from glyphnest.config import DispatchConfig, GlyphNestSettings, SearchConfig, SearchStrategy
from glyphnest.core import NestingEngine, PlacementDispatcher
from glyphnest.core.geometry import check_polygon_collision
from glyphnest.domain import FontMetrics, PlacedShape, PlacementRequest, Viewport

VIEWPORT = Viewport(1200, 900)
TEXT = "OIAL"


def nest(engine: NestingEngine, text: str, viewport: Viewport) -> list[PlacedShape]:
    shapes: list[PlacedShape] = []
    for index, char in enumerate(text):
        result = engine.calculate_optimal_placement(shapes, char, viewport)
        shapes.append(PlacedShape(glyph=char, character_id=str(index)).with_placement(result))
    return shapes


@pytest.fixture
def engine(font_path):
    settings = GlyphNestSettings(
        search=SearchConfig(strategy=SearchStrategy.GRID, grid_size=12, rotation_steps=4)
    )
    with NestingEngine.from_font(font_path, settings) as nesting_engine:
        yield nesting_engine


class TestSequentialNesting:
    """Tests for a full layout built glyph by glyph."""

    def test_layout_has_no_overlaps(self, engine):
        shapes = nest(engine, TEXT, VIEWPORT)
        reference_size = engine.analyzer.reference_size

        assert [s.glyph for s in shapes] == list(TEXT)
        for i, a in enumerate(shapes):
            hull_a = engine.analyzer.analyze(a.glyph).hull
            for b in shapes[i + 1 :]:
                hull_b = engine.analyzer.analyze(b.glyph).hull
                assert not check_polygon_collision(
                    hull_a, a.transform(reference_size), hull_b, b.transform(reference_size), margin=0
                ), f"{a.glyph!r} overlaps {b.glyph!r}"

    def test_layout_within_margin(self, engine):
        shapes = nest(engine, TEXT, VIEWPORT)
        for shape in shapes[1:]:
            assert not engine.exceeds_viewport(shape.x, shape.y, shape.rotation, shape.scale, VIEWPORT)

    def test_glyphs_shrink_as_space_fills(self, engine):
        shapes = nest(engine, TEXT, VIEWPORT)
        assert shapes[0].scale == pytest.approx(720)
        assert all(s.scale < shapes[0].scale for s in shapes[1:])

    def test_relayout_keeps_fixed_shapes(self, engine):
        shapes = nest(engine, "OI", VIEWPORT)
        composing = [
            PlacedShape(glyph="A", character_id="2", is_composing=True),
            PlacedShape(glyph="L", character_id="3", is_composing=True),
        ]

        result = engine.recalculate_all_placements(shapes + composing, VIEWPORT)

        assert result[:2] == shapes
        assert [s.character_id for s in result[2:]] == ["2", "3"]
        assert engine.logger.stats.fallbacks == 0


class TestProcessDispatch:
    """Tests for dispatch through a real process pool."""

    def test_process_pool_placement(self, font_path):
        settings = GlyphNestSettings(
            search=SearchConfig(attempts=20, rotation_steps=2, seed=11),
            dispatch=DispatchConfig(max_workers=2, timeout_seconds=60.0),
        )
        metrics = FontMetrics(units_per_em=1000, ascender=800, descender=-200)
        existing = (PlacedShape(glyph="O", x=600, y=450, scale=300, character_id="0"),)

        with PlacementDispatcher(font_path, settings) as dispatcher:
            for index, char in enumerate("IA", start=1):
                dispatcher.submit(
                    PlacementRequest(
                        character_id=str(index),
                        existing_shapes=existing,
                        new_glyph=char,
                        viewport_width=VIEWPORT.width,
                        viewport_height=VIEWPORT.height,
                        font_metrics=metrics,
                    )
                )
            responses = {r.character_id: r for r in dispatcher.completed()}

        assert set(responses) == {"1", "2"}
        assert not any(r.is_fallback for r in responses.values())
        assert all(r.placement.scale >= 15 for r in responses.values())
