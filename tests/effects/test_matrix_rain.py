"""Tests for the matrix rain cascade."""

import math
import random

import pytest

from matrixfx.core.constants import RAIN_GLYPHS
from matrixfx.core.event_bus import Events
from matrixfx.effects.matrix_rain import MatrixRainEffect
from tests.mocks.mock_surface import FixedRandom


class TestResize:
    """Test column layout."""

    @pytest.mark.parametrize("width,height", [(140, 100), (1000, 37), (13, 50), (1920, 1080)])
    def test_column_count_and_positions(self, context, surface, width, height) -> None:  # type: ignore
        """Test column count is floor(width / cell) and every column starts on screen."""
        surface.set_size(width, height)
        rain = MatrixRainEffect(context)
        rain.init()

        assert len(rain.columns) == math.floor(width / 14)
        for column in rain.columns:
            assert 0 <= column.y < height
            assert 0.3 <= column.speed < 1.5
            assert 0.1 <= column.opacity < 0.4

    def test_viewport_resize_resizes_surface(self, context, surface, event_bus) -> None:  # type: ignore
        """Test a viewport resize sets the surface size and rebuilds columns."""
        rain = MatrixRainEffect(context)
        rain.init()

        event_bus.emit(Events.VIEWPORT_RESIZED, width=280, height=50)

        assert (surface.width, surface.height) == (280, 50)
        assert len(rain.columns) == 20
        assert all(0 <= c.y < 50 for c in rain.columns)


class TestTick:
    """Test one animation frame."""

    def test_paints_trail_and_one_glyph_per_column(self, context, surface, scheduler) -> None:  # type: ignore
        """Test a frame fades the surface then draws every column."""
        rain = MatrixRainEffect(context)
        rain.init()
        before = [(c.y, c.opacity) for c in rain.columns]

        scheduler.run_frames()

        rects = surface.of_kind("rect")
        texts = surface.of_kind("text")
        assert rects == [("rect", 0, 0, 140, 100, (5, 5, 5, 0.04))]
        assert len(texts) == 10
        for i, (_, glyph, x, y, color, size) in enumerate(texts):
            assert glyph in RAIN_GLYPHS
            assert x == i * 14
            assert (y, color[3]) == before[i]
            assert color[:3] == (0, 255, 136)
            assert size == 14

    def test_columns_advance_by_speed(self, context, scheduler) -> None:  # type: ignore
        rain = MatrixRainEffect(context)
        rain.init()
        before = [(c.y, c.speed) for c in rain.columns]

        scheduler.run_frames()

        for (y, speed), column in zip(before, rain.columns, strict=True):
            if y + speed * 14 * 0.4 <= 100:
                assert column.y == pytest.approx(y + speed * 14 * 0.4)

    def test_light_theme_colors(self, context, surface, scheduler, page) -> None:  # type: ignore
        page.body.add_class("light-mode")
        rain = MatrixRainEffect(context)
        rain.init()

        scheduler.run_frames()

        assert surface.of_kind("rect")[0][5] == (248, 248, 248, 0.04)
        assert surface.of_kind("text")[0][4][:3] == (0, 180, 100)

    def test_loop_continues_each_frame(self, context, surface, scheduler) -> None:  # type: ignore
        rain = MatrixRainEffect(context)
        rain.init()

        scheduler.run_frames(5)

        assert len(surface.of_kind("rect")) == 5
        assert scheduler.pending_frames == 1


class TestColumnReset:
    """Test the probabilistic restart of fallen columns."""

    def test_no_reset_when_check_fails(self, context, scheduler) -> None:  # type: ignore
        context.rng = FixedRandom(0.5)
        rain = MatrixRainEffect(context)
        rain.init()
        rain.columns[0].y = 150

        scheduler.run_frames()

        assert rain.columns[0].y > 150

    def test_reset_when_check_passes(self, context, scheduler) -> None:  # type: ignore
        context.rng = FixedRandom(0.99)
        rain = MatrixRainEffect(context)
        rain.init()
        rain.columns[0].y = 150

        scheduler.run_frames()

        assert rain.columns[0].y == 0
        assert rain.columns[0].speed == pytest.approx(0.3 + 0.99 * 1.2)
        assert rain.columns[0].opacity == pytest.approx(0.1 + 0.99 * 0.3)

    def test_on_screen_column_never_resets(self, context, scheduler) -> None:  # type: ignore
        context.rng = FixedRandom(0.99)
        rain = MatrixRainEffect(context)
        rain.init()
        rain.columns[0].y = 10

        scheduler.run_frames()

        assert rain.columns[0].y > 10


class TestLifecycle:
    """Test init and destroy."""

    def test_missing_surface(self, context, scheduler, page, caplog) -> None:  # type: ignore
        """Test missing surface is logged and skipped."""
        context.surface = None
        rain = MatrixRainEffect(context)

        assert rain.init() is False
        assert rain.active is False
        assert scheduler.pending_frames == 0
        assert not page.body.has_class("matrix-enhanced")
        assert "Matrix canvas not found" in caplog.text

    def test_init_is_idempotent(self, context, scheduler) -> None:  # type: ignore
        rain = MatrixRainEffect(context)
        rain.init()
        rain.init()

        assert scheduler.pending_frames == 1

    def test_destroy_cancels_everything(self, context, scheduler, surface, event_bus, page) -> None:  # type: ignore
        rain = MatrixRainEffect(context)
        rain.init()
        assert page.body.has_class("matrix-enhanced")

        rain.destroy()
        rain.destroy()

        assert scheduler.pending_frames == 0
        assert event_bus.subscriber_count(Events.VIEWPORT_RESIZED) == 0
        assert not page.body.has_class("matrix-enhanced")

        calls = len(surface.calls)
        scheduler.run_frames(3)
        assert len(surface.calls) == calls

    def test_seeded_runs_are_reproducible(self, context, scheduler, surface) -> None:  # type: ignore
        frames = []
        for _ in range(2):
            context.rng = random.Random(99)
            surface.calls.clear()
            rain = MatrixRainEffect(context)
            rain.init()
            scheduler.run_frames(3)
            rain.destroy()
            frames.append(list(surface.calls))

        assert frames[0] == frames[1]
