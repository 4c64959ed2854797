"""Tests for the effect controller."""

import logging

import pytest

from matrixfx.core.controller import ControllerPhase, install_auto_init
from matrixfx.core.event_bus import Events


class TestInit:
    """Test controller initialization."""

    def test_defaults(self, controller) -> None:  # type: ignore
        """Test default flags start everything except the mouse trail."""
        assert controller.phase == ControllerPhase.UNINITIALIZED
        assert controller.init() is True

        assert controller.phase == ControllerPhase.INITIALIZED
        assert controller.active_effects() == [
            "matrixRain",
            "glitch",
            "typing",
            "scanlines",
            "buttonGlow",
            "decode",
        ]

    def test_only_enabled_subset(self, controller) -> None:  # type: ignore
        controller.init(
            {
                "matrixRain": False,
                "typing": False,
                "scanlines": False,
                "buttonGlow": False,
                "decode": False,
            }
        )

        assert controller.active_effects() == ["glitch"]

    def test_snake_case_keys(self, controller) -> None:  # type: ignore
        controller.init({"mouse_trail": True})
        assert "mouseTrail" in controller.active_effects()

    def test_double_init_is_noop(self, controller, scheduler, caplog) -> None:  # type: ignore
        """Test a second init warns and starts nothing new."""
        assert controller.init({"glitch": True}) is True
        assert controller.init({"glitch": True}) is False

        assert scheduler.repeating_timers == 1
        assert scheduler.pending_frames == 1  # one matrix rain loop
        assert "already initialized" in caplog.text

    def test_missing_target_does_not_block_others(self, controller, page) -> None:  # type: ignore
        page.query(".the-text").remove()

        controller.init()

        assert "glitch" not in controller.active_effects()
        assert "typing" in controller.active_effects()
        assert "decode" in controller.active_effects()

    def test_failing_effect_is_isolated(self, controller, monkeypatch, caplog) -> None:  # type: ignore
        def explode() -> bool:
            raise RuntimeError("boom")

        monkeypatch.setattr(controller.effects["typing"], "init", explode)

        with caplog.at_level(logging.ERROR):
            controller.init()

        assert "typing" not in controller.active_effects()
        assert "decode" in controller.active_effects()
        assert controller.is_initialized
        assert "Error initializing effect typing" in caplog.text


class TestConstrainedViewport:
    """Test the constrained-device heuristic."""

    def test_costly_effects_skipped(self, controller, page) -> None:  # type: ignore
        page.resize(600, 900)

        controller.init({"mouseTrail": True})

        active = controller.active_effects()
        assert "matrixRain" not in active
        assert "scanlines" not in active
        assert "mouseTrail" not in active
        assert active == ["glitch", "typing", "buttonGlow", "decode"]

    def test_breakpoint_is_inclusive(self, controller, page) -> None:  # type: ignore
        page.resize(768, 900)
        assert controller.evaluate_viewport() is True

        page.resize(769, 900)
        assert controller.evaluate_viewport() is False

    def test_resize_reevaluates(self, controller, context, page, scheduler) -> None:  # type: ignore
        """Test the glitch timer stops auto-firing once the viewport shrinks."""
        controller.init()
        target = page.query(".the-text")

        page.resize(500, 900)
        assert context.constrained is True

        scheduler.advance(5000)
        assert not target.has_class("auto-glitch")

        page.resize(1400, 900)
        scheduler.advance(5000)
        assert target.has_class("auto-glitch")

    def test_shrink_stops_frame_loops(self, controller, page, scheduler) -> None:  # type: ignore
        """Test frame-driven effects stop once the viewport becomes constrained."""
        controller.init({"mouseTrail": True})
        assert scheduler.pending_frames == 2

        page.resize(500, 900)
        scheduler.run_frames()

        active = controller.active_effects()
        assert "matrixRain" not in active
        assert "mouseTrail" not in active
        assert "scanlines" not in active
        assert "glitch" in active
        assert scheduler.pending_frames == 0
        assert page.query_all(".mouse-trail-particle") == []
        assert not page.body.has_class("matrix-enhanced")

    def test_widen_restarts_enabled_effects(self, controller, page, scheduler, surface) -> None:  # type: ignore
        """Test effects skipped while constrained start when the viewport widens."""
        page.resize(500, 900)
        controller.init({"mouseTrail": True})
        assert scheduler.pending_frames == 0

        page.resize(1400, 900)

        active = controller.active_effects()
        assert "matrixRain" in active
        assert "mouseTrail" in active
        assert "scanlines" in active
        assert scheduler.pending_frames == 2
        assert (surface.width, surface.height) == (1400, 900)
        assert len(controller.effects["matrixRain"].columns) == 100

    def test_widen_keeps_disabled_effects_off(self, controller, page) -> None:  # type: ignore
        controller.init()
        controller.toggle("scanlines", False)

        page.resize(500, 900)
        page.resize(1400, 900)

        active = controller.active_effects()
        assert "matrixRain" in active
        assert "scanlines" not in active
        assert "mouseTrail" not in active

    def test_resize_within_range_keeps_effects(self, controller, page, scheduler) -> None:  # type: ignore
        controller.init()
        rain = controller.effects["matrixRain"]

        page.resize(1024, 700)

        assert rain.active
        assert scheduler.pending_frames == 1


class TestDestroy:
    """Test teardown."""

    def test_destroy_after_mouse_trail(self, controller, scheduler, page) -> None:  # type: ignore
        controller.init({"mouseTrail": True})
        assert len(page.query_all(".mouse-trail-particle")) == 8

        controller.destroy()

        assert controller.phase == ControllerPhase.DESTROYED
        assert scheduler.pending_frames == 0
        assert scheduler.pending_timers == 0
        assert page.query_all(".mouse-trail-particle") == []
        assert controller.active_effects() == []

    def test_destroy_cleans_body_classes(self, controller, page, event_bus) -> None:  # type: ignore
        controller.init()
        controller.destroy()

        assert page.body.classes == []
        assert page.observer_count == 0
        assert event_bus.subscriber_count(Events.VIEWPORT_RESIZED) == 0

    def test_destroy_twice(self, controller, scheduler) -> None:  # type: ignore
        controller.init()
        controller.destroy()
        controller.destroy()

        assert controller.phase == ControllerPhase.DESTROYED
        assert scheduler.pending_frames == 0

    def test_destroy_before_init(self, controller) -> None:  # type: ignore
        controller.destroy()
        assert controller.phase == ControllerPhase.DESTROYED

    def test_init_after_destroy(self, controller, scheduler) -> None:  # type: ignore
        controller.init()
        controller.destroy()

        assert controller.init() is True
        assert controller.is_initialized
        assert scheduler.repeating_timers == 1
        assert scheduler.pending_frames == 1


class TestToggle:
    """Test runtime toggling."""

    def test_glitch_off_on_keeps_one_timer(self, controller, scheduler) -> None:  # type: ignore
        controller.init()

        controller.toggle("glitch", False)
        assert scheduler.repeating_timers == 0
        assert controller.config.glitch is False

        controller.toggle("glitch", True)
        assert scheduler.repeating_timers == 1
        assert controller.config.glitch is True

    def test_toggle_on_twice(self, controller, scheduler) -> None:  # type: ignore
        controller.init({"glitch": False})

        controller.toggle("glitch", True)
        controller.toggle("glitch", True)

        assert scheduler.repeating_timers == 1

    def test_mouse_trail_toggle(self, controller, page, scheduler) -> None:  # type: ignore
        controller.init({"matrixRain": False})

        controller.toggle("mouseTrail", True)
        assert len(page.query_all(".mouse-trail-particle")) == 8
        assert scheduler.pending_frames == 1

        controller.toggle("mouseTrail", False)
        assert page.query_all(".mouse-trail-particle") == []
        assert scheduler.pending_frames == 0

    @pytest.mark.parametrize(
        "name,body_class",
        [("scanlines", "scanlines-enabled"), ("buttonGlow", "glow-enabled")],
    )
    def test_class_overlays(self, controller, page, name, body_class) -> None:  # type: ignore
        controller.init()

        controller.toggle(name, False)
        assert not page.body.has_class(body_class)

        controller.toggle(name, True)
        assert page.body.has_class(body_class)

    def test_non_runtime_effect_only_records_flag(self, controller) -> None:  # type: ignore
        controller.init()

        controller.toggle("decode", False)

        assert controller.config.decode is False
        assert "decode" in controller.active_effects()

    def test_unknown_name_is_ignored(self, controller) -> None:  # type: ignore
        controller.init()
        before = controller.config

        controller.toggle("sparkles", True)

        assert controller.config == before


class TestPublicOperations:
    """Test trigger_glitch, scanline strength and auto-init."""

    def test_trigger_glitch(self, controller, page, scheduler) -> None:  # type: ignore
        controller.init()
        target = page.query(".the-text")

        assert controller.trigger_glitch() is True
        assert target.has_class("auto-glitch")

        scheduler.advance(400)
        assert not target.has_class("auto-glitch")

    def test_trigger_glitch_when_disabled(self, controller, page) -> None:  # type: ignore
        controller.init({"glitch": False})
        assert controller.trigger_glitch() is False
        assert not page.query(".the-text").has_class("auto-glitch")

    def test_scanline_strength(self, controller, page) -> None:  # type: ignore
        controller.init()
        controller.set_scanline_strength(True)
        assert page.body.has_class("scanlines-strong")

    def test_auto_init_on_page_ready(self, controller, event_bus) -> None:  # type: ignore
        install_auto_init(controller, event_bus, {"mouseTrail": True})
        assert not controller.is_initialized

        event_bus.emit(Events.PAGE_READY)

        assert controller.is_initialized
        assert "mouseTrail" in controller.active_effects()
        assert event_bus.subscriber_count(Events.PAGE_READY) == 0


class TestDecodeScenario:
    """End-to-end decode through the controller."""

    def test_build_decodes_once(self, controller, page, scheduler) -> None:  # type: ignore
        controller.init(
            {
                "matrixRain": False,
                "glitch": False,
                "typing": False,
                "scanlines": False,
                "buttonGlow": False,
                "decode": True,
            }
        )
        target = page.query(".section-label")

        page.set_visibility(target, 1.0)
        scheduler.advance(1100)

        assert target.text == "BUILD"
        assert target.has_class("decoded")

        page.set_visibility(target, 1.0)
        assert target.text == "BUILD"
        assert scheduler.pending_timers == 0
