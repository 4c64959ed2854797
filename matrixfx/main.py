"""Headless preview: run the effects on a demo page and save the rain as PNG."""

import argparse
import logging
import random
import sys
from pathlib import Path

from PySide6.QtCore import QCoreApplication, QTimer

from matrixfx.core.config import MatrixFxConfig, load_config
from matrixfx.core.controller import EffectContext, EffectController, install_auto_init
from matrixfx.core.event_bus import EventBus, Events
from matrixfx.core.page import Page, PageElement
from matrixfx.core.scheduler import QtScheduler
from matrixfx.core.surface import PillowSurface
from matrixfx.utils.logger import setup_logging


def build_demo_page(width: int, height: int, event_bus: EventBus) -> Page:
    """Create a page with every element the effects look for."""
    page = Page(width, height, event_bus=event_bus)
    body = page.body

    body.append(PageElement("h1", "the-text", text="THE"))

    subtitle = PageElement("p", "hero-subtitle", text="A Historic Turning Point for Builders")
    subtitle.append(PageElement("span", "code-prompt", text=">"))
    body.append(subtitle)

    for label in ("BUILD", "SHIP", "REPEAT"):
        body.append(PageElement("h2", "section-label", text=label))
    body.append(PageElement("span", "metric-number", text="1,024"))

    return page


def run_preview(
    settings: MatrixFxConfig,
    width: int,
    height: int,
    duration_ms: int,
    output: Path,
    seed: int | None = None,
) -> Path:
    """Run all configured effects for duration_ms on the Qt event loop.

    Returns:
        Path of the saved PNG
    """
    app = QCoreApplication.instance() or QCoreApplication([])

    event_bus = EventBus()
    page = build_demo_page(width, height, event_bus)
    surface = PillowSurface(width, height, font_path=settings.rain.font_path)
    context = EffectContext(
        scheduler=QtScheduler(),
        page=page,
        event_bus=event_bus,
        surface=surface,
        rng=random.Random(seed),
        settings=settings,
    )
    controller = EffectController(context)
    install_auto_init(controller, event_bus, settings.effects)

    event_bus.emit(Events.PAGE_READY)
    for element in page.query_all("[data-decode]"):
        page.set_visibility(element, 1.0)

    QTimer.singleShot(duration_ms, app.quit)
    app.exec()

    logging.info(f"Active effects at end of preview: {controller.active_effects()}")
    controller.destroy()
    surface.save(output)
    return output


def main(argv: list[str] | None = None) -> None:
    """Preview entry point."""
    parser = argparse.ArgumentParser(description="Render a matrixfx preview frame")
    parser.add_argument("--config", type=Path, default=None, help="Path to config.yaml")
    parser.add_argument("--width", type=int, default=1280)
    parser.add_argument("--height", type=int, default=800)
    parser.add_argument("--duration-ms", type=int, default=3000)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--output", type=Path, default=Path("matrixfx_preview.png"))
    args = parser.parse_args(argv)

    try:
        settings = load_config(args.config)
    except FileNotFoundError as e:
        if args.config is not None:
            print(f"Error: {e}")
            sys.exit(1)
        settings = MatrixFxConfig()
    except ValueError as e:
        print(f"Invalid configuration: {e}")
        sys.exit(1)

    setup_logging(settings.logging)

    output = run_preview(
        settings, args.width, args.height, args.duration_ms, args.output, seed=args.seed
    )
    print(f"Preview written to {output}")


if __name__ == "__main__":
    main()
