"""Pytest configuration and fixtures."""

import random

import pytest

from matrixfx.core.config import MatrixFxConfig
from matrixfx.core.controller import EffectContext, EffectController
from matrixfx.core.event_bus import EventBus
from matrixfx.core.page import Page, PageElement
from matrixfx.core.scheduler import ManualScheduler
from tests.mocks.mock_surface import RecordingSurface


@pytest.fixture(scope="session")
def qapp():
    """Create QCoreApplication instance for tests using QTimer."""
    from PySide6.QtCore import QCoreApplication

    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication([])
    yield app


@pytest.fixture
def scheduler() -> ManualScheduler:
    """Provide virtual-clock scheduler."""
    return ManualScheduler()


@pytest.fixture
def event_bus() -> EventBus:
    """Provide event bus."""
    return EventBus()


@pytest.fixture
def page(event_bus: EventBus) -> Page:
    """Provide a desktop-sized page with every element the effects use."""
    page = Page(1280, 800, event_bus=event_bus)
    body = page.body

    body.append(PageElement("h1", "the-text", text="THE"))

    subtitle = PageElement("p", "hero-subtitle", text="Hello")
    subtitle.append(PageElement("span", "code-prompt", text=">"))
    body.append(subtitle)

    body.append(PageElement("h2", "section-label", text="BUILD"))
    body.append(PageElement("span", "metric-number", text="42"))
    return page


@pytest.fixture
def surface() -> RecordingSurface:
    """Provide recording surface (10 columns at the default font size)."""
    return RecordingSurface(140, 100)


@pytest.fixture
def settings() -> MatrixFxConfig:
    """Provide default settings."""
    return MatrixFxConfig()


@pytest.fixture
def context(scheduler, page, event_bus, surface, settings) -> EffectContext:  # type: ignore
    """Provide effect context with a seeded random source."""
    return EffectContext(
        scheduler=scheduler,
        page=page,
        event_bus=event_bus,
        surface=surface,
        rng=random.Random(1234),
        settings=settings,
    )


@pytest.fixture
def controller(context: EffectContext) -> EffectController:
    """Provide effect controller."""
    return EffectController(context)
