"""Pytest fixtures for Pocket RoK tests."""
import random

import pytest
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent.parent


@pytest.fixture
def project_root():
    """Return the project root path."""
    return PROJECT_ROOT


@pytest.fixture
def bus():
    """A private EventBus so handlers don't leak between tests."""
    from pocketrok.core.events import EventBus
    return EventBus()


@pytest.fixture
def world():
    """A World seeded for reproducible camps."""
    from pocketrok.core.world import World
    return World(rng=random.Random(42))


@pytest.fixture
def rich_world(world):
    """A World with enough of everything to afford any single action."""
    from pocketrok.core.world import Resources
    world.resources = Resources(food=10000, wood=10000, stone=10000, gold=10000)
    return world


@pytest.fixture
def economy(world, bus):
    from pocketrok.core.systems import ResourceSystem
    return ResourceSystem(world, bus)


@pytest.fixture
def selection(world):
    from pocketrok.core.selection import SelectionManager
    return SelectionManager(world)


@pytest.fixture
def save_path(tmp_path):
    return tmp_path / "save.json"


@pytest.fixture
def game(save_path):
    """Create a full Game instance (without renderer)."""
    from pocketrok.main import Game
    g = Game(seed=7, save_path=save_path)
    g.setup()
    return g
