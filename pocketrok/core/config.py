"""
Pocket RoK Configuration
Contains game constants, file paths, and settings.
"""
import json
from pathlib import Path

# Paths
PACKAGE_ROOT = Path(__file__).parent.parent
PROJECT_ROOT = PACKAGE_ROOT.parent
DATA_DIR = PACKAGE_ROOT / "data"
SAVE_DIR = PROJECT_ROOT / "saves"
SAVE_KEY = "pocketrok-save-v1"
SAVE_FILE = SAVE_DIR / f"{SAVE_KEY}.json"
SAVE_VERSION = 1

# Map
MAP_W = 20
MAP_H = 15

# Display
TILE_SIZE = 32
SCREEN_WIDTH = 976
SCREEN_HEIGHT = 640
SIDEBAR_WIDTH = 320
MAP_OFFSET = (SIDEBAR_WIDTH + 8, 16)  # Top-left pixel of tile (0, 0)
FPS = 60

# Clock
TICK_SECONDS = 1.0  # Resource accrual step
SECONDS_PER_HOUR = 3600.0

# Resources, in display order
RESOURCE_KINDS = ("food", "wood", "stone", "gold")

# Buildings
CITYHALL = "cityhall"
BARRACKS = "barracks"

# Economy balance
UPGRADE_COST_STEP = 0.35  # Cost grows by 35% of base per level
TRAIN_BATCH = 10  # Units per train button press

# Combat balance
MIN_RATIO = 0.1
FAVOURABLE_RATIO = 0.9
ATTACKER_LOSS_FACTOR = 0.15
DEFENDER_LOSS_FACTOR = 0.35
LOSS_ORDER = ("infantry", "archer", "cavalry")


def load_building_stats() -> dict:
    """Load building stats from buildings.json"""
    with open(DATA_DIR / "buildings.json", "r") as f:
        return json.load(f)


def load_unit_stats() -> dict:
    """Load unit stats from units.json"""
    with open(DATA_DIR / "units.json", "r") as f:
        return json.load(f)


def load_scenario() -> dict:
    """Load scenario configuration"""
    with open(DATA_DIR / "scenario.json", "r") as f:
        return json.load(f)


# Pre-load stats for convenience (used by world.py and systems.py)
BUILDING_STATS = load_building_stats()
UNIT_STATS = load_unit_stats()
SCENARIO = load_scenario()

BUILDING_IDS = tuple(BUILDING_STATS.keys())
UNIT_TYPES = tuple(UNIT_STATS.keys())
