"""
Save / Load

snapshot() turns a World into a JSON-ready document, restore() merges a
document back onto a freshly built World field by field. Anything missing
or malformed keeps the fresh world's default, so old saves keep loading
after the schema grows.
"""
import json
import math
from pathlib import Path
from typing import Any, Optional

from .config import SAVE_FILE, SAVE_VERSION, RESOURCE_KINDS
from .selection import Selection, TILE, CAMP
from .world import Camp, World, compute_rates


def snapshot(world: World) -> dict:
    """Serialize the whole simulation state."""
    selection = None
    if world.selection is not None:
        selection = {"type": world.selection.kind, "x": world.selection.x, "y": world.selection.y}

    return {
        "version": SAVE_VERSION,
        "resources": world.resources.to_dict(),
        "rates": world.rates.to_dict(),
        "buildings": dict(world.buildings),
        "army": dict(world.army),
        "map": {
            "revealed": world.fog.to_rows(),
            "camps": [
                {"id": c.id, "x": c.x, "y": c.y, "str": c.strength}
                for c in world.camps.values()
            ],
            "scoutPos": {"x": world.scout_pos[0], "y": world.scout_pos[1]},
            "select": selection,
        },
    }


def restore(world: World, doc: Any) -> World:
    """Merge a snapshot onto `world` (normally a fresh one) and return it."""
    if not isinstance(doc, dict):
        return world

    resources = _section(doc, "resources")
    for kind in RESOURCE_KINDS:
        value = resources.get(kind)
        if _is_number(value) and value >= 0:
            setattr(world.resources, kind, float(value))

    buildings = _section(doc, "buildings")
    for building_id in world.buildings:
        level = buildings.get(building_id)
        if _is_int(level) and level >= 1:
            world.buildings[building_id] = level

    army = _section(doc, "army")
    for unit_type in world.army:
        count = army.get(unit_type)
        if _is_int(count) and count >= 0:
            world.army[unit_type] = count

    # Rates are derived, never trusted from disk
    world.rates = compute_rates(world.buildings)

    map_doc = _section(doc, "map")
    _restore_scout(world, map_doc.get("scoutPos"))
    fog_loaded = world.fog.load_rows(map_doc.get("revealed"))
    if not fog_loaded:
        sx, sy = world.scout_pos
        world.fog.reveal(sx, sy, world.scenario["scout_reveal_radius"])
    _restore_camps(world, map_doc.get("camps"))
    _restore_selection(world, map_doc.get("select"))
    return world


def _section(doc: dict, key: str) -> dict:
    value = doc.get(key)
    return value if isinstance(value, dict) else {}


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def _restore_scout(world: World, pos: Any) -> None:
    if not isinstance(pos, dict):
        return
    x, y = pos.get("x"), pos.get("y")
    if _is_int(x) and _is_int(y) and world.in_bounds(x, y):
        world.scout_pos = (x, y)


def _restore_camps(world: World, entries: Any) -> None:
    """Replace the generated camps with the saved ones, skipping bad entries."""
    if not isinstance(entries, list):
        return

    parsed = []
    used_ids = set()
    for entry in entries:
        if not isinstance(entry, dict):
            continue  # Skip invalid entries
        x, y, strength = entry.get("x"), entry.get("y"), entry.get("str")
        if not (_is_int(x) and _is_int(y) and world.in_bounds(x, y)):
            continue
        if not _is_int(strength) or strength <= 0:
            continue
        camp_id = entry.get("id")
        if not _is_int(camp_id) or camp_id < 1 or camp_id in used_ids:
            camp_id = None
        else:
            used_ids.add(camp_id)
        parsed.append((camp_id, x, y, strength))

    # Entries without a usable id are numbered after the known ones
    next_id = max(used_ids, default=0) + 1
    world.camps = {}
    for camp_id, x, y, strength in parsed:
        if camp_id is None:
            camp_id = next_id
            next_id += 1
        world.camps[camp_id] = Camp(id=camp_id, x=x, y=y, strength=strength)
    world.next_id = next_id


def _restore_selection(world: World, data: Any) -> None:
    world.selection = None
    if not isinstance(data, dict):
        return
    kind, x, y = data.get("type"), data.get("x"), data.get("y")
    if kind not in (TILE, CAMP) or not (_is_int(x) and _is_int(y)):
        return
    if not world.is_revealed(x, y):
        return

    if kind == CAMP:
        camp = world.get_camp_at(x, y)
        if camp is None:
            return
        world.selection = Selection(kind=CAMP, x=x, y=y, camp_id=camp.id)
    else:
        world.selection = Selection(kind=TILE, x=x, y=y)


class JsonSaveStore:
    """Save slot backed by a single JSON file."""

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path is not None else SAVE_FILE

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> Optional[dict]:
        """Read the saved document, or None if there is no usable save."""
        if not self.path.exists():
            return None
        try:
            with open(self.path, "r") as f:
                doc = json.load(f)
        except (OSError, ValueError) as e:
            print(f"[SAVE] Ignoring unreadable save {self.path}: {e}")
            return None
        if not isinstance(doc, dict):
            print(f"[SAVE] Ignoring save {self.path}: expected an object")
            return None
        return doc

    def save(self, doc: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w") as f:
            json.dump(doc, f)

    def clear(self) -> None:
        """Delete the stored snapshot."""
        if self.path.exists():
            self.path.unlink()
