"""
Pocket RoK World - Simulation State

Features:
- Resource pools and per-hour production rates
- Building levels and army composition
- Fog of war (monotonic revealed grid)
- Camps placed from a seeded random source
- Scout token and current selection
"""
import math
import random
from dataclasses import dataclass, asdict
from typing import Dict, List, Optional, Set, Tuple

import numpy as np

from .config import (
    MAP_W,
    MAP_H,
    RESOURCE_KINDS,
    BUILDING_IDS,
    BUILDING_STATS,
    UNIT_TYPES,
    SCENARIO,
)
from .selection import Selection


@dataclass
class Resources:
    """Four named quantities. Used for pools, costs and rates alike."""
    food: float = 0.0
    wood: float = 0.0
    stone: float = 0.0
    gold: float = 0.0

    @classmethod
    def from_dict(cls, data: dict) -> "Resources":
        """Build from a partial mapping; missing kinds are zero."""
        return cls(**{k: float(data.get(k, 0)) for k in RESOURCE_KINDS})

    def to_dict(self) -> dict:
        return asdict(self)

    def scaled(self, factor: float) -> "Resources":
        return Resources(*(getattr(self, k) * factor for k in RESOURCE_KINDS))

    def covers(self, cost: "Resources") -> bool:
        """True if every component of cost fits in this pool."""
        return all(getattr(self, k) >= getattr(cost, k) for k in RESOURCE_KINDS)

    def add(self, other: "Resources") -> None:
        for k in RESOURCE_KINDS:
            setattr(self, k, getattr(self, k) + getattr(other, k))

    def subtract_floored(self, cost: "Resources") -> None:
        for k in RESOURCE_KINDS:
            setattr(self, k, getattr(self, k) - math.floor(getattr(cost, k)))


def compute_rates(buildings: Dict[str, int]) -> Resources:
    """Per-hour production derived from building levels."""
    rates = Resources()
    for building_id, stats in BUILDING_STATS.items():
        produces = stats.get("produces")
        if produces:
            level = buildings.get(building_id, 1)
            setattr(rates, produces, level * stats["rate_per_level"])
    return rates


@dataclass
class Camp:
    """A hostile encampment on the map."""
    id: int
    x: int
    y: int
    strength: int

    @property
    def pos(self) -> tuple:
        return (self.x, self.y)

    @property
    def alive(self) -> bool:
        return self.strength > 0

    def take_losses(self, amount: int) -> int:
        """Reduce strength, floored at zero. Returns what is left."""
        self.strength = max(0, self.strength - amount)
        return self.strength


class FogOfWar:
    """Revealed/hidden state for every map cell.

    Cells only ever go from hidden to revealed.
    """

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        self.grid = np.zeros((height, width), dtype=bool)

    def reveal(self, cx: int, cy: int, radius: int) -> Set[Tuple[int, int]]:
        """Reveal the (2r+1)x(2r+1) square around a cell.

        Returns set of newly revealed tiles.
        """
        x0, x1 = max(0, cx - radius), min(self.width, cx + radius + 1)
        y0, y1 = max(0, cy - radius), min(self.height, cy + radius + 1)
        if x0 >= x1 or y0 >= y1:
            return set()

        window = self.grid[y0:y1, x0:x1]
        hidden_y, hidden_x = np.nonzero(~window)
        newly_revealed = {(int(x0 + x), int(y0 + y)) for y, x in zip(hidden_y, hidden_x)}
        window[:, :] = True
        return newly_revealed

    def is_revealed(self, x: int, y: int) -> bool:
        """Check if a tile has been revealed."""
        if 0 <= x < self.width and 0 <= y < self.height:
            return bool(self.grid[int(y), int(x)])
        return False

    def nearest_hidden(self, x: int, y: int) -> Optional[Tuple[int, int]]:
        """Closest unrevealed cell to (x, y) by Euclidean distance.

        Ties resolve to the first cell in row-major order (lowest y, then x).
        """
        hidden = ~self.grid
        if not hidden.any():
            return None

        ys, xs = np.indices(self.grid.shape)
        dist_sq = (xs - x) ** 2 + (ys - y) ** 2
        dist_sq = np.where(hidden, dist_sq, dist_sq.max() + 1)
        ty, tx = divmod(int(np.argmin(dist_sq)), self.width)
        return (tx, ty)

    @property
    def revealed_count(self) -> int:
        return int(self.grid.sum())

    @property
    def fully_revealed(self) -> bool:
        return bool(self.grid.all())

    def to_rows(self) -> List[List[bool]]:
        return self.grid.tolist()

    def load_rows(self, rows) -> bool:
        """Replace the grid from nested lists. Returns False on bad shape."""
        if not isinstance(rows, list) or len(rows) != self.height:
            return False
        for row in rows:
            if not isinstance(row, list) or len(row) != self.width:
                return False
            if not all(isinstance(cell, bool) for cell in row):
                return False
        self.grid = np.array(rows, dtype=bool)
        return True


def generate_camps(rng: random.Random, count: int, x_range: tuple, y_range: tuple,
                   strength_range: tuple, first_id: int = 1) -> List[Camp]:
    """Place camps on distinct cells with random strength (bounds inclusive)."""
    cells = (x_range[1] - x_range[0] + 1) * (y_range[1] - y_range[0] + 1)
    if count > cells:
        raise ValueError(f"Cannot place {count} camps on {cells} cells")

    camps = []
    taken = set()
    while len(camps) < count:
        x = rng.randint(*x_range)
        y = rng.randint(*y_range)
        if (x, y) in taken:
            continue  # Re-roll occupied cell
        taken.add((x, y))
        strength = rng.randint(*strength_range)
        camps.append(Camp(id=first_id + len(camps), x=x, y=y, strength=strength))
    return camps


class World:
    """Game world state container."""

    def __init__(self, rng: Optional[random.Random] = None, scenario: Optional[dict] = None):
        self.rng = rng if rng is not None else random.Random()
        self.scenario = scenario if scenario is not None else SCENARIO
        self.width = MAP_W
        self.height = MAP_H

        # Economy
        self.resources = Resources.from_dict(self.scenario["starting_resources"])
        self.buildings: Dict[str, int] = {b: 1 for b in BUILDING_IDS}
        self.rates = compute_rates(self.buildings)
        self.army: Dict[str, int] = {u: 0 for u in UNIT_TYPES}

        # Map
        self.fog = FogOfWar(self.width, self.height)
        self.camps: Dict[int, Camp] = {}
        self.next_id = 1
        sx, sy = self.scenario["scout_start"]
        self.scout_pos: Tuple[int, int] = (sx, sy)
        self.selection: Optional[Selection] = None

        self.game_time = 0.0

        self.spawn_camps()
        self.fog.reveal(sx, sy, self.scenario["scout_reveal_radius"])

    def spawn_camps(self) -> None:
        """Seed camps from the scenario's placement rules."""
        rules = self.scenario["camps"]
        camps = generate_camps(
            self.rng,
            count=rules["count"],
            x_range=tuple(rules["x_range"]),
            y_range=tuple(rules["y_range"]),
            strength_range=tuple(rules["strength_range"]),
            first_id=self.next_id,
        )
        for camp in camps:
            self.camps[camp.id] = camp
        self.next_id += len(camps)

    def get_camp(self, camp_id: int) -> Optional[Camp]:
        """Get a live camp by ID."""
        camp = self.camps.get(camp_id)
        if camp is not None and camp.alive:
            return camp
        return None

    def get_camp_at(self, x: int, y: int) -> Optional[Camp]:
        """Find a live camp on a cell."""
        for camp in self.camps.values():
            if camp.alive and camp.x == x and camp.y == y:
                return camp
        return None

    def remove_camp(self, camp_id: int) -> None:
        """Remove a camp from the world."""
        if camp_id in self.camps:
            del self.camps[camp_id]

    def visible_camps(self) -> List[Camp]:
        """Camps standing on revealed cells."""
        return [c for c in self.camps.values() if c.alive and self.fog.is_revealed(c.x, c.y)]

    def is_revealed(self, x: int, y: int) -> bool:
        return self.fog.is_revealed(x, y)

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    @property
    def total_army(self) -> int:
        return sum(self.army.values())
