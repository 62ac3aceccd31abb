#!/usr/bin/env python3
"""
Pocket RoK - Game Controller & Entry Point
==========================================

Run with: python -m pocketrok.main [--verbose] [--seed N]

The Game object owns the world, the systems and the one-second
resource clock. Frontends only call its intents (upgrade, train,
scout, attack, select_tile, save, reset) and read its queries.
"""
import argparse
import random
import sys
import time
from pathlib import Path
from typing import List, Optional

from pocketrok.core.config import (
    TICK_SECONDS,
    TRAIN_BATCH,
    UNIT_STATS,
    SCREEN_WIDTH,
    SCREEN_HEIGHT,
)
from pocketrok.core.events import (
    EventBus,
    SelectionChangedEvent,
    GameSavedEvent,
    GameLoadedEvent,
    GameResetEvent,
)
from pocketrok.core.effects import StatusLog, LoggerHandler, fmt
from pocketrok.core.persistence import JsonSaveStore, snapshot, restore
from pocketrok.core.results import ActionResult
from pocketrok.core.selection import Selection, SelectionManager
from pocketrok.core.systems import (
    ResourceSystem,
    UpgradeSystem,
    TrainingSystem,
    ScoutingSystem,
    CombatSystem,
)
from pocketrok.core.world import World, Camp, Resources


class Game:
    """Main game controller."""

    TICK_SECONDS = TICK_SECONDS

    def __init__(self, seed: Optional[int] = None, save_path: Optional[Path] = None,
                 verbose: bool = False, debug: bool = False, bus: Optional[EventBus] = None):
        self.seed = seed
        self.verbose = verbose
        self.debug = debug
        self.running = True
        self.bus = bus or EventBus()
        self.store = JsonSaveStore(save_path)

        # Handlers
        self.status = StatusLog(self.bus)
        self.logger = LoggerHandler(verbose=True, bus=self.bus) if verbose else None

        self._build_world(random.Random(seed))

        # Clock
        self.clock_running = False
        self.accumulator = 0.0
        self.last_time = time.time()

    def _build_world(self, rng: random.Random) -> None:
        """Create a fresh world and the systems that act on it."""
        self.world = World(rng=rng)
        self.selection = SelectionManager(self.world)
        self.economy = ResourceSystem(self.world, self.bus)
        self.upgrades = UpgradeSystem(self.world, self.economy, self.bus)
        self.training = TrainingSystem(self.world, self.economy, self.bus)
        self.scouting = ScoutingSystem(self.world, self.economy, self.bus)
        self.combat = CombatSystem(self.world, self.economy, self.selection, self.bus)

    def setup(self) -> None:
        """Merge the saved game (if any) and start the clock."""
        doc = self.store.load()
        if doc is not None:
            restore(self.world, doc)
            self.bus.publish(GameLoadedEvent(path=str(self.store.path)))
        self.economy.recalc_rates()
        self.start_clock()

    # === Clock ===

    def start_clock(self) -> None:
        """(Re)start accrual. Time spent stopped is not credited."""
        self.accumulator = 0.0
        self.last_time = time.time()
        self.clock_running = True

    def stop_clock(self) -> None:
        self.clock_running = False

    def update(self, now: Optional[float] = None) -> int:
        """Run every whole tick that has elapsed. Returns the tick count."""
        current_time = time.time() if now is None else now
        frame_time = current_time - self.last_time
        self.last_time = current_time

        if not self.clock_running:
            return 0

        self.accumulator += frame_time
        ticks = 0
        while self.accumulator >= self.TICK_SECONDS:
            self.tick(self.TICK_SECONDS)
            self.accumulator -= self.TICK_SECONDS
            ticks += 1
        return ticks

    def tick(self, dt: float) -> None:
        """Single simulation tick."""
        self.world.game_time += dt
        self.economy.update(dt)

    # === Intents ===

    def upgrade(self, building_id: str) -> ActionResult:
        return self.upgrades.upgrade(building_id)

    def train(self, unit_type: str, count: int = TRAIN_BATCH) -> ActionResult:
        return self.training.train(unit_type, count)

    def scout(self) -> ActionResult:
        return self.scouting.scout()

    def attack(self) -> ActionResult:
        return self.combat.attack()

    def select_tile(self, x: int, y: int) -> Optional[Selection]:
        """Select a revealed cell (and its camp, if one stands there)."""
        selection = self.selection.select_tile(x, y)
        if selection is not None:
            self.bus.publish(SelectionChangedEvent(
                kind=selection.kind,
                pos=selection.pos,
                camp_id=selection.camp_id
            ))
        return selection

    def save(self) -> ActionResult:
        self.store.save(snapshot(self.world))
        self.bus.publish(GameSavedEvent(path=str(self.store.path)))
        return ActionResult.success(path=str(self.store.path))

    def reset(self, seed: Optional[int] = None) -> ActionResult:
        """Wipe the save and start over with new camps and fresh fog."""
        self.stop_clock()
        self.store.clear()
        self.seed = seed
        self._build_world(random.Random(seed))
        self.bus.publish(GameResetEvent(seed=seed))
        self.start_clock()
        return ActionResult.success(seed=seed)

    def handle_action(self, action: str) -> Optional[ActionResult]:
        """Dispatch a frontend action string such as 'upgrade:farm' or 'scout'."""
        name, _, arg = action.partition(":")
        if name == "upgrade":
            return self.upgrade(arg)
        if name == "train":
            return self.train(arg)
        if name == "scout":
            return self.scout()
        if name == "attack":
            return self.attack()
        if name == "save":
            return self.save()
        if name == "reset":
            return self.reset()
        raise ValueError(f"Unknown action: {action!r}")

    # === Queries ===

    @property
    def resources(self) -> Resources:
        return self.world.resources

    @property
    def rates(self) -> Resources:
        return self.world.rates

    @property
    def buildings(self) -> dict:
        return self.world.buildings

    @property
    def army(self) -> dict:
        return self.world.army

    @property
    def scout_pos(self) -> tuple:
        return self.world.scout_pos

    @property
    def status_line(self) -> str:
        return self.status.latest

    @property
    def attack_enabled(self) -> bool:
        return self.selection.attack_enabled

    def is_revealed(self, x: int, y: int) -> bool:
        return self.world.is_revealed(x, y)

    def visible_camps(self) -> List[Camp]:
        return self.world.visible_camps()

    def upgrade_cost(self, building_id: str) -> Resources:
        return self.upgrades.next_cost(building_id)

    def cost_text(self, building_id: str = "farm") -> str:
        """Preview line for the next upgrade of a building."""
        level = self.world.buildings[building_id] + 1
        c = self.upgrade_cost(building_id)
        return (f"Example upgrade ({building_id.capitalize()}→L{level}) cost: "
                f"F{fmt(c.food)} W{fmt(c.wood)} S{fmt(c.stone)} G{fmt(c.gold)}")

    def train_cost_text(self, count: int = TRAIN_BATCH) -> str:
        parts = []
        for stats in UNIT_STATS.values():
            cost = stats["cost"]
            parts.append(f"{stats['short']} F{count * cost['food']}/W{count * cost['wood']}")
        return f"Train {count}: " + ", ".join(parts)

    def cleanup(self) -> None:
        """Cleanup game resources."""
        self.stop_clock()


def main():
    parser = argparse.ArgumentParser(description="Pocket RoK - tiny kingdom builder")
    parser.add_argument('--verbose', action='store_true',
                        help='Print event log to console')
    parser.add_argument('--debug', action='store_true',
                        help='Enable debug mode (draw the map without fog)')
    parser.add_argument('--seed', type=int, default=None,
                        help='Seed for camp placement')
    parser.add_argument('--save-file', type=Path, default=None,
                        help='Path of the JSON save slot')
    parser.add_argument('--reset', action='store_true',
                        help='Delete the save and start a new game')
    args = parser.parse_args()

    game = Game(seed=args.seed, save_path=args.save_file, verbose=args.verbose, debug=args.debug)
    if args.reset:
        game.store.clear()

    try:
        from frontends.pygame_renderer import PygameRenderer
        renderer = PygameRenderer(SCREEN_WIDTH, SCREEN_HEIGHT)
    except ImportError as e:
        print(f"Error: pygame is required to play: {e}")
        print("Install with: pip install pygame")
        sys.exit(1)

    game.setup()

    print("Pocket RoK started!")
    print("Controls: click tiles to select, sidebar buttons to act, S=Scout, A=Attack, F5=Save, ESC=Quit")

    try:
        while game.running:
            input_state = renderer.handle_input()

            if input_state['quit']:
                game.running = False
                break

            if input_state['cell_click'] is not None:
                game.select_tile(*input_state['cell_click'])

            if input_state['action']:
                game.handle_action(input_state['action'])

            game.update()
            renderer.render_frame(game, debug_mode=game.debug)

    except KeyboardInterrupt:
        pass
    finally:
        renderer.cleanup()
        game.cleanup()

    print("\nGame ended.")


if __name__ == '__main__':
    main()
