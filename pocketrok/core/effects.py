"""
Pocket RoK Effects - Event Handlers

- StatusLog: the single most recent status line shown on the HUD
- LoggerHandler: console event log (--verbose)
"""
import math
from typing import List, Optional

from .config import BUILDING_STATS, UNIT_STATS
from .results import Reason
from .events import (
    event_bus,
    EventBus,
    BuildingUpgradedEvent,
    UnitsTrainedEvent,
    ActionRejectedEvent,
    ScoutMovedEvent,
    BattleEvent,
    CampDestroyedEvent,
    GameSavedEvent,
    GameLoadedEvent,
    GameResetEvent,
)


def fmt(n: float) -> str:
    """Floor to an int and group thousands (1234.9 -> '1,234')."""
    return f"{math.floor(n):,}"


def loot_text(loot: dict) -> str:
    return f"+{loot['food']}F +{loot['wood']}W +{loot['stone']}S +{loot['gold']}G"


class StatusLog:
    """Keeps only the latest user-facing message (no history)."""

    def __init__(self, bus: Optional[EventBus] = None):
        self.bus = bus or event_bus
        self.latest = ""
        self.bus.subscribe(BuildingUpgradedEvent, self.on_upgraded)
        self.bus.subscribe(UnitsTrainedEvent, self.on_trained)
        self.bus.subscribe(ActionRejectedEvent, self.on_rejected)
        self.bus.subscribe(BattleEvent, self.on_battle)
        self.bus.subscribe(CampDestroyedEvent, self.on_camp_destroyed)
        self.bus.subscribe(GameSavedEvent, self.on_saved)
        self.bus.subscribe(GameLoadedEvent, self.on_loaded)
        self.bus.subscribe(GameResetEvent, self.on_reset)

    def set(self, text: str) -> None:
        self.latest = text

    def on_upgraded(self, event: BuildingUpgradedEvent) -> None:
        self.set(f"Upgraded {event.building_id} to L{event.level}.")

    def on_trained(self, event: UnitsTrainedEvent) -> None:
        short = UNIT_STATS[event.unit_type]["short"]
        self.set(f"Trained {event.count} {short}.")

    def on_rejected(self, event: ActionRejectedEvent) -> None:
        if event.reason == Reason.GATED_BY_PREREQUISITE.value:
            level = event.details.get("required_cityhall")
            self.set(f"Upgrade gated by City Hall. Raise CH to {level} first.")
        elif event.reason == Reason.INSUFFICIENT_RESOURCES.value:
            if event.action == "train":
                self.set("Not enough resources to train.")
            else:
                self.set("Not enough resources.")
        elif event.reason == Reason.INSUFFICIENT_GOLD.value:
            gold = event.details.get("fee", {}).get("gold", 0)
            self.set(f"Need {fmt(gold)} gold to send scout.")
        elif event.reason == Reason.NO_BARRACKS.value:
            self.set("Build Barracks first.")
        elif event.reason == Reason.MAP_FULLY_REVEALED.value:
            self.set("World fully revealed!")
        elif event.reason == Reason.NO_SELECTION.value:
            self.set("Select a revealed camp first.")

    def on_battle(self, event: BattleEvent) -> None:
        if event.camp_remaining > 0:
            self.set(f"Battle ended. Our loss: {event.our_loss}, Camp remains: {event.camp_remaining}")

    def on_camp_destroyed(self, event: CampDestroyedEvent) -> None:
        self.set(f"Victory! Loot: {loot_text(event.loot)}")

    def on_saved(self, event: GameSavedEvent) -> None:
        self.set("Saved!")

    def on_loaded(self, event: GameLoadedEvent) -> None:
        self.set("Save loaded.")

    def on_reset(self, event: GameResetEvent) -> None:
        self.set("New game started.")


class LoggerHandler:
    """Simple handler that logs events to console."""

    def __init__(self, verbose: bool = False, bus: Optional[EventBus] = None):
        self.verbose = verbose
        self.bus = bus or event_bus
        self.lines: List[str] = []
        self.bus.subscribe(CampDestroyedEvent, self.on_camp_destroyed)
        self.bus.subscribe(GameResetEvent, self.on_reset)
        if verbose:
            self.bus.subscribe(BuildingUpgradedEvent, self.on_upgraded)
            self.bus.subscribe(UnitsTrainedEvent, self.on_trained)
            self.bus.subscribe(ActionRejectedEvent, self.on_rejected)
            self.bus.subscribe(ScoutMovedEvent, self.on_scout)
            self.bus.subscribe(BattleEvent, self.on_battle)
            self.bus.subscribe(GameSavedEvent, self.on_saved)

    def log(self, line: str) -> None:
        self.lines.append(line)
        print(line)

    def on_upgraded(self, event: BuildingUpgradedEvent) -> None:
        name = BUILDING_STATS[event.building_id]["name"]
        self.log(f"[UPGRADE] {name} -> L{event.level}")

    def on_trained(self, event: UnitsTrainedEvent) -> None:
        self.log(f"[TRAIN] +{event.count} {event.unit_type} (total: {event.army_total})")

    def on_rejected(self, event: ActionRejectedEvent) -> None:
        self.log(f"[REJECT] {event.action}: {event.reason}")

    def on_scout(self, event: ScoutMovedEvent) -> None:
        self.log(f"[SCOUT] {event.from_pos} -> {event.to_pos} "
                 f"toward {event.target}, revealed {event.newly_revealed} tiles")

    def on_battle(self, event: BattleEvent) -> None:
        self.log(f"[BATTLE] Camp {event.camp_id} at {event.pos}: ratio {event.ratio:.2f}, "
                 f"lost {event.our_loss}, dealt {event.their_loss}, camp left {event.camp_remaining}")

    def on_camp_destroyed(self, event: CampDestroyedEvent) -> None:
        self.log(f"[EVENT] Camp {event.camp_id} destroyed at {event.pos} ({loot_text(event.loot)})")

    def on_saved(self, event: GameSavedEvent) -> None:
        self.log(f"[SAVE] {event.path}")

    def on_reset(self, event: GameResetEvent) -> None:
        self.log(f"[EVENT] New world (seed: {event.seed})")
