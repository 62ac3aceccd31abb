"""Pocket RoK Core - Game Logic"""
from .events import (
    event_bus,
    EventBus,
    BuildingUpgradedEvent,
    UnitsTrainedEvent,
    ActionRejectedEvent,
    ScoutMovedEvent,
    BattleEvent,
    CampDestroyedEvent,
)
from .results import ActionResult, BattleReport, Reason
from .selection import Selection, SelectionManager
from .world import World, Resources, Camp, FogOfWar, generate_camps
from .systems import (
    ResourceSystem,
    UpgradeSystem,
    TrainingSystem,
    ScoutingSystem,
    CombatSystem,
)
from .persistence import snapshot, restore, JsonSaveStore
