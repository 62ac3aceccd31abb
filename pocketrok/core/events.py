"""
Pocket RoK Events

Every state change in the core is announced as an event. Handlers
(status line, console logger, frontend sounds) subscribe without the
systems knowing about them.
"""
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Any, Optional


# === Event Dataclasses ===

@dataclass
class BuildingUpgradedEvent:
    """Fired when a building reaches a new level."""
    building_id: str
    level: int
    cost: dict


@dataclass
class UnitsTrainedEvent:
    """Fired when a batch of units finishes training."""
    unit_type: str
    count: int
    army_total: int


@dataclass
class ActionRejectedEvent:
    """Fired when an intent is refused by a business rule."""
    action: str  # "upgrade", "train", "scout", "attack"
    reason: str  # Reason value, e.g. "insufficient-resources"
    details: dict = field(default_factory=dict)


@dataclass
class ScoutMovedEvent:
    """Fired after the scout jumps and reveals its surroundings."""
    from_pos: tuple
    to_pos: tuple
    target: tuple
    newly_revealed: int


@dataclass
class BattleEvent:
    """Fired after every exchange against a camp."""
    camp_id: int
    pos: tuple
    ratio: float
    our_loss: int
    their_loss: int
    camp_remaining: int


@dataclass
class CampDestroyedEvent:
    """Fired when a camp's strength is driven to zero."""
    camp_id: int
    pos: tuple
    loot: dict


@dataclass
class SelectionChangedEvent:
    """Fired when the player selects a tile or camp (or selection clears)."""
    kind: Optional[str]  # "tile", "camp" or None
    pos: Optional[tuple] = None
    camp_id: Optional[int] = None


@dataclass
class GameSavedEvent:
    """Fired after a snapshot is written."""
    path: str


@dataclass
class GameLoadedEvent:
    """Fired after a snapshot is merged onto a fresh world."""
    path: str


@dataclass
class GameResetEvent:
    """Fired after the save is cleared and the world rebuilt."""
    seed: Optional[int] = None


# === EventBus ===

class EventBus:
    """Central event dispatcher."""

    def __init__(self):
        self._subscribers: Dict[type, List[Callable]] = {}
        self._event_history: List[Any] = []  # For debugging/replay
        self._recording = False

    def subscribe(self, event_type: type, handler: Callable) -> None:
        """Register a handler for an event type."""
        if event_type not in self._subscribers:
            self._subscribers[event_type] = []
        self._subscribers[event_type].append(handler)

    def unsubscribe(self, event_type: type, handler: Callable) -> None:
        """Remove a handler from an event type."""
        if event_type in self._subscribers:
            try:
                self._subscribers[event_type].remove(handler)
            except ValueError:
                pass

    def publish(self, event: Any) -> None:
        """Notify all handlers subscribed to this event's type."""
        if self._recording:
            self._event_history.append(event)

        event_type = type(event)
        for handler in self._subscribers.get(event_type, []):
            handler(event)

    def start_recording(self) -> None:
        """Start recording events for replay/debugging."""
        self._recording = True
        self._event_history.clear()

    def stop_recording(self) -> List[Any]:
        """Stop recording and return event history."""
        self._recording = False
        return self._event_history.copy()


# Default bus for callers that don't bring their own
event_bus = EventBus()
