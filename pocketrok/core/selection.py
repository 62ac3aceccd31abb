"""
Selection Manager

Handles:
- Selecting a revealed tile or the camp standing on it
- Dropping the selection when its camp is destroyed
- Attack button enable state
"""
from dataclasses import dataclass
from typing import Any, Optional

TILE = "tile"
CAMP = "camp"


@dataclass
class Selection:
    """What the player last clicked on."""
    kind: str  # TILE or CAMP
    x: int
    y: int
    camp_id: Optional[int] = None

    @property
    def pos(self) -> tuple:
        return (self.x, self.y)


class SelectionManager:
    """Reads and writes world.selection."""

    def __init__(self, world: Any):
        self.world = world

    @property
    def current(self) -> Optional[Selection]:
        return self.world.selection

    def select_tile(self, x: int, y: int) -> Optional[Selection]:
        """Select the cell at (x, y). Hidden cells can't be selected."""
        if not self.world.is_revealed(x, y):
            return None

        camp = self.world.get_camp_at(x, y)
        if camp is not None:
            selection = Selection(kind=CAMP, x=x, y=y, camp_id=camp.id)
        else:
            selection = Selection(kind=TILE, x=x, y=y)
        self.world.selection = selection
        return selection

    def clear(self) -> None:
        self.world.selection = None

    def selected_camp(self) -> Optional[Any]:
        """The live camp under the selection, if any."""
        selection = self.world.selection
        if selection is None or selection.kind != CAMP:
            return None
        return self.world.get_camp(selection.camp_id)

    @property
    def attack_enabled(self) -> bool:
        return self.selected_camp() is not None
