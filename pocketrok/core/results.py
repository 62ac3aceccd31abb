"""
Results
What an intent hands back to the frontend. Rejections carry a Reason
instead of raising; state is untouched whenever ok is False.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class Reason(Enum):
    GATED_BY_PREREQUISITE = "gated-by-prerequisite"
    INSUFFICIENT_RESOURCES = "insufficient-resources"
    INSUFFICIENT_GOLD = "insufficient-gold"
    NO_BARRACKS = "no-barracks"
    NO_SELECTION = "no-selection"
    MAP_FULLY_REVEALED = "map-fully-revealed"


@dataclass
class ActionResult:
    """Outcome of one intent"""
    ok: bool
    reason: Optional[Reason] = None
    data: dict = field(default_factory=dict)

    @classmethod
    def success(cls, **data) -> "ActionResult":
        return cls(ok=True, data=data)

    @classmethod
    def reject(cls, reason: Reason, **data) -> "ActionResult":
        return cls(ok=False, reason=reason, data=data)


@dataclass
class BattleReport:
    """Numbers from one exchange against a camp"""
    camp_id: int
    our_power: float
    their_strength: int
    ratio: float
    favoured: bool  # ratio >= FAVOURABLE_RATIO, informational only
    our_loss: int
    their_loss: int
    camp_remaining: int
    victory: bool
    loot: Optional[dict] = None
