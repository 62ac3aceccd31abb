"""
Pocket RoK Systems

- ResourceSystem: accrual, rates, affordability
- UpgradeSystem: city-hall gated building upgrades
- TrainingSystem: all-or-nothing unit training
- ScoutingSystem: nearest-hidden-cell scouting
- CombatSystem: one deterministic exchange against the selected camp
"""
import math
from typing import Optional

from .config import (
    BUILDING_STATS,
    UNIT_STATS,
    CITYHALL,
    BARRACKS,
    UPGRADE_COST_STEP,
    SECONDS_PER_HOUR,
    MIN_RATIO,
    FAVOURABLE_RATIO,
    ATTACKER_LOSS_FACTOR,
    DEFENDER_LOSS_FACTOR,
    LOSS_ORDER,
)
from .events import (
    event_bus,
    EventBus,
    BuildingUpgradedEvent,
    UnitsTrainedEvent,
    ActionRejectedEvent,
    ScoutMovedEvent,
    BattleEvent,
    CampDestroyedEvent,
    SelectionChangedEvent,
)
from .results import ActionResult, BattleReport, Reason
from .selection import SelectionManager
from .world import Resources, compute_rates


def upgrade_cost(building_id: str, level: int) -> Resources:
    """Cost to bring a building to `level`."""
    if building_id not in BUILDING_STATS:
        raise ValueError(f"Unknown building: {building_id!r}")
    base = Resources.from_dict(BUILDING_STATS[building_id]["base_cost"])
    return base.scaled(1 + (level - 1) * UPGRADE_COST_STEP)


def training_cost(unit_type: str, count: int) -> Resources:
    """Cost of training `count` units of one type."""
    if unit_type not in UNIT_STATS:
        raise ValueError(f"Unknown unit type: {unit_type!r}")
    return Resources.from_dict(UNIT_STATS[unit_type]["cost"]).scaled(count)


class ResourceSystem:
    """Economy model: pools grow by rate every tick."""

    def __init__(self, world, bus: Optional[EventBus] = None):
        self.world = world
        self.bus = bus or event_bus

    def update(self, dt: float) -> None:
        """Accrue dt seconds of production. No rounding here."""
        hours = dt / SECONDS_PER_HOUR
        self.world.resources.add(self.world.rates.scaled(hours))

    def recalc_rates(self) -> Resources:
        """Derive rates from building levels."""
        self.world.rates = compute_rates(self.world.buildings)
        return self.world.rates

    def can_afford(self, cost: Resources) -> bool:
        return self.world.resources.covers(cost)

    def spend(self, cost: Resources) -> None:
        """Subtract floor(cost). Callers must check can_afford first."""
        self.world.resources.subtract_floored(cost)

    def grant(self, amount: Resources) -> None:
        self.world.resources.add(amount)


class UpgradeSystem:
    """Building upgrades, gated by the city hall's level."""

    def __init__(self, world, economy: ResourceSystem, bus: Optional[EventBus] = None):
        self.world = world
        self.economy = economy
        self.bus = bus or event_bus

    def next_cost(self, building_id: str) -> Resources:
        """Price of the next level of a building."""
        return upgrade_cost(building_id, self._level(building_id) + 1)

    def upgrade(self, building_id: str) -> ActionResult:
        next_level = self._level(building_id) + 1

        cityhall_level = self.world.buildings[CITYHALL]
        if building_id != CITYHALL and next_level > cityhall_level:
            return self._reject(Reason.GATED_BY_PREREQUISITE, building_id=building_id,
                                required_cityhall=next_level)

        cost = upgrade_cost(building_id, next_level)
        if not self.economy.can_afford(cost):
            return self._reject(Reason.INSUFFICIENT_RESOURCES, building_id=building_id,
                                cost=cost.to_dict())

        self.economy.spend(cost)
        self.world.buildings[building_id] = next_level
        if BUILDING_STATS[building_id].get("produces"):
            self.economy.recalc_rates()

        self.bus.publish(BuildingUpgradedEvent(
            building_id=building_id,
            level=next_level,
            cost=cost.to_dict()
        ))
        return ActionResult.success(building_id=building_id, level=next_level)

    def _level(self, building_id: str) -> int:
        if building_id not in self.world.buildings:
            raise ValueError(f"Unknown building: {building_id!r}")
        return self.world.buildings[building_id]

    def _reject(self, reason: Reason, **details) -> ActionResult:
        self.bus.publish(ActionRejectedEvent(action="upgrade", reason=reason.value, details=details))
        return ActionResult.reject(reason, **details)


class TrainingSystem:
    """Unit training. A batch is paid for in full or not at all."""

    def __init__(self, world, economy: ResourceSystem, bus: Optional[EventBus] = None):
        self.world = world
        self.economy = economy
        self.bus = bus or event_bus

    def train(self, unit_type: str, count: int) -> ActionResult:
        if isinstance(count, bool) or not isinstance(count, int) or count <= 0:
            raise ValueError(f"Unit count must be a positive integer, got {count!r}")
        cost = training_cost(unit_type, count)

        if self.world.buildings.get(BARRACKS, 0) < 1:
            return self._reject(Reason.NO_BARRACKS, unit_type=unit_type, count=count)

        if not self.economy.can_afford(cost):
            return self._reject(Reason.INSUFFICIENT_RESOURCES, unit_type=unit_type,
                                count=count, cost=cost.to_dict())

        self.economy.spend(cost)
        self.world.army[unit_type] += count

        self.bus.publish(UnitsTrainedEvent(
            unit_type=unit_type,
            count=count,
            army_total=self.world.army[unit_type]
        ))
        return ActionResult.success(unit_type=unit_type, count=count,
                                    total=self.world.army[unit_type])

    def _reject(self, reason: Reason, **details) -> ActionResult:
        self.bus.publish(ActionRejectedEvent(action="train", reason=reason.value, details=details))
        return ActionResult.reject(reason, **details)


class ScoutingSystem:
    """Sends the scout toward the nearest hidden cell, one jump per call."""

    def __init__(self, world, economy: ResourceSystem, bus: Optional[EventBus] = None):
        self.world = world
        self.economy = economy
        self.bus = bus or event_bus

        scenario = world.scenario
        self.fee = Resources.from_dict(scenario["scout_fee"])
        self.step = scenario["scout_step"]
        self.reveal_radius = scenario["scout_reveal_radius"]

    def scout(self) -> ActionResult:
        sx, sy = self.world.scout_pos
        target = self.world.fog.nearest_hidden(sx, sy)
        if target is None:
            return self._reject(Reason.MAP_FULLY_REVEALED)

        if not self.economy.can_afford(self.fee):
            return self._reject(Reason.INSUFFICIENT_GOLD, fee=self.fee.to_dict())
        self.economy.spend(self.fee)

        nx = self._clamp(sx + self._step_toward(sx, target[0]), self.world.width)
        ny = self._clamp(sy + self._step_toward(sy, target[1]), self.world.height)
        self.world.scout_pos = (nx, ny)
        newly_revealed = self.world.fog.reveal(nx, ny, self.reveal_radius)

        self.bus.publish(ScoutMovedEvent(
            from_pos=(sx, sy),
            to_pos=(nx, ny),
            target=target,
            newly_revealed=len(newly_revealed)
        ))
        return ActionResult.success(pos=(nx, ny), target=target,
                                    revealed=len(newly_revealed))

    def _step_toward(self, current: int, goal: int) -> int:
        delta = goal - current
        if delta == 0:
            return 0
        direction = 1 if delta > 0 else -1
        return direction * min(self.step, abs(delta))

    @staticmethod
    def _clamp(value: int, size: int) -> int:
        return max(0, min(size - 1, value))

    def _reject(self, reason: Reason, **details) -> ActionResult:
        self.bus.publish(ActionRejectedEvent(action="scout", reason=reason.value, details=details))
        return ActionResult.reject(reason, **details)


class CombatSystem:
    """Resolves one exchange between the army and the selected camp.

    Both sides always take losses. The camp only falls once its strength
    is driven to zero, which may take several attacks.
    """

    def __init__(self, world, economy: ResourceSystem, selection: SelectionManager,
                 bus: Optional[EventBus] = None):
        self.world = world
        self.economy = economy
        self.selection = selection
        self.bus = bus or event_bus
        self.loot = Resources.from_dict(world.scenario["camp_loot"])

    def army_power(self) -> float:
        """Weighted sum of unit counts."""
        return sum(count * UNIT_STATS[unit]["power"] for unit, count in self.world.army.items())

    def attack(self) -> ActionResult:
        camp = self.selection.selected_camp()
        if camp is None:
            self.bus.publish(ActionRejectedEvent(action="attack", reason=Reason.NO_SELECTION.value))
            return ActionResult.reject(Reason.NO_SELECTION)

        our = self.army_power()
        their = camp.strength
        total = self.world.total_army
        ratio = (our + 1) / (their + 1)
        effective = max(ratio, MIN_RATIO)

        our_loss = min(total, math.ceil(their * (1 / effective) * ATTACKER_LOSS_FACTOR))
        their_loss = math.ceil(total * effective * DEFENDER_LOSS_FACTOR)

        self._apply_losses(our_loss)
        remaining = camp.take_losses(their_loss)

        self.bus.publish(BattleEvent(
            camp_id=camp.id,
            pos=camp.pos,
            ratio=ratio,
            our_loss=our_loss,
            their_loss=their_loss,
            camp_remaining=remaining
        ))

        report = BattleReport(
            camp_id=camp.id,
            our_power=our,
            their_strength=their,
            ratio=ratio,
            favoured=ratio >= FAVOURABLE_RATIO,
            our_loss=our_loss,
            their_loss=their_loss,
            camp_remaining=remaining,
            victory=remaining <= 0,
        )

        if report.victory:
            self.world.remove_camp(camp.id)
            self.economy.grant(self.loot)
            self.selection.clear()
            self.bus.publish(SelectionChangedEvent(kind=None))
            report.loot = {k: int(v) for k, v in self.loot.to_dict().items()}
            self.bus.publish(CampDestroyedEvent(camp_id=camp.id, pos=camp.pos, loot=report.loot))

        return ActionResult.success(report=report)

    def _apply_losses(self, loss: int) -> None:
        """Take losses from stacks in fixed order, never below zero."""
        remaining = loss
        for unit in LOSS_ORDER:
            take = min(self.world.army[unit], remaining)
            self.world.army[unit] -= take
            remaining -= take
