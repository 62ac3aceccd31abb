"""Test the event bus and its handlers."""
from pocketrok.core.effects import StatusLog, LoggerHandler, fmt, loot_text
from pocketrok.core.events import (
    EventBus,
    ActionRejectedEvent,
    BattleEvent,
    CampDestroyedEvent,
    GameResetEvent,
    UnitsTrainedEvent,
)

LOOT = {"food": 120, "wood": 120, "stone": 80, "gold": 20}


class TestEventBus:
    """Tests for EventBus dispatch."""

    def test_publish_reaches_subscribers_of_type(self, bus):
        got = []
        bus.subscribe(GameResetEvent, got.append)
        bus.publish(GameResetEvent(seed=3))
        bus.publish(UnitsTrainedEvent(unit_type="archer", count=1, army_total=1))
        assert got == [GameResetEvent(seed=3)]

    def test_unsubscribe(self, bus):
        got = []
        bus.subscribe(GameResetEvent, got.append)
        bus.unsubscribe(GameResetEvent, got.append)
        bus.unsubscribe(GameResetEvent, got.append)  # Second removal is a no-op
        bus.publish(GameResetEvent())
        assert got == []

    def test_recording(self, bus):
        bus.start_recording()
        bus.publish(GameResetEvent(seed=1))
        history = bus.stop_recording()
        bus.publish(GameResetEvent(seed=2))
        assert history == [GameResetEvent(seed=1)]

    def test_buses_are_independent(self):
        a, b = EventBus(), EventBus()
        got = []
        a.subscribe(GameResetEvent, got.append)
        b.publish(GameResetEvent())
        assert got == []


class TestFormatting:

    def test_fmt_floors_and_groups(self):
        assert fmt(1234.9) == "1,234"
        assert fmt(0.99) == "0"
        assert fmt(1000000) == "1,000,000"

    def test_loot_text(self):
        assert loot_text(LOOT) == "+120F +120W +80S +20G"


class TestStatusLog:
    """Tests for the single-line status handler."""

    def test_keeps_only_latest(self, bus):
        status = StatusLog(bus)
        bus.publish(UnitsTrainedEvent(unit_type="cavalry", count=10, army_total=10))
        assert status.latest == "Trained 10 CAV."
        bus.publish(CampDestroyedEvent(camp_id=1, pos=(3, 3), loot=LOOT))
        assert status.latest == "Victory! Loot: +120F +120W +80S +20G"

    def test_victory_battle_does_not_overwrite(self, bus):
        status = StatusLog(bus)
        bus.publish(BattleEvent(camp_id=1, pos=(3, 3), ratio=4.6, our_loss=1,
                                their_loss=82, camp_remaining=0))
        assert status.latest == ""

    def test_reject_messages(self, bus):
        status = StatusLog(bus)
        bus.publish(ActionRejectedEvent(action="upgrade", reason="gated-by-prerequisite",
                                        details={"required_cityhall": 4}))
        assert status.latest == "Upgrade gated by City Hall. Raise CH to 4 first."
        bus.publish(ActionRejectedEvent(action="scout", reason="map-fully-revealed"))
        assert status.latest == "World fully revealed!"


class TestLoggerHandler:
    """Tests for the console logger."""

    def test_quiet_logger_only_logs_milestones(self, bus, capsys):
        logger = LoggerHandler(verbose=False, bus=bus)
        bus.publish(UnitsTrainedEvent(unit_type="archer", count=10, army_total=10))
        bus.publish(CampDestroyedEvent(camp_id=2, pos=(5, 6), loot=LOOT))
        bus.publish(GameResetEvent(seed=9))

        assert logger.lines == [
            "[EVENT] Camp 2 destroyed at (5, 6) (+120F +120W +80S +20G)",
            "[EVENT] New world (seed: 9)",
        ]
        assert "[TRAIN]" not in capsys.readouterr().out

    def test_verbose_logger(self, bus, capsys):
        LoggerHandler(verbose=True, bus=bus)
        bus.publish(UnitsTrainedEvent(unit_type="archer", count=10, army_total=12))
        bus.publish(ActionRejectedEvent(action="train", reason="no-barracks"))
        out = capsys.readouterr().out
        assert "[TRAIN] +10 archer (total: 12)" in out
        assert "[REJECT] train: no-barracks" in out
