"""Tests for AcknowledgmentLedger."""

from __future__ import annotations

from vigil.core.protocols import ITabAlert
from vigil.engine.ledger import AcknowledgmentLedger


class RecordingTabAlert:
    def __init__(self) -> None:
        self.is_active = False
        self.stops = 0

    def start(self, message: str) -> None:
        self.is_active = True

    def stop(self) -> None:
        self.stops += 1
        self.is_active = False


def test_recording_alert_satisfies_protocol():
    assert isinstance(RecordingTabAlert(), ITabAlert)


class TestAcknowledge:
    def test_adds_id(self):
        ledger = AcknowledgmentLedger()
        ledger.acknowledge("a")
        assert ledger.contains("a")
        assert "a" in ledger

    def test_is_idempotent(self):
        once = AcknowledgmentLedger()
        once.acknowledge("a")
        twice = AcknowledgmentLedger()
        twice.acknowledge("a")
        twice.acknowledge("a")
        assert once.snapshot() == twice.snapshot()
        assert len(twice) == 1


class TestAcknowledgeAll:
    def test_adds_every_id(self):
        ledger = AcknowledgmentLedger()
        ledger.acknowledge_all(["a", "b", "a"])
        assert ledger.snapshot() == frozenset({"a", "b"})

    def test_stops_tab_alert(self):
        alert = RecordingTabAlert()
        alert.start("2 urgent items require attention")
        ledger = AcknowledgmentLedger(alert)
        ledger.acknowledge_all(["a"])
        assert alert.stops == 1
        assert not alert.is_active

    def test_single_acknowledge_leaves_tab_alert_running(self):
        alert = RecordingTabAlert()
        alert.start("1 urgent item requires attention")
        AcknowledgmentLedger(alert).acknowledge("a")
        assert alert.is_active


class TestReset:
    def test_clears_everything(self):
        ledger = AcknowledgmentLedger()
        ledger.acknowledge_all(["a", "b"])
        ledger.reset()
        assert len(ledger) == 0
        assert not ledger.contains("a")

    def test_iteration_is_sorted(self):
        ledger = AcknowledgmentLedger()
        ledger.acknowledge_all(["c", "a", "b"])
        assert list(ledger) == ["a", "b", "c"]
