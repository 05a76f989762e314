"""
tests/test_coordinator.py
Alert lifecycle tests for events and family actions.
Runs against in-memory stores, plus one pass over real JSON files.
"""

import json

import pytest

from guardian.coordinator import EMERGENCY_MESSAGE, AlertCoordinator
from guardian.errors import StorageUnavailable
from guardian.stores import json_stores, memory_stores

SEED = [
    {"id": 1, "name": "Dr. Smith", "phone": "555-0101"},
    {"id": 2, "name": "Daughter Amy", "phone": "555-0102"},
    {"id": 3, "name": "Pharmacy", "phone": "555-0103"},
]


@pytest.fixture
def guardian() -> AlertCoordinator:
    alerts, contacts = memory_stores(safe_contacts=SEED)
    coordinator = AlertCoordinator(alerts, contacts)
    coordinator.initialize()
    return coordinator


# ── TESTS: EVENTS ────────────────────────────────────────────────────────────

class TestHandleEvent:
    def test_suspicious_message_creates_pending_alert(self, guardian):
        outcome = guardian.handle_event("URGENT: verify your account now", "manual_check", "message")
        assert outcome.status == "alert_created"
        assert outcome.suspicious is True
        assert outcome.keywords_found == ["urgent", "verify your account"]
        assert outcome.alert_type == "message"

        alerts = guardian.list_alerts()
        assert len(alerts) == 1
        assert alerts[0].id == outcome.alert_id
        assert alerts[0].status == "pending"
        assert alerts[0].keywords == ["urgent", "verify your account"]
        assert "urgent, verify your account" in outcome.caution

    def test_benign_message_creates_nothing(self, guardian):
        outcome = guardian.handle_event("hi mom, call me later", "manual_check", "message")
        assert outcome.status == "ok"
        assert outcome.suspicious is False
        assert outcome.alert_id is None
        assert guardian.list_alerts() == []

    def test_emergency_always_creates_alert(self, guardian):
        outcome = guardian.handle_event("please come over", "emergency_button", "emergency")
        assert outcome.status == "alert_created"
        assert outcome.suspicious is False
        assert outcome.keywords_found == []
        assert guardian.list_alerts()[0].status == "emergency"

    def test_emergency_reports_classifier_verdict(self, guardian):
        outcome = guardian.handle_event("URGENT help", "emergency_button", "emergency")
        assert outcome.suspicious is True
        assert outcome.keywords_found == ["urgent"]
        assert guardian.list_alerts()[0].keywords == ["urgent"]

    def test_emergency_without_message(self, guardian):
        outcome = guardian.handle_event(None, "emergency_button", "emergency")
        assert outcome.status == "alert_created"
        assert guardian.list_alerts()[0].message is None

    def test_emergency_button(self, guardian):
        outcome = guardian.emergency()
        alert = guardian.list_alerts()[0]
        assert outcome.alert_type == "emergency"
        assert alert.message == EMERGENCY_MESSAGE
        assert alert.source == "emergency_button"

    @pytest.mark.parametrize("message", ["", "   ", None])
    def test_empty_message_rejected(self, guardian, message):
        outcome = guardian.handle_event(message, "manual_check", "message")
        assert outcome.status == "invalid"
        assert outcome.caution
        assert guardian.list_alerts() == []

    def test_suspicious_call_keeps_type(self, guardian):
        outcome = guardian.handle_event("prize winner!", "555-987-6543", "call")
        assert outcome.alert_type == "call"
        assert guardian.list_alerts()[0].type == "call"

    @pytest.mark.parametrize("message", [None, ""])
    def test_call_without_message_is_ok(self, guardian, message):
        outcome = guardian.handle_event(message, "555-123-4567", "call")
        assert outcome.status == "ok"
        assert outcome.suspicious is False
        assert guardian.list_alerts() == []


# ── TESTS: FAMILY ACTIONS ────────────────────────────────────────────────────

class TestHandleAction:
    def test_block_resolves_and_records_phone(self, guardian):
        created = guardian.handle_event("URGENT: wire money", "555-123-4567 (unknown caller)", "message")
        outcome = guardian.handle_action(created.alert_id, "block")

        assert outcome.status == "success"
        assert outcome.action == "block"
        assert outcome.blocked_phone == "555-123-4567"

        alert = guardian.list_alerts()[0]
        assert alert.status == "resolved"
        assert alert.resolved_action == "block"
        blocked = guardian.list_blocked_contacts()
        assert len(blocked) == 1
        assert blocked[0].phone == "555-123-4567"
        assert blocked[0].reason == "Blocked by family member"

    def test_block_without_phone(self, guardian):
        created = guardian.handle_event("lawsuit pending", "manual_check")
        outcome = guardian.handle_action(created.alert_id, "block")
        assert outcome.ok
        assert outcome.blocked_phone is None
        assert guardian.list_blocked_contacts() == []

    def test_approve_does_not_block(self, guardian):
        created = guardian.handle_event("free gift at 555-123-4567", "manual_check")
        outcome = guardian.handle_action(created.alert_id, "approve")
        assert outcome.ok
        assert guardian.list_alerts()[0].resolved_action == "approve"
        assert guardian.list_blocked_contacts() == []

    def test_unknown_alert_mutates_nothing(self, guardian):
        guardian.handle_event("urgent", "555-123-4567")
        before_alerts = [a.to_dict() for a in guardian.list_alerts()]

        outcome = guardian.handle_action(42, "approve")
        assert outcome.status == "not_found"
        assert [a.to_dict() for a in guardian.list_alerts()] == before_alerts

        outcome = guardian.handle_action(42, "block")
        assert outcome.status == "not_found"
        assert guardian.list_blocked_contacts() == []

    def test_already_resolved(self, guardian):
        created = guardian.handle_event("urgent", "555-123-4567")
        guardian.handle_action(created.alert_id, "approve")
        outcome = guardian.handle_action(created.alert_id, "block")
        assert outcome.status == "already_resolved"
        assert guardian.list_alerts()[0].resolved_action == "approve"
        assert guardian.list_blocked_contacts() == []

    def test_invalid_action(self, guardian):
        created = guardian.handle_event("urgent", "manual_check")
        outcome = guardian.handle_action(created.alert_id, "delete")
        assert outcome.status == "invalid"
        assert guardian.list_alerts()[0].status == "pending"

    def test_failed_block_write_leaves_alert_pending(self, guardian, monkeypatch):
        created = guardian.handle_event("URGENT: wire money", "555-123-4567 (unknown caller)")

        def _disk_full(records):
            raise StorageUnavailable("blocked-contacts.json", "disk full")

        monkeypatch.setattr(guardian.contacts.blocked, "save_all", _disk_full)
        with pytest.raises(StorageUnavailable):
            guardian.handle_action(created.alert_id, "block")
        assert guardian.list_alerts()[0].status == "pending"
        assert guardian.list_alerts()[0].resolved_action is None

        monkeypatch.undo()
        outcome = guardian.handle_action(created.alert_id, "block")
        assert outcome.status == "success"
        assert [c.phone for c in guardian.list_blocked_contacts()] == ["555-123-4567"]


# ── TESTS: STATS ─────────────────────────────────────────────────────────────

class TestStats:
    def test_counts_follow_lifecycle(self, guardian):
        assert guardian.stats().to_dict() == {
            "pendingAlerts": 0, "emergencyAlerts": 0, "safeContactsCount": 3,
        }
        a = guardian.handle_event("urgent", "manual_check")
        guardian.handle_event("limited time offer", "manual_check")
        e = guardian.emergency()
        guardian.handle_event("see you sunday", "manual_check")

        stats = guardian.stats()
        assert (stats.pending_alerts, stats.emergency_alerts) == (2, 1)

        guardian.handle_action(a.alert_id, "approve")
        guardian.handle_action(e.alert_id, "block")
        stats = guardian.stats()
        assert (stats.pending_alerts, stats.emergency_alerts) == (1, 0)

    def test_list_limit(self, guardian):
        ids = [guardian.handle_event(f"urgent #{i}", "manual_check").alert_id for i in range(25)]
        listed = guardian.list_alerts()
        assert len(listed) == 20
        assert [a.id for a in listed] == list(reversed(ids))[:20]
        assert len(guardian.list_alerts(5)) == 5


# ── TESTS: JSON FILES ────────────────────────────────────────────────────────

class TestWithJsonFiles:
    def test_end_to_end_on_disk(self, tmp_path):
        alerts, contacts = json_stores(tmp_path, safe_contacts=SEED)
        guardian = AlertCoordinator(alerts, contacts)
        guardian.initialize()

        created = guardian.handle_event("Account suspended, call 555.222.3333", "manual_check")
        guardian.handle_action(created.alert_id, "block")

        stored = json.loads((tmp_path / "alerts.json").read_text(encoding="utf-8"))
        blocked = json.loads((tmp_path / "blocked-contacts.json").read_text(encoding="utf-8"))
        assert stored[0]["status"] == "resolved"
        assert blocked[0]["phone"] == "555.222.3333"
        assert "blockedAt" in blocked[0]

    def test_corrupt_alerts_file_propagates(self, tmp_path):
        alerts, contacts = json_stores(tmp_path, safe_contacts=SEED)
        guardian = AlertCoordinator(alerts, contacts)
        guardian.initialize()
        (tmp_path / "alerts.json").write_text("garbage", encoding="utf-8")

        with pytest.raises(StorageUnavailable):
            guardian.handle_event("urgent", "manual_check")
        with pytest.raises(StorageUnavailable):
            guardian.stats()

    def test_failed_block_write_on_disk_keeps_alert_file(self, tmp_path, monkeypatch):
        alerts, contacts = json_stores(tmp_path, safe_contacts=SEED)
        guardian = AlertCoordinator(alerts, contacts)
        guardian.initialize()
        created = guardian.handle_event("Account suspended, call 555.222.3333", "manual_check")
        before = (tmp_path / "alerts.json").read_text(encoding="utf-8")

        def _disk_full(records):
            raise StorageUnavailable(tmp_path / "blocked-contacts.json", "disk full")

        monkeypatch.setattr(contacts.blocked, "save_all", _disk_full)
        with pytest.raises(StorageUnavailable):
            guardian.handle_action(created.alert_id, "block")
        assert (tmp_path / "alerts.json").read_text(encoding="utf-8") == before
        assert json.loads((tmp_path / "blocked-contacts.json").read_text(encoding="utf-8")) == []
