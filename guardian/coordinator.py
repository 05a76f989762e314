"""
guardian/coordinator.py
─────────────────────────────────────────────────────────────────────────────
Alert lifecycle - the only orchestration logic in Family Guardian.

  inbound event ──► classify ──► suspicious or emergency? ──► AlertStore.create
  family action ──► AlertStore.transition ──► block? ──► ContactStore.add_blocked ──► save alert

The coordinator never touches persisted state itself; it only calls the
stores it was constructed with. Not-found, already-resolved and invalid
input come back as outcome objects. StorageUnavailable propagates.

Usage:
    alerts, contacts = json_stores(Path("data"))
    guardian = AlertCoordinator(alerts, contacts)
    guardian.initialize()
    outcome = guardian.handle_event("URGENT: verify your account", "manual_check")
"""

import logging
from typing import List, Optional

from guardian.detectors.keyword_detector import classify
from guardian.errors import AlertAlreadyResolved, AlertNotFound, InvalidInput
from guardian.models.record import (
    ACTION_BLOCK,
    ACTIONS,
    ActionOutcome,
    Alert,
    BlockedContact,
    EventOutcome,
    SafeContact,
    Stats,
    STATUS_EMERGENCY,
    STATUS_PENDING,
    TYPE_EMERGENCY,
    TYPE_MESSAGE,
)
from guardian.stores.alert_store import DEFAULT_LIST_LIMIT, AlertStore
from guardian.stores.contact_store import (
    BLOCK_REASON_FAMILY,
    ContactStore,
    extract_alert_phone,
)

logger = logging.getLogger(__name__)

EMERGENCY_MESSAGE = 'EMERGENCY BUTTON PRESSED - NEED IMMEDIATE HELP'
EMERGENCY_SOURCE  = 'emergency_button'

# ── USER-FACING CAUTIONS ─────────────────────────────────────

CAUTION_EMPTY      = 'Please enter a message to check'
CAUTION_SAFE       = 'This message appears safe. Always stay cautious!'
CAUTION_SUSPICIOUS = ("WARNING: This message appears suspicious! Keywords found: {keywords}. "
                      "We've alerted your family.")
CAUTION_EMERGENCY  = ('Emergency alert sent! Your family has been notified '
                      'and will contact you immediately.')


class AlertCoordinator:

    def __init__(self, alerts: AlertStore, contacts: ContactStore):
        self.alerts = alerts
        self.contacts = contacts

    def initialize(self) -> None:
        """Seed every collection that does not exist yet."""
        self.alerts.initialize()
        self.contacts.initialize()

    # ── EVENTS ────────────────────────────────────────────────────────────

    def handle_event(
        self,
        message: Optional[str],
        source:  str = 'unknown',
        type:    str = TYPE_MESSAGE,
    ) -> EventOutcome:
        """
        Screen one inbound event and record an alert when warranted.

        Emergencies always create an alert but report the classifier's own
        verdict in `suspicious`. An empty body is rejected only for `message`
        events; calls and other types without text are simply not suspicious.
        """
        type = type or TYPE_MESSAGE
        try:
            _validate_message(message, type)
        except InvalidInput as exc:
            logger.info(f"Event rejected | source={source} type={type}: {exc}")
            return EventOutcome(status='invalid', alert_type=type, caution=str(exc))

        result = classify(message)

        if not (result.is_suspicious or type == TYPE_EMERGENCY):
            logger.debug(f"Event clear | source={source} type={type}")
            return EventOutcome(status='ok', suspicious=False, caution=CAUTION_SAFE)

        alert = self.alerts.create(
            message  = message,
            source   = source,
            type     = type,
            keywords = result.keywords if result.is_suspicious else [],
        )

        if type == TYPE_EMERGENCY:
            caution = CAUTION_EMERGENCY
        else:
            caution = CAUTION_SUSPICIOUS.format(keywords=', '.join(result.keywords))

        return EventOutcome(
            status         = 'alert_created',
            suspicious     = result.is_suspicious,
            keywords_found = result.keywords,
            alert_type     = type,
            alert_id       = alert.id,
            caution        = caution,
        )

    def emergency(self) -> EventOutcome:
        """The elderly user's emergency button."""
        return self.handle_event(EMERGENCY_MESSAGE, EMERGENCY_SOURCE, TYPE_EMERGENCY)

    # ── FAMILY ACTIONS ────────────────────────────────────────────────────

    def handle_action(self, alert_id, action: str) -> ActionOutcome:
        """
        Resolve an alert with `approve` or `block`.
        Blocking also records the phone number found in the alert, if any.
        The blocked contact is written before the alert is saved as resolved,
        so a failed contact write leaves the alert open for a retry.
        """
        if action not in ACTIONS:
            return ActionOutcome(
                status='invalid', action=action, alert_id=alert_id,
                detail=f"Unknown action: {action!r} (expected one of {', '.join(ACTIONS)})",
            )

        blocked: List[BlockedContact] = []

        def _record_block(alert: Alert) -> None:
            phone = extract_alert_phone(alert)
            if phone:
                blocked.append(self.contacts.add_blocked(phone, BLOCK_REASON_FAMILY))
            else:
                logger.info(f"Alert {alert.id} blocked - no phone number to record")

        try:
            alert = self.alerts.transition(
                alert_id, action,
                on_resolve=_record_block if action == ACTION_BLOCK else None,
            )
        except AlertNotFound as exc:
            logger.info(str(exc))
            return ActionOutcome(
                status='not_found', action=action, alert_id=alert_id, detail='Alert not found',
            )
        except AlertAlreadyResolved as exc:
            logger.info(str(exc))
            return ActionOutcome(
                status='already_resolved', action=action, alert_id=alert_id,
                detail='Alert already resolved',
            )

        return ActionOutcome(
            status='success', action=action, alert_id=alert.id,
            blocked_phone=blocked[0].phone if blocked else None,
        )

    # ── READS ─────────────────────────────────────────────────────────────

    def stats(self) -> Stats:
        counts = self.alerts.count_by_status()
        return Stats(
            pending_alerts      = counts.get(STATUS_PENDING, 0),
            emergency_alerts    = counts.get(STATUS_EMERGENCY, 0),
            safe_contacts_count = len(self.contacts.list_safe()),
        )

    def list_alerts(self, limit: int = DEFAULT_LIST_LIMIT) -> List[Alert]:
        return self.alerts.list(limit)

    def list_safe_contacts(self) -> List[SafeContact]:
        return self.contacts.list_safe()

    def list_blocked_contacts(self) -> List[BlockedContact]:
        return self.contacts.list_blocked()


def _validate_message(message: Optional[str], type: str) -> None:
    # calls and other non-text events may arrive without a body
    if type != TYPE_MESSAGE:
        return
    if message is None or not str(message).strip():
        raise InvalidInput(CAUTION_EMPTY)
