"""
guardian/stores/alert_store.py
Single writer for the alert collection.

Alerts are kept most-recent-first: create() inserts at index 0 and
list() returns a prefix. Status only moves pending/emergency → resolved.
"""

import logging
from typing import Callable, Dict, List, Optional

from guardian.errors import AlertAlreadyResolved, AlertNotFound
from guardian.models.record import (
    Alert,
    STATUS_EMERGENCY,
    STATUS_PENDING,
    STATUS_RESOLVED,
    TYPE_EMERGENCY,
)
from guardian.stores.collection import Collection, next_id, utc_now_iso

logger = logging.getLogger(__name__)

DEFAULT_LIST_LIMIT = 20


def _find_index(records: List[dict], alert_id) -> int:
    # ids arrive as int from the API but may be strings from older clients
    wanted = str(alert_id)
    for i, r in enumerate(records):
        if str(r.get('id')) == wanted:
            return i
    return -1


class AlertStore:

    def __init__(self, collection: Collection):
        self.collection = collection

    def initialize(self) -> None:
        self.collection.initialize()

    def create(
        self,
        message:  Optional[str],
        source:   str,
        type:     str,
        keywords: Optional[List[str]] = None,
    ) -> Alert:
        """Persist a new alert ahead of all existing ones and return it."""
        def _create(records: List[dict]) -> Alert:
            alert = Alert(
                id        = next_id(records),
                message   = message,
                source    = source,
                type      = type,
                status    = STATUS_EMERGENCY if type == TYPE_EMERGENCY else STATUS_PENDING,
                timestamp = utc_now_iso(),
                keywords  = list(keywords or []),
            )
            records.insert(0, alert.to_dict())
            return alert

        alert = self.collection.update(_create)
        logger.info(f"Alert created | id={alert.id} type={alert.type} status={alert.status}")
        return alert

    def list(self, limit: int = DEFAULT_LIST_LIMIT) -> List[Alert]:
        """Up to `limit` most recent alerts, newest first."""
        limit = max(int(limit), 0)
        records = self.collection.load_all()
        return [Alert.from_dict(r) for r in records[:limit]]

    def transition(
        self,
        alert_id,
        action:     str,
        on_resolve: Optional[Callable[[Alert], None]] = None,
    ) -> Alert:
        """
        Resolve an alert with the family's action.
        Raises AlertNotFound / AlertAlreadyResolved; nothing is written then.

        `on_resolve` runs with the resolved alert while the collection lock
        is held, before the save. If it raises, the alert stays unresolved.
        """
        def _resolve(records: List[dict]) -> Alert:
            idx = _find_index(records, alert_id)
            if idx < 0:
                raise AlertNotFound(alert_id)
            alert = Alert.from_dict(records[idx])
            if alert.is_resolved:
                raise AlertAlreadyResolved(alert_id)
            alert.status          = STATUS_RESOLVED
            alert.resolved_action = action
            alert.resolved_at     = utc_now_iso()
            if on_resolve is not None:
                on_resolve(alert)
            records[idx] = alert.to_dict()
            return alert

        alert = self.collection.update(_resolve)
        logger.info(f"Alert resolved | id={alert.id} action={action}")
        return alert

    def count_by_status(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for r in self.collection.load_all():
            status = r.get('status')
            counts[status] = counts.get(status, 0) + 1
        return counts
