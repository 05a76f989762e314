"""
guardian/stores/contact_store.py
Single writer for the safe and blocked contact collections.

Safe contacts are seeded once from config and read-only afterwards.
Blocked contacts only grow, via the family's block action.
"""

import logging
import re
from typing import List, Optional

from guardian.models.record import Alert, BlockedContact, SafeContact
from guardian.stores.collection import Collection, next_id, utc_now_iso

logger = logging.getLogger(__name__)

# North-American style: 555-123-4567, 555.123.4567, 5551234567
PHONE_PATTERN = re.compile(r'\b\d{3}[-.]?\d{3}[-.]?\d{4}\b')

BLOCK_REASON_FAMILY = 'Blocked by family member'


def extract_phone(text: Optional[str]) -> Optional[str]:
    """First phone-number-looking substring of text, or None."""
    if not text:
        return None
    match = PHONE_PATTERN.search(text)
    return match.group(0) if match else None


def extract_alert_phone(alert: Alert) -> Optional[str]:
    """Phone number from the alert's message, falling back to its source."""
    return extract_phone(alert.message) or extract_phone(alert.source)


class ContactStore:

    def __init__(self, safe: Collection, blocked: Collection):
        self.safe = safe
        self.blocked = blocked

    def initialize(self) -> None:
        self.safe.initialize()
        self.blocked.initialize()

    def list_safe(self) -> List[SafeContact]:
        return [SafeContact.from_dict(r) for r in self.safe.load_all()]

    def list_blocked(self) -> List[BlockedContact]:
        return [BlockedContact.from_dict(r) for r in self.blocked.load_all()]

    def add_blocked(self, phone: str, reason: str = BLOCK_REASON_FAMILY) -> BlockedContact:
        """Append a blocked contact. Repeated phones are kept as separate entries."""
        def _append(records: List[dict]) -> BlockedContact:
            contact = BlockedContact(
                id         = next_id(records),
                phone      = phone,
                reason     = reason,
                blocked_at = utc_now_iso(),
            )
            records.append(contact.to_dict())
            return contact

        contact = self.blocked.update(_append)
        logger.info(f"Blocked contact added | id={contact.id} phone={contact.phone}")
        return contact
