"""
guardian/stores - persisted collections and their single-writer stores.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

from guardian.stores.alert_store import AlertStore
from guardian.stores.collection import JsonCollection, MemoryCollection
from guardian.stores.contact_store import ContactStore

ALERTS_FILE           = 'alerts.json'
SAFE_CONTACTS_FILE    = 'safe-contacts.json'
BLOCKED_CONTACTS_FILE = 'blocked-contacts.json'


def json_stores(data_dir: Path, safe_contacts: Optional[List[Dict[str, Any]]] = None):
    """(AlertStore, ContactStore) backed by JSON files under data_dir."""
    data_dir = Path(data_dir)
    alerts  = AlertStore(JsonCollection(data_dir / ALERTS_FILE))
    contacts = ContactStore(
        safe    = JsonCollection(data_dir / SAFE_CONTACTS_FILE, defaults=safe_contacts),
        blocked = JsonCollection(data_dir / BLOCKED_CONTACTS_FILE),
    )
    return alerts, contacts


def memory_stores(safe_contacts: Optional[List[Dict[str, Any]]] = None):
    """(AlertStore, ContactStore) held in memory."""
    alerts  = AlertStore(MemoryCollection(name='alerts'))
    contacts = ContactStore(
        safe    = MemoryCollection(defaults=safe_contacts, name='safe-contacts'),
        blocked = MemoryCollection(name='blocked-contacts'),
    )
    return alerts, contacts


__all__ = [
    "AlertStore",
    "ContactStore",
    "JsonCollection",
    "MemoryCollection",
    "json_stores",
    "memory_stores",
]
