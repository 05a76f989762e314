"""
guardian/models/record.py
Shared dataclass schema. Stores, coordinator, API and CLI all use these
types. Data and dict mapping only - no business logic here.

Persisted JSON keeps the camelCase field names of the deployed data files
(resolvedAction, resolvedAt, blockedAt) so existing deployments load as-is.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

# ── VOCABULARY ───────────────────────────────────────────────

TYPE_MESSAGE   = 'message'
TYPE_EMERGENCY = 'emergency'
TYPE_CALL      = 'call'

STATUS_PENDING   = 'pending'
STATUS_EMERGENCY = 'emergency'
STATUS_RESOLVED  = 'resolved'

ACTION_APPROVE = 'approve'
ACTION_BLOCK   = 'block'
ACTIONS        = (ACTION_APPROVE, ACTION_BLOCK)


# ── PERSISTED RECORDS ────────────────────────────────────────

@dataclass
class Alert:
    """One flagged or emergency event awaiting (or past) family review."""
    id:               int
    message:          Optional[str]
    source:           str
    type:             str               # message / emergency / call / anything else
    status:           str               # pending / emergency / resolved
    timestamp:        str               # ISO-8601 UTC
    keywords:         List[str]     = field(default_factory=list)
    resolved_action:  Optional[str] = None
    resolved_at:      Optional[str] = None

    @property
    def is_resolved(self) -> bool:
        return self.status == STATUS_RESOLVED

    def to_dict(self) -> Dict[str, Any]:
        d = {
            'id':        self.id,
            'message':   self.message,
            'source':    self.source,
            'type':      self.type,
            'status':    self.status,
            'timestamp': self.timestamp,
            'keywords':  list(self.keywords),
        }
        if self.resolved_action is not None:
            d['resolvedAction'] = self.resolved_action
        if self.resolved_at is not None:
            d['resolvedAt'] = self.resolved_at
        return d

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'Alert':
        return cls(
            id              = d['id'],
            message         = d.get('message'),
            source          = d.get('source') or '',
            type            = d.get('type') or TYPE_MESSAGE,
            status          = d.get('status') or STATUS_PENDING,
            timestamp       = d.get('timestamp') or '',
            keywords        = list(d.get('keywords') or []),
            resolved_action = d.get('resolvedAction'),
            resolved_at     = d.get('resolvedAt'),
        )


@dataclass
class SafeContact:
    id:     int
    name:   str
    phone:  str

    def to_dict(self) -> Dict[str, Any]:
        return {'id': self.id, 'name': self.name, 'phone': self.phone}

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'SafeContact':
        return cls(id=d['id'], name=d.get('name', ''), phone=d.get('phone', ''))


@dataclass
class BlockedContact:
    id:         int
    phone:      str
    reason:     str
    blocked_at: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id':        self.id,
            'phone':     self.phone,
            'reason':    self.reason,
            'blockedAt': self.blocked_at,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'BlockedContact':
        return cls(
            id         = d['id'],
            phone      = d.get('phone', ''),
            reason     = d.get('reason', ''),
            blocked_at = d.get('blockedAt', ''),
        )


# ── OUTCOMES (not persisted) ─────────────────────────────────

@dataclass
class Classification:
    is_suspicious: bool
    keywords:      List[str] = field(default_factory=list)


@dataclass
class EventOutcome:
    """Result of submitting one event. status: alert_created / ok / invalid."""
    status:         str
    suspicious:     bool           = False
    keywords_found: List[str]      = field(default_factory=list)
    alert_type:     Optional[str]  = None
    alert_id:       Optional[int]  = None
    caution:        str            = ''

    @property
    def alert_created(self) -> bool:
        return self.status == 'alert_created'


@dataclass
class ActionOutcome:
    """Result of a family action. status: success / not_found / already_resolved / invalid."""
    status:        str
    action:        str
    alert_id:      Any
    blocked_phone: Optional[str] = None
    detail:        str           = ''

    @property
    def ok(self) -> bool:
        return self.status == 'success'


@dataclass
class Stats:
    pending_alerts:      int = 0
    emergency_alerts:    int = 0
    safe_contacts_count: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            'pendingAlerts':     self.pending_alerts,
            'emergencyAlerts':   self.emergency_alerts,
            'safeContactsCount': self.safe_contacts_count,
        }
