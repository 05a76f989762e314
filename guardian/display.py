"""
guardian/display.py
Plain-text rendering of alerts and contacts for the CLI dashboard.
"""

from guardian.models.record import Alert, BlockedContact, SafeContact

ALERT_TYPE_LABELS = {
    'message':   'Suspicious Message',
    'emergency': 'EMERGENCY',
    'call':      'Suspicious Call',
}


def format_alert_type(alert_type: str) -> str:
    """Dashboard label for an alert type; unknown types pass through unchanged."""
    return ALERT_TYPE_LABELS.get(alert_type, alert_type)


def format_alert(alert: Alert) -> str:
    lines = [f"[{alert.id}] {format_alert_type(alert.type)} - {alert.status.upper()}"]
    lines.append(f"    {alert.message or 'No message content'}")
    if alert.keywords:
        lines.append(f"    Keywords detected: {', '.join(alert.keywords)}")
    lines.append(f"    From: {alert.source} | {alert.timestamp}")
    if alert.is_resolved:
        lines.append(f"    Resolved ({alert.resolved_action}) at {alert.resolved_at}")
    return '\n'.join(lines)


def format_safe_contact(contact: SafeContact) -> str:
    return f"{contact.name:<20} {contact.phone}"


def format_blocked_contact(contact: BlockedContact) -> str:
    return f"{contact.phone:<14} {contact.reason} ({contact.blocked_at})"
