"""
guardian/detectors/keyword_detector.py
Rule-based scam screen. Pure Python, runs offline.

A message is suspicious when any trigger phrase appears in it
(case-insensitive substring). Matches are reported in list order, once each.
"""

from typing import List, Optional

from guardian.models.record import Classification

# ── TRIGGER PHRASES ──────────────────────────────────────────
# Order matters: matches are reported in this order.

SUSPICIOUS_KEYWORDS: List[str] = [
    'urgent', 'bank verification', 'lawsuit', 'wire money',
    'prize winner', 'social security', 'account suspended',
    'verify your account', 'free gift', 'limited time',
]


def classify(message: Optional[str]) -> Classification:
    """Screen one message against SUSPICIOUS_KEYWORDS. No side effects."""
    if not message:
        return Classification(is_suspicious=False, keywords=[])

    body_lower = message.lower()
    found = [kw for kw in SUSPICIOUS_KEYWORDS if kw in body_lower]
    return Classification(is_suspicious=bool(found), keywords=found)
