"""
guardian - Family Guardian alert relay.

Screens messages for scam indicators, records alerts for family review,
and keeps the trusted / blocked contact lists.
"""

__version__ = "1.0.0"
