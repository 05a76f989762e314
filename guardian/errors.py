"""
guardian/errors.py
Exception taxonomy shared by stores, coordinator, API and CLI.

Stores raise these. The coordinator turns AlertNotFound, AlertAlreadyResolved
and InvalidInput into outcome objects; StorageUnavailable always propagates.
"""


class GuardianError(Exception):
    """Base class for all Family Guardian errors."""


class StorageUnavailable(GuardianError):
    """A persisted collection could not be read or written."""

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Storage unavailable: {path} ({reason})")


class AlertNotFound(GuardianError):
    def __init__(self, alert_id):
        self.alert_id = alert_id
        super().__init__(f"Alert not found: {alert_id}")


class AlertAlreadyResolved(GuardianError):
    def __init__(self, alert_id):
        self.alert_id = alert_id
        super().__init__(f"Alert already resolved: {alert_id}")


class InvalidInput(GuardianError):
    """Caller input rejected before any classification or storage."""
