"""Urgent announcement notification fan-out."""

from .dispatcher import (
    DispatchFailure,
    DispatchSummary,
    NotificationDispatcher,
    NotificationRun,
    RecipientOutcome,
    partition,
)
from .messages import build_urgent_announcement_email
from .recipients import RecipientSelector, is_eligible_recipient

__all__ = [
    "DispatchFailure",
    "DispatchSummary",
    "NotificationDispatcher",
    "NotificationRun",
    "RecipientOutcome",
    "RecipientSelector",
    "build_urgent_announcement_email",
    "is_eligible_recipient",
    "partition",
]
