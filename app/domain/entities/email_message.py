"""Domain entity representing one outgoing email."""

from dataclasses import dataclass


@dataclass(frozen=True)
class EmailMessage:
    """A single message handed to the email gateway."""

    to: str
    subject: str
    text: str
    html: str | None = None


__all__ = ["EmailMessage"]
