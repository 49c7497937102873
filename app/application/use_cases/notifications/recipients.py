"""Selection of the members who receive urgent announcement emails."""

from __future__ import annotations

import anyio

from app.domain.entities import Member
from app.domain.ports import MemberLookup


def is_eligible_recipient(member: Member, author_id: str) -> bool:
    """Return ``True`` when ``member`` should receive a notification from ``author_id``."""

    return (
        not member.is_deleted()
        and bool((member.email or "").strip())
        and member.email_notifications
        and member.id != author_id
    )


class RecipientSelector:
    """Compute the notification audience for an announcement author."""

    def __init__(self, members: MemberLookup) -> None:
        self._members = members

    async def select(self, author_id: str) -> list[Member]:
        """Return the opted-in members, excluding the author.

        The member listing is a blocking call, so it runs in a worker thread.
        The result carries no particular order.
        """

        members = await anyio.to_thread.run_sync(self._members.find_all)
        seen: set[str] = set()
        audience: list[Member] = []
        for member in members:
            if member.id in seen or not is_eligible_recipient(member, author_id):
                continue
            seen.add(member.id)
            audience.append(member)
        return audience


__all__ = ["RecipientSelector", "is_eligible_recipient"]
