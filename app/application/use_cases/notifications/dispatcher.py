"""Batched email fan-out for urgent announcements.

A run lists the audience, splits it into fixed-size batches and sends every
batch concurrently. Batches run strictly one after the other with a fixed
pause in between. A failure for one recipient is recorded and never cancels
sibling sends or later batches.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from typing import TypeVar

from app.config import Settings
from app.domain.entities import Announcement, Member
from app.domain.ports import EmailGateway

from .messages import build_urgent_announcement_email
from .recipients import RecipientSelector

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 10
DEFAULT_BATCH_DELAY_SECONDS = 0.1
DEFAULT_SEND_TIMEOUT_SECONDS = 30.0

T = TypeVar("T")


def partition(items: Sequence[T], size: int) -> list[list[T]]:
    """Split ``items`` into consecutive chunks of at most ``size`` elements."""

    if size <= 0:
        raise ValueError("Batch size must be greater than zero")
    return [list(items[start : start + size]) for start in range(0, len(items), size)]


@dataclass(frozen=True)
class RecipientOutcome:
    """Result of sending the announcement to one member."""

    member_id: str
    email: str
    sent: bool
    reason: str | None = None


@dataclass(frozen=True)
class DispatchFailure:
    member_id: str
    email: str
    reason: str


@dataclass(frozen=True)
class DispatchSummary:
    """Aggregate outcome of one notification run."""

    announcement_id: str
    batch_sizes: tuple[int, ...]
    sent: int
    failed: int
    failures: tuple[DispatchFailure, ...] = ()

    @property
    def batches(self) -> int:
        return len(self.batch_sizes)

    @property
    def total(self) -> int:
        return self.sent + self.failed


@dataclass
class NotificationRun:
    """State of one fan-out while it is in progress."""

    announcement_id: str
    batches: list[list[Member]]
    outcomes: list[RecipientOutcome] = field(default_factory=list)

    def record(self, outcomes: Sequence[RecipientOutcome]) -> None:
        self.outcomes.extend(outcomes)

    def summarize(self) -> DispatchSummary:
        failures = tuple(
            DispatchFailure(
                member_id=outcome.member_id,
                email=outcome.email,
                reason=outcome.reason or "unknown error",
            )
            for outcome in self.outcomes
            if not outcome.sent
        )
        return DispatchSummary(
            announcement_id=self.announcement_id,
            batch_sizes=tuple(len(batch) for batch in self.batches),
            sent=sum(1 for outcome in self.outcomes if outcome.sent),
            failed=len(failures),
            failures=failures,
        )


class NotificationDispatcher:
    """Deliver urgent announcements to every eligible member."""

    def __init__(
        self,
        selector: RecipientSelector,
        gateway: EmailGateway,
        *,
        batch_size: int = DEFAULT_BATCH_SIZE,
        batch_delay: float = DEFAULT_BATCH_DELAY_SECONDS,
        send_timeout: float | None = DEFAULT_SEND_TIMEOUT_SECONDS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if batch_size <= 0:
            raise ValueError("Batch size must be greater than zero")
        if batch_delay < 0:
            raise ValueError("Batch delay cannot be negative")
        self._selector = selector
        self._gateway = gateway
        self.batch_size = batch_size
        self.batch_delay = batch_delay
        self.send_timeout = send_timeout
        self._sleep = sleep
        self._tasks: set[asyncio.Task] = set()

    @classmethod
    def from_settings(
        cls, settings: Settings, selector: RecipientSelector, gateway: EmailGateway
    ) -> "NotificationDispatcher":
        return cls(
            selector,
            gateway,
            batch_size=settings.notification_batch_size,
            batch_delay=settings.notification_batch_delay_ms / 1000,
            send_timeout=settings.notification_send_timeout_seconds,
        )

    @property
    def pending(self) -> int:
        """Number of detached runs that have not finished yet."""

        return len(self._tasks)

    def schedule(
        self, announcement: Announcement, author: Member
    ) -> "asyncio.Task[DispatchSummary | None]":
        """Start a detached run and return its completion handle.

        Must be called from a running event loop. The returned task never
        raises; its result is ``None`` when the run failed before sending.
        """

        task = asyncio.get_running_loop().create_task(
            self._run_detached(announcement, author),
            name=f"urgent-announcement-{announcement.id}",
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def drain(self, timeout: float | None = None) -> None:
        """Wait for in-flight runs, giving up after ``timeout`` seconds."""

        if not self._tasks:
            return
        pending = list(self._tasks)
        logger.info("Waiting for %d notification run(s) to finish", len(pending))
        _, still_running = await asyncio.wait(pending, timeout=timeout)
        if still_running:
            logger.warning(
                "%d notification run(s) still in progress; remaining emails may be dropped",
                len(still_running),
            )

    async def run(self, announcement: Announcement, author: Member) -> DispatchSummary | None:
        """Fan ``announcement`` out to its audience and return the summary.

        Returns ``None`` when the audience could not be listed.
        """

        try:
            audience = await self._selector.select(author.id)
        except Exception:
            logger.exception(
                "Could not list recipients for urgent announcement %s", announcement.id
            )
            return None

        if not audience:
            logger.info("No members to notify for urgent announcement %s", announcement.id)
            return NotificationRun(announcement_id=announcement.id, batches=[]).summarize()

        notification_run = NotificationRun(
            announcement_id=announcement.id,
            batches=partition(audience, self.batch_size),
        )
        logger.info(
            "Sending urgent announcement %s to %d member(s) in %d batch(es)",
            announcement.id,
            len(audience),
            len(notification_run.batches),
        )

        for index, batch in enumerate(notification_run.batches):
            if index:
                await self._sleep(self.batch_delay)
            outcomes = await asyncio.gather(
                *(self._deliver(announcement, author, member) for member in batch)
            )
            notification_run.record(outcomes)

        summary = notification_run.summarize()
        self._log_summary(summary)
        return summary

    async def _run_detached(
        self, announcement: Announcement, author: Member
    ) -> DispatchSummary | None:
        try:
            return await self.run(announcement, author)
        except Exception:
            logger.exception("Urgent announcement %s notification run failed", announcement.id)
            return None

    async def _deliver(
        self, announcement: Announcement, author: Member, recipient: Member
    ) -> RecipientOutcome:
        try:
            message = build_urgent_announcement_email(announcement, author, recipient)
            await asyncio.wait_for(self._gateway.send(message), timeout=self.send_timeout)
        except asyncio.TimeoutError:
            reason = f"timed out after {self.send_timeout:g}s"
        except Exception as exc:
            reason = str(exc) or exc.__class__.__name__
        else:
            return RecipientOutcome(member_id=recipient.id, email=recipient.email, sent=True)

        logger.warning(
            "Failed to send urgent announcement %s to member %s <%s>: %s",
            announcement.id,
            recipient.id,
            recipient.email,
            reason,
        )
        return RecipientOutcome(
            member_id=recipient.id, email=recipient.email, sent=False, reason=reason
        )

    @staticmethod
    def _log_summary(summary: DispatchSummary) -> None:
        if not summary.failed:
            logger.info(
                "Urgent announcement %s delivered: sent=%d failed=0 batches=%d",
                summary.announcement_id,
                summary.sent,
                summary.batches,
            )
            return

        details = "; ".join(
            f"{failure.member_id} <{failure.email}>: {failure.reason}"
            for failure in summary.failures
        )
        logger.warning(
            "Urgent announcement %s delivered with failures: sent=%d failed=%d batches=%d (%s)",
            summary.announcement_id,
            summary.sent,
            summary.failed,
            summary.batches,
            details,
        )


__all__ = [
    "DispatchFailure",
    "DispatchSummary",
    "NotificationDispatcher",
    "NotificationRun",
    "RecipientOutcome",
    "partition",
]
