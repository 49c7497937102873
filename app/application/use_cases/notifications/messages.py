"""Email content for urgent announcements."""

from __future__ import annotations

from html import escape

from app.domain.entities import Announcement, EmailMessage, Member


def _format_date(announcement: Announcement) -> str:
    return announcement.published_at.strftime("%A, %B %d, %Y")


def build_urgent_announcement_email(
    announcement: Announcement, author: Member, recipient: Member
) -> EmailMessage:
    """Return the message sent to ``recipient`` for an urgent ``announcement``."""

    published = _format_date(announcement)
    text = (
        "URGENT ANNOUNCEMENT\n\n"
        f"{announcement.title}\n\n"
        f"{announcement.content}\n\n"
        f"Posted by: {author.full_name}\n"
        f"Date: {published}"
    )
    html_content = "".join(
        (
            '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">',
            '<div style="background-color: #dc2626; color: white; padding: 20px;">',
            '<h1 style="margin: 0; font-size: 24px;">Urgent Announcement</h1>',
            "</div>",
            '<div style="background-color: #f9fafb; padding: 30px; border: 1px solid #e5e7eb;">',
            f'<h2 style="color: #1f2937; margin-top: 0;">{escape(announcement.title)}</h2>',
            '<div style="color: #374151; line-height: 1.6; white-space: pre-wrap;">',
            escape(announcement.content),
            "</div>",
            '<p style="color: #6b7280; font-size: 14px;">',
            f"<strong>Posted by:</strong> {escape(author.full_name)}<br>",
            f"<strong>Date:</strong> {published}<br><br>",
            "You received this email because you have email notifications enabled "
            "for urgent announcements.",
            "</p>",
            "</div>",
            "</div>",
        )
    )
    return EmailMessage(
        to=recipient.email,
        subject=f"URGENT: {announcement.title}",
        text=text,
        html=html_content,
    )


__all__ = ["build_urgent_announcement_email"]
