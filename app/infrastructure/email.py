"""Email gateway that delivers notification messages via SendGrid."""

from __future__ import annotations

import json
import logging
from typing import Any

import anyio
from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from app.config import Settings, get_settings
from app.domain.entities import EmailMessage
from app.domain.exceptions import EmailDeliveryError

logger = logging.getLogger(__name__)


def _sendgrid_error_messages(body: Any) -> list[str]:
    """Return the messages of a SendGrid v3 error payload.

    SendGrid answers with ``{"errors": [{"message": ..., "field": ...}]}``;
    each entry becomes ``"field: message"``. Bodies that are not in that shape
    are kept verbatim so the failure reason still says something useful.
    """

    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    if isinstance(body, str):
        text = body.strip()
        if not text:
            return []
        try:
            body = json.loads(text)
        except json.JSONDecodeError:
            return [text]

    if isinstance(body, dict) and isinstance(body.get("errors"), list):
        messages = []
        for error in body["errors"]:
            if not isinstance(error, dict) or not error.get("message"):
                continue
            field = error.get("field")
            messages.append(f"{field}: {error['message']}" if field else str(error["message"]))
        return messages
    if body in (None, [], {}):
        return []
    return [json.dumps(body, default=str)]


def _describe_failure(status_code: Any, body: Any) -> str:
    reason = "SendGrid API request failed"
    if status_code:
        reason = f"{reason} with status {status_code}"
    messages = _sendgrid_error_messages(body)
    if messages:
        reason = f"{reason}: {'; '.join(messages)}"
    return reason


class SendGridEmailGateway:
    """Send :class:`EmailMessage` objects through the SendGrid REST API.

    The SendGrid client is synchronous, so each call runs in a worker thread
    and the event loop stays free for sibling sends.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings

    @property
    def settings(self) -> Settings:
        return self._settings or get_settings()

    async def send(self, message: EmailMessage) -> None:
        """Deliver ``message`` or raise :class:`EmailDeliveryError`."""

        await anyio.to_thread.run_sync(self._send_blocking, message)

    def _send_blocking(self, message: EmailMessage) -> None:
        settings = self.settings
        if not settings.email_enabled:
            logger.info("SendGrid configuration incomplete; skipping email to %s", message.to)
            raise EmailDeliveryError("Email delivery is not configured")

        mail = Mail(
            from_email=(settings.sendgrid_sender, settings.sendgrid_sender_name),
            to_emails=message.to,
            subject=message.subject,
            plain_text_content=message.text,
            html_content=message.html or message.text,
        )

        try:
            client = SendGridAPIClient(settings.sendgrid_api_key)
            response = client.send(mail)
        except Exception as exc:
            status_code = getattr(exc, "status_code", None)
            description = _describe_failure(status_code, getattr(exc, "body", None))
            logger.error("%s (recipient %s)", description, message.to)
            raise EmailDeliveryError(description, status_code=status_code) from exc

        status_code = getattr(response, "status_code", None)
        if not isinstance(status_code, int) or not 200 <= status_code < 300:
            description = _describe_failure(status_code, getattr(response, "body", None))
            logger.error("%s (recipient %s)", description, message.to)
            raise EmailDeliveryError(description, status_code=status_code)

        logger.debug("Email '%s' accepted by SendGrid for %s", message.subject, message.to)


__all__ = ["SendGridEmailGateway"]
