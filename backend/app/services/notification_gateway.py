"""Notification gateway: email notifier and IM bridge sender.

Both channels are best-effort from the caller's point of view. Failures are
raised as DispatchFailure and it is up to the caller whether that is fatal.
Nothing here retries.
"""

import asyncio
import logging
import smtplib
import ssl
from email.message import EmailMessage

import httpx

from app.core.config import settings
from app.models.chat import Chat
from app.models.message import Message
from app.services.errors import DispatchFailure

logger = logging.getLogger(__name__)


class NotificationGateway:
    """Sends message notifications by email and to IM-bridged chats."""

    def __init__(self, http_client: httpx.AsyncClient | None = None) -> None:
        self._http = http_client

    # -------------------------------------------------------------------
    # Email
    # -------------------------------------------------------------------

    async def send_email(self, message: Message) -> None:
        """Email ``NOTIFY_EMAIL_TO`` about ``message``."""
        if not all([settings.SMTP_HOST, settings.SMTP_USER, settings.SMTP_PASSWORD,
                    settings.EMAIL_FROM, settings.NOTIFY_EMAIL_TO]):
            raise DispatchFailure("SMTP configuration missing")

        email = self._build_email(message)
        try:
            await asyncio.to_thread(self._deliver_email, email)
        except (smtplib.SMTPException, OSError) as exc:
            logger.error("Email for message %s/%s failed: %s", message.owner, message.name, exc)
            raise DispatchFailure(f"Failed to send email: {exc}") from exc
        logger.info("Sent email notification for message %s/%s", message.owner, message.name)

    @staticmethod
    def _build_email(message: Message) -> EmailMessage:
        email = EmailMessage()
        email["From"] = f"{settings.EMAIL_FROM_NAME} <{settings.EMAIL_FROM}>"
        email["To"] = settings.NOTIFY_EMAIL_TO
        email["Subject"] = f"New message from {message.author or message.user} in chat {message.chat}"
        email.set_content(
            f"Chat: {message.chat}\n"
            f"Author: {message.author}\n"
            f"Time: {message.created_time}\n\n"
            f"{message.text}\n"
        )
        return email

    @staticmethod
    def _deliver_email(email: EmailMessage) -> None:
        context = ssl.create_default_context()
        if settings.SMTP_PORT == 465:
            with smtplib.SMTP_SSL(settings.SMTP_HOST, settings.SMTP_PORT, context=context) as server:
                server.login(settings.SMTP_USER, settings.SMTP_PASSWORD)
                server.send_message(email)
        else:
            with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT) as server:
                server.starttls(context=context)
                server.login(settings.SMTP_USER, settings.SMTP_PASSWORD)
                server.send_message(email)

    # -------------------------------------------------------------------
    # IM bridge
    # -------------------------------------------------------------------

    async def send_to_chat(self, chat: Chat, payload: str) -> None:
        """Hand a serialised envelope to the IM bridge for ``chat``."""
        if not settings.IM_BRIDGE_URL:
            raise DispatchFailure("IM bridge is not configured")

        body = {
            "chat": chat.id,
            "user": chat.user,
            "organization": chat.organization,
            "payload": payload,
        }
        try:
            if self._http is not None:
                response = await self._http.post(settings.IM_BRIDGE_URL, json=body)
            else:
                timeout = httpx.Timeout(settings.IM_BRIDGE_TIMEOUT_SECONDS)
                async with httpx.AsyncClient(timeout=timeout) as client:
                    response = await client.post(settings.IM_BRIDGE_URL, json=body)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise DispatchFailure(f"IM bridge rejected message for chat {chat.id}: {exc}") from exc
