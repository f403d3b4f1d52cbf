"""
Task Manager API - Notification Dispatcher

Welcome and cancellation emails, sent fire-and-forget.

Each notification is scheduled as a detached asyncio task. The request that
triggered it never awaits delivery, and a failed send is logged and dropped:
there is no retry and no delivery guarantee.
"""

import asyncio
import logging
from typing import Protocol

from task_manager.emails.transport import SMTPMailTransport

logger = logging.getLogger(__name__)

WELCOME_SUBJECT = "Thanks for joining in!"
WELCOME_BODY = "Welcome to the app, {name}. let me know how you get along with the app."

CANCELLATION_SUBJECT = "Sorry to see you go"
CANCELLATION_BODY = "Goodbye, {name}. I hope to see you back sometime soon"


class MailTransport(Protocol):
    async def send(self, to: str, subject: str, body: str) -> None: ...


class NotificationDispatcher:
    """Schedules account emails without blocking the caller."""

    def __init__(self, transport: MailTransport):
        self.transport = transport
        self._pending: set[asyncio.Task] = set()

    def notify_welcome(self, email: str, name: str) -> None:
        """Queue the signup greeting."""
        self._dispatch(email, WELCOME_SUBJECT, WELCOME_BODY.format(name=name))

    def notify_cancellation(self, email: str, name: str) -> None:
        """Queue the farewell sent after account deletion."""
        self._dispatch(email, CANCELLATION_SUBJECT, CANCELLATION_BODY.format(name=name))

    def _dispatch(self, to: str, subject: str, body: str) -> None:
        task = asyncio.create_task(self._deliver(to, subject, body))
        # Hold a reference until the send finishes so the task is not collected
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _deliver(self, to: str, subject: str, body: str) -> None:
        try:
            await self.transport.send(to, subject, body)
            logger.info("Sent %r notification to %s", subject, to)
        except Exception as e:
            logger.warning("Failed to send %r notification to %s: %s", subject, to, e)

    @property
    def pending(self) -> int:
        return len(self._pending)

    async def drain(self) -> None:
        """Wait for in-flight sends. Used on shutdown and in tests."""
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)


# Singleton dispatcher instance
notification_dispatcher = NotificationDispatcher(SMTPMailTransport())


def get_notifier() -> NotificationDispatcher:
    """Dependency to get the notification dispatcher."""
    return notification_dispatcher
