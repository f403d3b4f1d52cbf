"""
Task Manager API - Account Emails

Best-effort notifications for account lifecycle events.
"""

from task_manager.emails.notifications import NotificationDispatcher, get_notifier
from task_manager.emails.transport import SMTPMailTransport

__all__ = ["NotificationDispatcher", "SMTPMailTransport", "get_notifier"]
