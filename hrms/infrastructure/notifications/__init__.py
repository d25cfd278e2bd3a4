"""Notificadores de credenciales (SMTP real o sólo logs)."""

from .logging_notifier import LoggingEmailNotifier
from .smtp_notifier import SmtpEmailNotifier

__all__ = ["LoggingEmailNotifier", "SmtpEmailNotifier"]
