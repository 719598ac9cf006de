from __future__ import annotations


class MailError(Exception):
    """Base error for the mailer component."""


class MailDeliveryError(MailError):
    """The SMTP server could not be reached or refused the message."""
