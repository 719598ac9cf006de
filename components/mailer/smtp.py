from __future__ import annotations

import logging
import smtplib
import ssl
from email.message import EmailMessage
from typing import Callable, Optional

from .errors import MailDeliveryError

logger = logging.getLogger("mailer")


class SmtpMailer:
    """
    Blocking SMTP sender (STARTTLS + login), one connection per message.
    Every socket operation is bounded by `timeout` seconds.
    """

    def __init__(
        self,
        *,
        host: str,
        port: int,
        username: str,
        password: str,
        sender: Optional[str] = None,
        timeout: float = 10.0,
        smtp_factory: Callable[..., smtplib.SMTP] = smtplib.SMTP,
    ) -> None:
        self.host = host
        self.port = port
        self.username = username
        self._password = password
        self.sender = sender or username
        self.timeout = timeout
        self._smtp_factory = smtp_factory

    def build_message(self, *, to: str, subject: str, body: str) -> EmailMessage:
        msg = EmailMessage()
        msg["Subject"] = subject
        msg["From"] = self.sender
        msg["To"] = to
        msg.set_content(body)
        return msg

    def send(self, *, to: str, subject: str, body: str) -> None:
        msg = self.build_message(to=to, subject=subject, body=body)
        try:
            with self._smtp_factory(self.host, self.port, timeout=self.timeout) as server:
                server.starttls(context=ssl.create_default_context())
                server.login(self.username, self._password)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as ex:
            logger.error("mail.send_failed", extra={"host": self.host, "error": type(ex).__name__})
            raise MailDeliveryError(str(ex)) from ex
        logger.info("mail.sent", extra={"host": self.host})
