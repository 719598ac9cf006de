import smtplib

import pytest

from components.mailer import MailDeliveryError, SmtpMailer


class FakeSMTP:
    instances = []

    def __init__(self, host, port, timeout=None):
        self.host, self.port, self.timeout = host, port, timeout
        self.calls = []
        FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.calls.append("quit")
        return False

    def starttls(self, context=None):
        self.calls.append("starttls")

    def login(self, user, password):
        self.calls.append(("login", user, password))

    def send_message(self, msg):
        self.calls.append(("send", msg["To"], msg["Subject"], msg.get_content().strip()))


class RefusingSMTP(FakeSMTP):
    def login(self, user, password):
        raise smtplib.SMTPAuthenticationError(535, b"bad credentials")


def make_mailer(factory):
    return SmtpMailer(
        host="smtp.example.com", port=587, username="noreply@example.com",
        password="app-pw", timeout=10, smtp_factory=factory,
    )


def test_send_uses_starttls_login_and_timeout():
    FakeSMTP.instances.clear()
    make_mailer(FakeSMTP).send(to="a@b.com", subject="Your Verification Code", body="code 123456")

    smtp = FakeSMTP.instances[-1]
    assert (smtp.host, smtp.port, smtp.timeout) == ("smtp.example.com", 587, 10)
    assert smtp.calls[0] == "starttls"
    assert smtp.calls[1] == ("login", "noreply@example.com", "app-pw")
    assert smtp.calls[2] == ("send", "a@b.com", "Your Verification Code", "code 123456")


def test_message_sender_defaults_to_username():
    msg = make_mailer(FakeSMTP).build_message(to="a@b.com", subject="s", body="b")
    assert msg["From"] == "noreply@example.com"


def test_smtp_failure_becomes_delivery_error():
    with pytest.raises(MailDeliveryError):
        make_mailer(RefusingSMTP).send(to="a@b.com", subject="s", body="b")


def test_connection_timeout_becomes_delivery_error():
    def timing_out(host, port, timeout=None):
        raise TimeoutError("timed out")

    with pytest.raises(MailDeliveryError):
        make_mailer(timing_out).send(to="a@b.com", subject="s", body="b")
