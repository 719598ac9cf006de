from pathlib import Path
import sys

import pytest

# Ensure project root is on sys.path before tests import modules
ROOT = Path(__file__).resolve().parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from components.authservice import AuthSettings  # noqa: E402

TEST_SECRET = "test-secret-0123456789abcdef0123456789abcdef"


class ManualClock:
    def __init__(self, start: int = 1_700_000_000):
        self.now = start

    def now_utc_ts(self) -> int:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += seconds


class RecordingMailer:
    def __init__(self):
        self.sent = []

    def send(self, *, to: str, subject: str, body: str) -> None:
        self.sent.append({"to": to, "subject": subject, "body": body})

    def last_code(self, to: str) -> str:
        body = [m for m in self.sent if m["to"] == to][-1]["body"]
        return body.split("code is: ", 1)[1].split(".", 1)[0]


class FailingMailer:
    def __init__(self):
        self.attempts = 0

    def send(self, *, to: str, subject: str, body: str) -> None:
        self.attempts += 1
        raise ConnectionRefusedError("smtp down")


def make_settings(**overrides) -> AuthSettings:
    values = dict(
        MONGO_URI="mongodb://localhost:27017",
        EMAIL_USER="noreply@example.com",
        EMAIL_PASS="app-password",
        JWT_SECRET=TEST_SECRET,
        BCRYPT_ROUNDS=4,
    )
    values.update(overrides)
    return AuthSettings(_env_file=None, **values)


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def mailer():
    return RecordingMailer()


@pytest.fixture
def settings():
    return make_settings()
