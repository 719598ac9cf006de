from datetime import datetime, timezone

import pytest

from components.authservice.adapters.mongo import MongoCredentialStore
from components.authservice.contracts import User
from components.authservice.errors import DuplicateEmail

mongomock = pytest.importorskip("mongomock")

EXPIRY = datetime(2030, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def store():
    collection = mongomock.MongoClient()["authdb"]["users"]
    return MongoCredentialStore(collection)


def test_create_and_find(store):
    store.create(User(email="u@x.com", password_hash="h1", full_name="U"))
    user = store.find_by_email("u@x.com")
    assert user.password_hash == "h1"
    assert user.full_name == "U"
    assert user.email_verified is False
    assert store.find_by_email("other@x.com") is None


def test_duplicate_email_is_rejected(store):
    store.create(User(email="u@x.com", password_hash="h1", full_name="U"))
    with pytest.raises(DuplicateEmail):
        store.create(User(email="u@x.com", password_hash="h2", full_name="U2"))
    assert store.find_by_email("u@x.com").password_hash == "h1"


def test_upsert_code_creates_single_record_and_reads_utc(store):
    store.upsert_code("a@b.com", "111111", EXPIRY)
    store.upsert_code("a@b.com", "222222", EXPIRY)

    user = store.find_by_email("a@b.com")
    assert user.pending_code == "222222"
    assert user.pending_code_expiry == EXPIRY
    assert user.pending_code_expiry.tzinfo is not None
    assert store._users.count_documents({"email": "a@b.com"}) == 1


def test_signup_claims_code_only_record(store):
    store.upsert_code("a@b.com", "111111", EXPIRY)
    store.create(User(email="a@b.com", password_hash="h1", full_name="A"))

    user = store.find_by_email("a@b.com")
    assert user.password_hash == "h1"
    assert user.pending_code is None
    assert user.email_verified is False
    with pytest.raises(DuplicateEmail):
        store.create(User(email="a@b.com", password_hash="h2", full_name="B"))


def test_claiming_a_verified_record_resets_verification(store):
    store.upsert_code("a@b.com", "111111", EXPIRY)
    assert store.consume_code("a@b.com", "111111") is True
    assert store.find_by_email("a@b.com").email_verified is True

    store.create(User(email="a@b.com", password_hash="h1", full_name="A"))
    doc = store._users.find_one({"email": "a@b.com"})
    assert doc["emailVerified"] is False
    assert doc["authCode"] is None


def test_consume_code_is_conditional_on_the_stored_code(store):
    store.create(User(email="a@b.com", password_hash="h1", full_name="A"))
    store.upsert_code("a@b.com", "222222", EXPIRY)

    assert store.consume_code("a@b.com", "111111") is False
    assert store.consume_code("nobody@b.com", "222222") is False
    assert store.find_by_email("a@b.com").pending_code == "222222"

    assert store.consume_code("a@b.com", "222222") is True
    user = store.find_by_email("a@b.com")
    assert user.pending_code is None
    assert user.pending_code_expiry is None
    assert user.email_verified is True
    assert user.password_hash == "h1"
    assert store.consume_code("a@b.com", "222222") is False


def test_save_persists_changes(store):
    store.upsert_code("a@b.com", "111111", EXPIRY)
    user = store.find_by_email("a@b.com")
    user.pending_code = None
    user.pending_code_expiry = None
    user.email_verified = True
    store.save(user)

    saved = store.find_by_email("a@b.com")
    assert saved.pending_code is None
    assert saved.email_verified is True


def test_documents_use_collection_field_names(store):
    store.create(User(email="u@x.com", password_hash="h1", full_name="U"))
    doc = store._users.find_one({"email": "u@x.com"})
    assert doc["password"] == "h1"
    assert doc["fullName"] == "U"
