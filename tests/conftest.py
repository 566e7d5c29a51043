import os
# Ensure the app factory picks the Testing config & SQLite memory DB
os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("TEST_DATABASE_URL", "sqlite:///:memory:")

import json
import time

import pytest
from covergen import create_app
from covergen.extensions import db
from covergen.billing import sign_payload
from covergen.models import User

WEBHOOK_SECRET = "whsec_test_secret"


@pytest.fixture(scope="session")
def app():
    app = create_app({
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
        "WTF_CSRF_ENABLED": False,
        "RATELIMIT_ENABLED": False,
        "POLAR_WEBHOOK_SECRET": WEBHOOK_SECRET,
        "POLAR_ACCESS_TOKEN": "polar_at_test",
        "POLAR_PRICE_PRO_MONTHLY": "price_pro_monthly",
        "POLAR_PRICE_PRO_YEARLY": "price_pro_yearly",
        "FREE_MONTHLY_QUOTA": 2,
    })
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture(autouse=True)
def _db_clean(app):
    # Clean BEFORE each test
    with app.app_context():
        db.session.rollback()
        for tbl in reversed(db.metadata.sorted_tables):
            db.session.execute(tbl.delete())
        db.session.commit()
    yield
    # And AFTER each test (keeps state hermetic even if a test fails mid-transaction)
    with app.app_context():
        db.session.rollback()
        for tbl in reversed(db.metadata.sorted_tables):
            db.session.execute(tbl.delete())
        db.session.commit()


@pytest.fixture()
def account(app):
    """A persisted account; returns its id."""
    with app.app_context():
        user = User(email="writer@example.com")
        db.session.add(user)
        db.session.commit()
        return user.id


def login(client, account_id: str):
    with client.session_transaction() as sess:
        sess["_user_id"] = str(account_id)


def subscription_payload(event_type="subscription.created", sub_id="sub_123", user_id="acct-1", **overrides):
    data = {
        "id": sub_id,
        "status": "active",
        "price_id": "price_pro_monthly",
        "currency": "usd",
        "recurring_interval": "month",
        "amount": 900,
        "customer_id": "cus_123",
        "current_period_start": "2026-10-01T00:00:00Z",
        "current_period_end": "2026-11-01T00:00:00Z",
        "cancel_at_period_end": False,
        "started_at": "2026-10-01T00:00:00Z",
        "ended_at": None,
        "canceled_at": None,
        "customer_cancellation_reason": None,
        "customer_cancellation_comment": None,
        "metadata": {"user_id": user_id},
        "custom_field_data": {},
    }
    data.update(overrides)
    return {"type": event_type, "data": data}


def post_webhook(client, event, secret=WEBHOOK_SECRET, timestamp=None, header="webhook-signature", signature=None):
    body = json.dumps(event) if not isinstance(event, (bytes, str)) else event
    headers = {}
    if secret is not None or signature is not None:
        headers[header] = signature if signature is not None else "sha256=" + sign_payload(body, secret)
    if timestamp is not None:
        headers["webhook-timestamp"] = str(timestamp)
    return client.post("/api/polar/webhook", data=body, headers=headers, content_type="application/json")


def now_ts() -> int:
    return int(time.time())
