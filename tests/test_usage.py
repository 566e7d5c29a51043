from datetime import datetime

from covergen.extensions import db
from covergen.models import GenerationAction, Subscription
from covergen.billing.usage import count_this_month, check_usage, month_window

NOW = datetime(2026, 10, 18, 14, 30)


def _action(account_id, when):
    db.session.add(GenerationAction(user_id=account_id, created_at=when))
    db.session.commit()


def test_month_window_bounds():
    start, end = month_window(NOW)
    assert start == datetime(2026, 10, 1, 0, 0, 0)
    assert end == datetime(2026, 11, 1, 0, 0, 0)


def test_month_window_rolls_over_december():
    start, end = month_window(datetime(2026, 12, 31, 23, 59, 59))
    assert start == datetime(2026, 12, 1)
    assert end == datetime(2027, 1, 1)


def test_count_is_zero_without_actions(app, account):
    with app.app_context():
        assert count_this_month(account, now=NOW) == 0


def test_count_excludes_other_months(app, account):
    with app.app_context():
        _action(account, datetime(2026, 9, 30, 23, 59, 59))   # last second of previous month
        _action(account, datetime(2026, 10, 1, 0, 0, 0))      # first second of this month
        _action(account, datetime(2026, 10, 31, 23, 59, 59, 500000))
        _action(account, datetime(2026, 11, 1, 0, 0, 0))      # next month
        assert count_this_month(account, now=NOW) == 2


def test_count_is_per_account(app, account):
    from covergen.models import User
    with app.app_context():
        other = User(email="other@example.com")
        db.session.add(other)
        db.session.commit()
        _action(account, datetime(2026, 10, 2))
        _action(other.id, datetime(2026, 10, 3))
        _action(other.id, datetime(2026, 10, 4))
        assert count_this_month(account, now=NOW) == 1
        assert count_this_month(other.id, now=NOW) == 2


def test_free_account_hits_quota(app, account):
    with app.app_context():
        summary = check_usage(account, now=NOW)
        assert (summary.usage_count, summary.quota, summary.remaining, summary.can_generate) == (0, 2, 2, True)

        _action(account, datetime(2026, 10, 5))
        _action(account, datetime(2026, 10, 6))
        summary = check_usage(account, now=NOW)
        assert summary.usage_count == 2
        assert summary.remaining == 0
        assert summary.can_generate is False
        assert summary.to_dict()["remainingCount"] == 0


def test_active_subscriber_is_unlimited(app, account):
    with app.app_context():
        db.session.add(Subscription(polar_id="sub_u", user_id=account, status="active"))
        db.session.commit()
        for day in range(1, 6):
            _action(account, datetime(2026, 10, day))
        summary = check_usage(account, now=NOW)
        assert summary.usage_count == 5
        assert summary.unlimited is True
        assert summary.remaining is None
        assert summary.can_generate is True
