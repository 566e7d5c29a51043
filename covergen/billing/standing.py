from dataclasses import dataclass
from typing import Any

from flask import current_app
from sqlalchemy import desc

from covergen.extensions import db
from covergen.models import Subscription, STATUS_ACTIVE

FREE_PLAN_NAME = "Free"
PRO_PLAN_NAME = "Pro"
FREE_MONTHLY_QUOTA = 2


@dataclass(frozen=True)
class Standing:
    """Plan standing for one account. ``quota`` is None when unlimited."""
    active: bool
    plan_name: str
    quota: int | None
    subscription: Subscription | None = None

    @property
    def unlimited(self) -> bool:
        return self.quota is None

    @property
    def subscription_id(self) -> str | None:
        return self.subscription.polar_id if self.subscription is not None else None

    def to_minimal(self) -> dict[str, Any]:
        return {
            "hasActiveSubscription": self.active,
            "subscriptionId": self.subscription_id,
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "active": self.active,
            "planName": self.plan_name,
            "quota": self.quota,
            "subscription": self.subscription.to_dict() if self.subscription is not None else None,
        }


def free_quota() -> int:
    return int(current_app.config.get("FREE_MONTHLY_QUOTA", FREE_MONTHLY_QUOTA))


def resolve_plan_name(price_id: str | None) -> str:
    """Plan label for an active subscription, keyed off configured price ids."""
    cfg = current_app.config
    if not price_id:
        return PRO_PLAN_NAME
    if price_id == cfg.get("POLAR_PRICE_PRO_MONTHLY"):
        return f"{PRO_PLAN_NAME} Monthly"
    if price_id == cfg.get("POLAR_PRICE_PRO_YEARLY"):
        return f"{PRO_PLAN_NAME} Yearly"
    # Pro is the only paid plan; unknown prices still mean a paying account
    return PRO_PLAN_NAME


def active_subscription_for(account_id: str) -> Subscription | None:
    """
    The account's active record. If a data anomaly left several, the most
    recently started wins (rows without started_at last, then newest row).
    """
    return (
        db.session.query(Subscription)
        .filter(Subscription.user_id == str(account_id), Subscription.status == STATUS_ACTIVE)
        .order_by(Subscription.started_at.is_(None), desc(Subscription.started_at), desc(Subscription.id))
        .first()
    )


def get_standing(account_id: str) -> Standing:
    sub = active_subscription_for(account_id)
    if sub is None:
        return Standing(active=False, plan_name=FREE_PLAN_NAME, quota=free_quota())
    return Standing(active=True, plan_name=resolve_plan_name(sub.polar_price_id), quota=None, subscription=sub)
