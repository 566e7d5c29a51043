from sqlalchemy import text
from covergen.extensions import db
from covergen.utils.helpers import utcnow, isoformat_or_none as _iso

STATUS_ACTIVE = "active"
STATUS_CANCELED = "canceled"
STATUS_REVOKED = "revoked"


class Subscription(db.Model):
    """
    One payment-provider subscription bound to one account.

    Keyed by the provider's subscription id (``polar_id``); rows are mutated in
    place by webhook events and never deleted, terminal states included.
    Timestamps are naive UTC.
    """
    __tablename__ = "subscriptions"

    id = db.Column(db.Integer, primary_key=True)
    polar_id = db.Column(db.String(64), nullable=False, unique=True, index=True)
    # No FK: a checkout can complete before the account row is visible to us
    user_id = db.Column(db.String(64), nullable=False, index=True)
    customer_id = db.Column(db.String(64), nullable=True, index=True)

    status = db.Column(db.String(32), nullable=False, index=True, server_default=text("'incomplete'"))
    polar_price_id = db.Column(db.String(64), nullable=True, index=True)
    currency = db.Column(db.String(8), nullable=True)
    interval = db.Column(db.String(16), nullable=True)
    amount = db.Column(db.Integer, nullable=True)

    current_period_start = db.Column(db.DateTime, nullable=True)
    current_period_end = db.Column(db.DateTime, nullable=True, index=True)
    cancel_at_period_end = db.Column(db.Boolean, nullable=False, default=False, server_default=text("false"))
    canceled_at = db.Column(db.DateTime, nullable=True)
    customer_cancellation_reason = db.Column(db.String(64), nullable=True)
    customer_cancellation_comment = db.Column(db.Text, nullable=True)
    started_at = db.Column(db.DateTime, nullable=True)
    ended_at = db.Column(db.DateTime, nullable=True)

    metadata_json = db.Column("metadata", db.JSON, nullable=False, default=dict)
    custom_field_data = db.Column(db.JSON, nullable=False, default=dict)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    @property
    def is_active(self) -> bool:
        return self.status == STATUS_ACTIVE

    def to_dict(self) -> dict:
        return {
            "polar_id": self.polar_id,
            "user_id": self.user_id,
            "customer_id": self.customer_id,
            "status": self.status,
            "polar_price_id": self.polar_price_id,
            "currency": self.currency,
            "interval": self.interval,
            "amount": self.amount,
            "current_period_start": _iso(self.current_period_start),
            "current_period_end": _iso(self.current_period_end),
            "cancel_at_period_end": bool(self.cancel_at_period_end),
            "canceled_at": _iso(self.canceled_at),
            "customer_cancellation_reason": self.customer_cancellation_reason,
            "customer_cancellation_comment": self.customer_cancellation_comment,
            "started_at": _iso(self.started_at),
            "ended_at": _iso(self.ended_at),
            "metadata": self.metadata_json or {},
            "custom_field_data": self.custom_field_data or {},
        }

    def __repr__(self) -> str:
        return f"<Subscription id={self.id} polar_id={self.polar_id!r} user_id={self.user_id!r} status={self.status!r}>"
