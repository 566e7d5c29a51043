"""
Reconciles typed billing events into the subscription ledger.

Handlers are keyed by event class. "created" is an upsert on the provider's
subscription id; every other lifecycle event overwrites fields on an existing
row and is a logged no-op when the row is unknown. Replaying an event leaves
the ledger in the same state.

There is no sequencing between events for the same subscription: the last
write wins per field, so a late "updated" can overwrite a newer "canceled".
"""
import logging
from typing import Callable

from covergen.billing import events as ev
from covergen.models import Subscription, STATUS_ACTIVE, STATUS_REVOKED
from covergen.utils.helpers import to_naive_utc

logger = logging.getLogger(__name__)

APPLIED = "applied"
IGNORED = "ignored"
MISSING = "missing"


class EventDispatcher:
    def __init__(self, session):
        self.session = session
        self._handlers: dict[type[ev.BillingEvent], Callable[[ev.BillingEvent], str]] = {
            ev.SubscriptionCreated: self._on_created,
            ev.SubscriptionUpdated: self._on_updated,
            ev.SubscriptionActivated: self._on_active,
            ev.SubscriptionCanceled: self._on_canceled,
            ev.SubscriptionUncanceled: self._on_uncanceled,
            ev.SubscriptionRevoked: self._on_revoked,
            ev.OrderCreated: self._on_order_created,
            ev.UnrecognizedEvent: self._on_unrecognized,
        }

    def dispatch(self, event: ev.BillingEvent) -> str:
        """
        Apply ``event`` and commit. Returns "applied", "ignored" or "missing".
        Ledger errors roll back the session and propagate.
        """
        handler = self._handlers.get(type(event), self._on_unrecognized)
        try:
            outcome = handler(event)
            if outcome == APPLIED:
                self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        logger.info(
            "webhook.dispatch",
            extra={"event_type": event.type, "polar_id": event.provider_id, "outcome": outcome},
        )
        return outcome

    # ---- ledger access ----

    def _find(self, polar_id: str) -> Subscription | None:
        return self.session.query(Subscription).filter_by(polar_id=polar_id).one_or_none()

    def _existing(self, event: ev.BillingEvent) -> Subscription | None:
        sub = self._find(event.provider_id)
        if sub is None:
            logger.info(
                "webhook.dispatch.unknown_subscription",
                extra={"event_type": event.type, "polar_id": event.provider_id},
            )
        return sub

    # ---- handlers ----

    def _on_created(self, event: ev.SubscriptionCreated) -> str:
        data = event.data
        sub = self._find(data.id)
        if sub is None:
            sub = Subscription(polar_id=data.id)
            self.session.add(sub)
        sub.user_id = data.metadata.user_id
        sub.customer_id = data.customer_id
        sub.status = data.status
        sub.polar_price_id = data.price_id
        sub.currency = data.currency
        sub.interval = data.recurring_interval
        sub.amount = data.amount
        sub.current_period_start = to_naive_utc(data.current_period_start)
        sub.current_period_end = to_naive_utc(data.current_period_end)
        sub.cancel_at_period_end = bool(data.cancel_at_period_end)
        sub.started_at = to_naive_utc(data.started_at)
        sub.ended_at = to_naive_utc(data.ended_at)
        sub.canceled_at = to_naive_utc(data.canceled_at)
        sub.customer_cancellation_reason = data.customer_cancellation_reason or None
        sub.customer_cancellation_comment = data.customer_cancellation_comment or None
        sub.metadata_json = data.metadata_dict()
        sub.custom_field_data = data.custom_field_data or {}
        return APPLIED

    def _on_updated(self, event: ev.SubscriptionUpdated) -> str:
        sub = self._existing(event)
        if sub is None:
            return MISSING
        data = event.data
        sub.amount = data.amount
        sub.status = data.status or sub.status
        sub.current_period_start = to_naive_utc(data.current_period_start)
        sub.current_period_end = to_naive_utc(data.current_period_end)
        sub.cancel_at_period_end = bool(data.cancel_at_period_end)
        sub.metadata_json = data.metadata or {}
        sub.custom_field_data = data.custom_field_data or {}
        return APPLIED

    def _on_active(self, event: ev.SubscriptionActivated) -> str:
        sub = self._existing(event)
        if sub is None:
            return MISSING
        sub.status = STATUS_ACTIVE
        sub.started_at = to_naive_utc(event.data.started_at)
        return APPLIED

    def _on_canceled(self, event: ev.SubscriptionCanceled) -> str:
        sub = self._existing(event)
        if sub is None:
            return MISSING
        data = event.data
        sub.status = data.status or sub.status
        sub.canceled_at = to_naive_utc(data.canceled_at)
        sub.customer_cancellation_reason = data.customer_cancellation_reason or None
        sub.customer_cancellation_comment = data.customer_cancellation_comment or None
        return APPLIED

    def _on_uncanceled(self, event: ev.SubscriptionUncanceled) -> str:
        sub = self._existing(event)
        if sub is None:
            return MISSING
        sub.status = event.data.status or sub.status
        sub.cancel_at_period_end = False
        sub.canceled_at = None
        sub.customer_cancellation_reason = None
        sub.customer_cancellation_comment = None
        return APPLIED

    def _on_revoked(self, event: ev.SubscriptionRevoked) -> str:
        sub = self._existing(event)
        if sub is None:
            return MISSING
        sub.status = STATUS_REVOKED
        sub.ended_at = to_naive_utc(event.data.ended_at)
        return APPLIED

    def _on_order_created(self, event: ev.OrderCreated) -> str:
        # Orders are reflected through the subscription events
        return IGNORED

    def _on_unrecognized(self, event: ev.BillingEvent) -> str:
        logger.info("webhook.dispatch.unhandled_type", extra={"event_type": event.type})
        return IGNORED
