"""
Typed webhook events.

Every inbound body is parsed into exactly one of the event classes below before
it is stored or dispatched. Known subscription lifecycle types get a strict
payload schema; anything else becomes an ``UnrecognizedEvent`` that only needs
the common envelope (``type`` and ``data.id``).
"""
from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

SUBSCRIPTION_CREATED = "subscription.created"
SUBSCRIPTION_UPDATED = "subscription.updated"
SUBSCRIPTION_ACTIVE = "subscription.active"
SUBSCRIPTION_CANCELED = "subscription.canceled"
SUBSCRIPTION_UNCANCELED = "subscription.uncanceled"
SUBSCRIPTION_REVOKED = "subscription.revoked"
ORDER_CREATED = "order.created"


class EventSchemaError(ValueError):
    """Body is not a webhook event we can safely store or dispatch."""


class _Payload(BaseModel):
    # Providers add fields over time; keep them in the raw payload, ignore here
    model_config = ConfigDict(extra="allow")


class EventData(_Payload):
    id: str = Field(min_length=1)


class SubscriptionMetadata(_Payload):
    user_id: str = Field(min_length=1)


class SubscriptionData(EventData):
    status: str | None = None
    price_id: str | None = None
    currency: str | None = None
    recurring_interval: str | None = None
    amount: int | None = None
    customer_id: str | None = None
    current_period_start: datetime | None = None
    current_period_end: datetime | None = None
    cancel_at_period_end: bool | None = None
    started_at: datetime | None = None
    ended_at: datetime | None = None
    canceled_at: datetime | None = None
    customer_cancellation_reason: str | None = None
    customer_cancellation_comment: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    custom_field_data: dict[str, Any] = Field(default_factory=dict)

    @field_validator("metadata", "custom_field_data", mode="before")
    @classmethod
    def _null_as_empty(cls, value):
        return {} if value is None else value


class NewSubscriptionData(SubscriptionData):
    # The owning account only arrives via checkout metadata
    status: str
    metadata: SubscriptionMetadata

    def metadata_dict(self) -> dict[str, Any]:
        return self.metadata.model_dump()


class BillingEvent(BaseModel):
    type: str
    data: EventData

    @property
    def provider_id(self) -> str:
        return self.data.id


class SubscriptionCreated(BillingEvent):
    type: Literal["subscription.created"]
    data: NewSubscriptionData


class SubscriptionUpdated(BillingEvent):
    type: Literal["subscription.updated"]
    data: SubscriptionData


class SubscriptionActivated(BillingEvent):
    type: Literal["subscription.active"]
    data: SubscriptionData


class SubscriptionCanceled(BillingEvent):
    type: Literal["subscription.canceled"]
    data: SubscriptionData


class SubscriptionUncanceled(BillingEvent):
    type: Literal["subscription.uncanceled"]
    data: SubscriptionData


class SubscriptionRevoked(BillingEvent):
    type: Literal["subscription.revoked"]
    data: SubscriptionData


class OrderCreated(BillingEvent):
    type: Literal["order.created"]
    data: EventData


class UnrecognizedEvent(BillingEvent):
    pass


EVENT_TYPES: dict[str, type[BillingEvent]] = {
    SUBSCRIPTION_CREATED: SubscriptionCreated,
    SUBSCRIPTION_UPDATED: SubscriptionUpdated,
    SUBSCRIPTION_ACTIVE: SubscriptionActivated,
    SUBSCRIPTION_CANCELED: SubscriptionCanceled,
    SUBSCRIPTION_UNCANCELED: SubscriptionUncanceled,
    SUBSCRIPTION_REVOKED: SubscriptionRevoked,
    ORDER_CREATED: OrderCreated,
}


def _error_summary(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors()[:3]:
        loc = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts)


def parse_event(body: Any) -> BillingEvent:
    """
    Validate a decoded JSON body into its event class.
    Raises EventSchemaError for a bad envelope or a known type with a bad payload.
    """
    if not isinstance(body, dict):
        raise EventSchemaError("Event body must be a JSON object")
    event_type = body.get("type")
    if not isinstance(event_type, str) or not event_type:
        raise EventSchemaError("Event type is required")

    model = EVENT_TYPES.get(event_type, UnrecognizedEvent)
    try:
        return model.model_validate(body)
    except ValidationError as exc:
        raise EventSchemaError(f"Malformed {event_type} payload: {_error_summary(exc)}") from exc
