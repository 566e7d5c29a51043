import pytest
from covergen.billing.events import (
    parse_event, EventSchemaError,
    SubscriptionCreated, SubscriptionUpdated, SubscriptionRevoked, OrderCreated, UnrecognizedEvent,
)
from conftest import subscription_payload


def test_created_event_parses_typed_payload():
    event = parse_event(subscription_payload(user_id="acct-9"))
    assert isinstance(event, SubscriptionCreated)
    assert event.provider_id == "sub_123"
    assert event.data.metadata.user_id == "acct-9"
    assert event.data.current_period_end.year == 2026


def test_lifecycle_types_map_to_their_classes():
    assert isinstance(parse_event(subscription_payload("subscription.updated")), SubscriptionUpdated)
    assert isinstance(parse_event(subscription_payload("subscription.revoked")), SubscriptionRevoked)
    assert isinstance(parse_event({"type": "order.created", "data": {"id": "ord_1"}}), OrderCreated)


def test_unknown_type_only_needs_envelope():
    event = parse_event({"type": "checkout.updated", "data": {"id": "chk_1", "anything": [1, 2]}})
    assert isinstance(event, UnrecognizedEvent)
    assert event.type == "checkout.updated"
    assert event.provider_id == "chk_1"


@pytest.mark.parametrize("body", [
    [],
    "subscription.created",
    {},
    {"type": ""},
    {"type": "subscription.updated"},
    {"type": "subscription.updated", "data": {}},
    {"type": "checkout.updated", "data": {"id": ""}},
])
def test_bad_envelopes_raise(body):
    with pytest.raises(EventSchemaError):
        parse_event(body)


def test_created_without_owner_is_malformed():
    body = subscription_payload()
    body["data"]["metadata"] = {}
    with pytest.raises(EventSchemaError) as exc:
        parse_event(body)
    assert "user_id" in str(exc.value)


def test_created_with_bad_timestamp_is_malformed():
    body = subscription_payload(current_period_end="not-a-date")
    with pytest.raises(EventSchemaError):
        parse_event(body)


def test_update_tolerates_null_optional_fields():
    body = subscription_payload("subscription.updated", amount=None, cancel_at_period_end=None, metadata={})
    event = parse_event(body)
    assert event.data.amount is None
    assert event.data.cancel_at_period_end is None


def test_null_mappings_parse_as_empty():
    event = parse_event(subscription_payload("subscription.updated", metadata=None, custom_field_data=None))
    assert event.data.metadata == {}
    assert event.data.custom_field_data == {}

    created = parse_event(subscription_payload(custom_field_data=None))
    assert created.data.custom_field_data == {}


def test_created_with_null_metadata_still_needs_an_account():
    with pytest.raises(EventSchemaError):
        parse_event(subscription_payload(metadata=None))
