import logging

from sqlalchemy.exc import SQLAlchemyError

from covergen.extensions import db
from covergen.models import WebhookEvent
from covergen.utils.helpers import utcnow

logger = logging.getLogger(__name__)


class EventStoreError(RuntimeError):
    pass


def record_event(event_type: str, provider_event_id: str, payload: dict, *, required: bool = False) -> int | None:
    """
    Append one audit row for an inbound delivery and return its id.

    Storage failures are logged and swallowed (returns None) so dispatch can
    still run; pass ``required=True`` to raise EventStoreError instead.
    """
    row = WebhookEvent(
        event_type=event_type,
        polar_event_id=provider_event_id,
        data=payload,
    )
    try:
        db.session.add(row)
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.exception(
            "webhook.event_store.write_failed",
            extra={"event_type": event_type, "polar_event_id": provider_event_id},
        )
        if required:
            raise EventStoreError("Could not record webhook event") from exc
        return None
    return row.id


def mark_processed(stored_id: int | None, outcome: str, notes: str | None = None) -> None:
    """Best-effort annotation of a stored event with its dispatch result."""
    if stored_id is None:
        return
    try:
        row = db.session.get(WebhookEvent, stored_id)
        if row is None:
            return
        row.outcome = outcome
        row.notes = notes[:255] if notes else None
        row.processed_at = utcnow()
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        logger.warning("webhook.event_store.annotate_failed", extra={"stored_id": stored_id, "outcome": outcome})
