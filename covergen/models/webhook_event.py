from covergen.extensions import db
from covergen.utils.helpers import utcnow


class WebhookEvent(db.Model):
    """Append-only audit row per inbound delivery; redeliveries get their own row."""
    __tablename__ = "webhook_events"

    id = db.Column(db.Integer, primary_key=True)
    event_type = db.Column(db.String(80), nullable=False, index=True)
    # Not unique: providers redeliver the same id
    polar_event_id = db.Column(db.String(255), nullable=False, index=True)
    data = db.Column(db.JSON, nullable=False, default=dict)

    # applied | ignored | missing | error
    outcome = db.Column(db.String(16), nullable=True, index=True)
    notes = db.Column(db.String(255), nullable=True)
    processed_at = db.Column(db.DateTime, nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    modified_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def __repr__(self) -> str:
        return f"<WebhookEvent id={self.id} type={self.event_type!r} polar_event_id={self.polar_event_id!r}>"
