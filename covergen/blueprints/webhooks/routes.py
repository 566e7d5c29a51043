import json

from flask import request, jsonify, current_app

from . import bp
from covergen.extensions import db, csrf
from covergen.billing import Verdict
from covergen.billing.dispatcher import EventDispatcher
from covergen.billing.event_store import record_event, mark_processed, EventStoreError
from covergen.billing.events import parse_event, EventSchemaError

# First non-empty header wins
SIGNATURE_HEADERS = ("webhook-signature", "x-signature")
TIMESTAMP_HEADER = "webhook-timestamp"

_REJECTIONS = {
    Verdict.MISSING_SIGNATURE: "Missing signature",
    Verdict.INVALID_SIGNATURE: "Invalid signature",
    Verdict.STALE_TIMESTAMP: "Request too old",
}


def _signature_header() -> str | None:
    for name in SIGNATURE_HEADERS:
        value = request.headers.get(name)
        if value:
            return value
    return None


# ----- Polar Webhook (subscriptions lifecycle) -----
@csrf.exempt
@bp.post("/webhook")
def polar_webhook():
    """
    Polar → /api/polar/webhook
    Verifies signature + freshness, records the raw event, then reconciles the
    subscription ledger. Safe to redeliver: dispatch is idempotent.
    """
    log = current_app.logger

    # 1) Verify signature and timestamp against the exact raw body
    verifier = current_app.extensions["webhook_verifier"]
    if not verifier.configured:
        log.error("webhook.secret_not_configured")
        return jsonify({"error": "Webhook secret not configured"}), 500

    raw_bytes = request.get_data(cache=False, as_text=False) or b""
    verdict = verifier.verify(raw_bytes, _signature_header(), request.headers.get(TIMESTAMP_HEADER))
    if not verdict.ok:
        log.warning("webhook.rejected", extra={"reason": verdict.value})
        return jsonify({"error": _REJECTIONS[verdict]}), 401

    # 2) Parse into a typed event; malformed bodies never reach the store
    try:
        body = json.loads(raw_bytes.decode("utf-8"))
        event = parse_event(body)
    except (UnicodeDecodeError, json.JSONDecodeError):
        log.error("webhook.malformed_json")
        return jsonify({"error": "Malformed event payload"}), 500
    except EventSchemaError as e:
        log.error("webhook.malformed_event", extra={"detail": str(e)})
        return jsonify({"error": "Malformed event payload"}), 500

    log.info("webhook.verified", extra={"event_type": event.type, "polar_id": event.provider_id})

    # 3) Persist raw payload (audit trail; non-fatal unless configured otherwise)
    try:
        stored_id = record_event(
            event.type,
            event.provider_id,
            body,
            required=bool(current_app.config.get("WEBHOOK_AUDIT_REQUIRED")),
        )
    except EventStoreError:
        return jsonify({"error": "Internal Server Error"}), 500

    # 4) Reconcile the ledger; failures surface as 500 so the provider retries
    try:
        outcome = EventDispatcher(db.session).dispatch(event)
    except Exception as e:
        log.exception("webhook.dispatch_failed", extra={"event_type": event.type, "polar_id": event.provider_id})
        mark_processed(stored_id, "error", f"handler_error:{type(e).__name__}")
        return jsonify({"error": "Internal Server Error"}), 500

    mark_processed(stored_id, outcome)
    return jsonify({"success": True}), 200
