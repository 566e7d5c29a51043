from flask import request, jsonify, current_app, g
from sqlalchemy.exc import SQLAlchemyError

from . import bp
from covergen.extensions import db, limiter
from covergen.models import GenerationAction
from covergen.billing.standing import get_standing
from covergen.billing.usage import check_usage
from covergen.security.accounts import get_current_account_id
from covergen.security.entitlements import require_generation_quota


def _unauthenticated():
    return jsonify({"error": "User not authenticated"}), 401


def _trimmed(value, limit=255):
    if value is None:
        return None
    value = str(value).strip()
    return value[:limit] or None


@bp.get("/check-subscription")
@limiter.limit("60/minute")
def check_subscription():
    """Minimal standing for UI code: {hasActiveSubscription, subscriptionId}."""
    account_id = get_current_account_id()
    if not account_id:
        return _unauthenticated()
    try:
        standing = get_standing(account_id)
    except SQLAlchemyError:
        current_app.logger.exception("api.check_subscription.store_failed", extra={"account_id": account_id})
        return jsonify({"error": "Error checking subscription"}), 500
    return jsonify(standing.to_minimal())


@bp.get("/subscription")
@limiter.limit("60/minute")
def subscription_detail():
    account_id = get_current_account_id()
    if not account_id:
        return _unauthenticated()
    try:
        standing = get_standing(account_id)
    except SQLAlchemyError:
        current_app.logger.exception("api.subscription.store_failed", extra={"account_id": account_id})
        return jsonify({"error": "Error checking subscription"}), 500
    return jsonify(standing.to_dict())


@bp.get("/usage")
@limiter.limit("60/minute")
def usage():
    account_id = get_current_account_id()
    if not account_id:
        return _unauthenticated()
    try:
        summary = check_usage(account_id)
    except SQLAlchemyError:
        current_app.logger.exception("api.usage.store_failed", extra={"account_id": account_id})
        return jsonify({"error": "Error checking usage"}), 500
    return jsonify(summary.to_dict())


@bp.post("/generations")
@limiter.limit("10/minute")
@require_generation_quota
def record_generation():
    """
    Record one generation action for the caller once the quota gate passed.
    The document itself is produced elsewhere; this is the usage ledger entry.
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    action = GenerationAction(
        user_id=g.account_id,
        kind=str(data.get("kind") or "cover_letter")[:32],
        job_title=_trimmed(data.get("job_title")),
        company_name=_trimmed(data.get("company_name")),
    )
    try:
        db.session.add(action)
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("api.generations.record_failed", extra={"account_id": g.account_id})
        return jsonify({"error": "Could not record generation"}), 500

    summary = check_usage(g.account_id)
    return jsonify({"id": action.id, "usage": summary.to_dict()}), 201
