from flask import Blueprint, current_app, jsonify

from covergen.extensions import limiter
from covergen.billing.polar import PolarAPIError
from covergen.billing.standing import get_standing
from covergen.security.accounts import get_current_account_id

billing_bp = Blueprint("billing", __name__)


@billing_bp.post("/portal.json")
@limiter.limit("10/minute")
def portal_json():
    """Customer portal link for managing an active subscription."""
    account_id = get_current_account_id()
    if not account_id:
        return jsonify({"error": "User not authenticated"}), 401

    standing = get_standing(account_id)
    if not standing.active:
        return jsonify({"error": "No active subscription found"}), 404
    customer_id = standing.subscription.customer_id
    if not customer_id:
        return jsonify({"error": "No customer ID found for subscription"}), 404

    polar = current_app.extensions["polar"]
    try:
        url = polar.create_customer_portal_url(customer_id)
    except PolarAPIError as e:
        current_app.logger.exception(
            "billing.portal_json.session_create_failed",
            extra={"account_id": account_id},
        )
        return jsonify({"error": str(e)}), 502

    return jsonify({"url": url})
