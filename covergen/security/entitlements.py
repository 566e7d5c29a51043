from functools import wraps
from typing import Callable

from flask import g, jsonify

from covergen.billing.usage import check_usage
from covergen.security.accounts import get_current_account_id


def require_generation_quota(fn: Callable) -> Callable:
    """
    Server-side gate for generation endpoints.
    - 401 when nobody is signed in
    - 403 once a free account has used its monthly quota
    Subscribers pass unconditionally. The checked UsageSummary is left on
    ``g.usage`` for the view.
    """
    @wraps(fn)
    def wrapper(*args, **kwargs):
        account_id = get_current_account_id()
        if not account_id:
            return jsonify({"error": "User not authenticated"}), 401
        usage = check_usage(account_id)
        if not usage.can_generate:
            payload = {"error": "quota_exceeded"}
            payload.update(usage.to_dict())
            return jsonify(payload), 403
        g.account_id = account_id
        g.usage = usage
        return fn(*args, **kwargs)
    return wrapper
