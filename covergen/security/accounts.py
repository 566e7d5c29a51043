from flask_login import current_user


def get_current_account_id() -> str | None:
    """Account id of the signed-in caller, or None for anonymous requests."""
    if not getattr(current_user, "is_authenticated", False):
        return None
    account_id = getattr(current_user, "id", None)
    return str(account_id) if account_id else None
