from flask_talisman import Talisman


def init_security(app):
    """
    Production/staging security headers with a conservative CSP.
    The service only answers JSON, so nothing beyond 'self' is allowed.
    """
    csp = {
        "default-src": ["'self'"],
        "connect-src": ["'self'", "https://api.polar.sh", "https://sandbox-api.polar.sh"],
        "frame-ancestors": ["'none'"],
        "base-uri": ["'self'"],
        "form-action": ["'self'"],
    }

    Talisman(
        app,
        content_security_policy=csp,
        force_https=True,
        strict_transport_security=True,
        session_cookie_secure=True,
        frame_options="DENY",
        referrer_policy="strict-origin-when-cross-origin",
    )
