from .signatures import WebhookVerifier, Verdict, sign_payload, verify_signature
from .polar import PolarClient


def init_billing(app):
    """Build the billing collaborators once per app and park them on app.extensions."""
    cfg = app.config
    app.extensions["webhook_verifier"] = WebhookVerifier(
        secret=cfg.get("POLAR_WEBHOOK_SECRET"),
        tolerance=int(cfg.get("WEBHOOK_TOLERANCE_SECONDS", 300)),
    )
    app.extensions["polar"] = PolarClient(
        access_token=cfg.get("POLAR_ACCESS_TOKEN"),
        server=cfg.get("POLAR_SERVER", "sandbox"),
        timeout=float(cfg.get("POLAR_TIMEOUT_SECONDS", 10.0)),
    )
    if not cfg.get("POLAR_WEBHOOK_SECRET"):
        app.logger.warning("POLAR_WEBHOOK_SECRET missing; webhooks will be rejected")


__all__ = [
    "init_billing",
    "WebhookVerifier",
    "Verdict",
    "sign_payload",
    "verify_signature",
    "PolarClient",
]
