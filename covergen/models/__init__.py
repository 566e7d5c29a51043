from .user import User
from .subscription import Subscription, STATUS_ACTIVE, STATUS_REVOKED
from .webhook_event import WebhookEvent
from .generation import GenerationAction

__all__ = [
    "User",
    "Subscription",
    "STATUS_ACTIVE",
    "STATUS_REVOKED",
    "WebhookEvent",
    "GenerationAction",
]
