from .confirmation_service import ConfirmationService
from .subscription_service import SubscriptionService

__all__ = ["ConfirmationService", "SubscriptionService"]
