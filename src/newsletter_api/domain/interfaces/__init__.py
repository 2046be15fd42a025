"""Domain interfaces (ports) implemented by the infrastructure layer."""

from .notification import (
    ConfirmationEmail,
    ConfirmationNotice,
    IConfirmationEmailBuilder,
    IEmailClient,
    INotificationChannel,
)
from .repositories import ISubscriberRepository, SubscriberTokenMatch
from .services import IConfirmationService, ISubscriptionService, SubscriptionResult
from .transaction import ITransaction, ITransactionManager

__all__ = [
    "ConfirmationEmail",
    "ConfirmationNotice",
    "IConfirmationEmailBuilder",
    "IConfirmationService",
    "IEmailClient",
    "INotificationChannel",
    "ISubscriberRepository",
    "ISubscriptionService",
    "ITransaction",
    "ITransactionManager",
    "SubscriberTokenMatch",
    "SubscriptionResult",
]
