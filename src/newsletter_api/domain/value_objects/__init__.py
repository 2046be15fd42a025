"""Domain Value Objects for the subscription domain.

Value objects are immutable objects that describe domain concepts by their
attributes rather than their identity.
"""

from .new_subscriber import NewSubscriber
from .subscriber_email import SubscriberEmail
from .subscriber_name import SubscriberName
from .subscription_token import SubscriptionToken

__all__ = [
    "NewSubscriber",
    "SubscriberEmail",
    "SubscriberName",
    "SubscriptionToken",
]
