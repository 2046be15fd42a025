"""A Value Object representing the email address of a subscriber."""

from dataclasses import dataclass

from newsletter_api.core.logging import mask_email
from newsletter_api.domain.validation.subscriber_fields import validate_email


@dataclass(frozen=True, slots=True)
class SubscriberEmail:
    """An immutable, self-validating email address.

    Equality is based on the submitted string; the store's unique constraint
    decides whether two subscriptions refer to the same address.

    Attributes:
        value: The submitted email address.
    """

    value: str

    def __post_init__(self):
        if not validate_email(self.value):
            raise ValueError(f"{self.value!r} is not a valid subscriber email.")

    def mask_for_logging(self) -> str:
        """Returns a masked version of the email for safe logging."""
        return mask_email(self.value)

    def __str__(self) -> str:
        return self.value
