"""A Value Object representing the display name of a subscriber."""

from dataclasses import dataclass

from newsletter_api.domain.validation.subscriber_fields import validate_name


@dataclass(frozen=True, slots=True)
class SubscriberName:
    """An immutable, self-validating subscriber name.

    The value is kept exactly as submitted; validation never rewrites it.

    Attributes:
        value: The submitted name.
    """

    value: str

    def __post_init__(self):
        if not validate_name(self.value):
            raise ValueError(f"{self.value!r} is not a valid subscriber name.")

    def __str__(self) -> str:
        return self.value
