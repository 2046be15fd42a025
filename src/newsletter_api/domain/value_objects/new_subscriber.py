"""The validated input of a subscription request."""

from dataclasses import dataclass

import structlog

from newsletter_api.core.exceptions import ValidationError
from newsletter_api.core.logging import mask_email
from newsletter_api.domain.value_objects.subscriber_email import SubscriberEmail
from newsletter_api.domain.value_objects.subscriber_name import SubscriberName

logger = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class NewSubscriber:
    """A name and email pair that passed validation.

    Instances can only hold valid fields, so code receiving a
    ``NewSubscriber`` never re-checks them.
    """

    name: SubscriberName
    email: SubscriberEmail

    @classmethod
    def parse(cls, raw_name: str, raw_email: str) -> "NewSubscriber":
        """Validate raw form input.

        Args:
            raw_name: Submitted display name.
            raw_email: Submitted email address.

        Returns:
            NewSubscriber: The validated pair.

        Raises:
            ValidationError: If either field is rejected.
        """
        try:
            name = SubscriberName(raw_name)
        except ValueError as e:
            logger.info("Subscriber name rejected", reason=str(e))
            raise ValidationError(str(e), context="parse_name", cause=e) from e

        try:
            email = SubscriberEmail(raw_email)
        except ValueError as e:
            logger.info("Subscriber email rejected", email=mask_email(raw_email or ""))
            raise ValidationError(str(e), context="parse_email", cause=e) from e

        return cls(name=name, email=email)

