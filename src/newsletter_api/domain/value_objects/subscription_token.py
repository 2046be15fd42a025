"""Subscription Token Value Object.

The token is the secret a subscriber proves ownership of their address with:
it is embedded in the confirmation link and redeemed exactly once.
"""

import secrets
import string
from dataclasses import dataclass
from typing import ClassVar

import structlog

logger = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class SubscriptionToken:
    """Value object representing a subscription confirmation token.

    Security Features:
    - Characters drawn with ``secrets.choice`` from a CSPRNG
    - 25 characters over a 62-symbol alphabet (~148 bits)
    - Masked ``__str__``/``__repr__`` so a token never leaks into logs whole
    """

    value: str

    LENGTH: ClassVar[int] = 25
    ALPHABET: ClassVar[str] = string.ascii_letters + string.digits

    def __post_init__(self):
        if len(self.value) != self.LENGTH or not all(c in self.ALPHABET for c in self.value):
            raise ValueError(
                f"Subscription token must be {self.LENGTH} alphanumeric characters."
            )

    @classmethod
    def generate(cls) -> "SubscriptionToken":
        """Generate a new, uniformly random subscription token.

        Returns:
            SubscriptionToken: New token instance
        """
        value = "".join(secrets.choice(cls.ALPHABET) for _ in range(cls.LENGTH))
        logger.debug("Generated subscription token", token_prefix=value[:8])
        return cls(value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SubscriptionToken):
            return False
        return secrets.compare_digest(self.value, other.value)

    def __hash__(self) -> int:
        return hash(self.value)

    def __str__(self) -> str:
        return f"{self.value[:8]}..."

    def __repr__(self) -> str:
        return f"SubscriptionToken(value='{self.value[:8]}...')"
