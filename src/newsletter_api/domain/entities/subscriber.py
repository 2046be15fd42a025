import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from sqlalchemy import DateTime, UniqueConstraint
from sqlmodel import Column, Field, SQLModel, String

EMAIL_UNIQUE_CONSTRAINT = "subscriptions_email_key"


class SubscriberStatus(str, Enum):
    """Lifecycle state of a subscriber.

    A subscriber starts as ``PENDING_CONFIRMATION`` and moves to ``CONFIRMED``
    exactly once, when a valid confirmation token is redeemed. There is no
    transition back.
    """

    PENDING_CONFIRMATION = "pending_confirmation"
    CONFIRMED = "confirmed"


class Subscriber(SQLModel, table=True):
    """A person who asked to receive the newsletter.

    Attributes:
        id: Identifier generated at creation; never changes.
        email: Address the newsletter is sent to. Unique across subscribers.
        name: Display name given at subscription time.
        subscribed_at: When the subscriber row was created (UTC).
        status: One of the ``SubscriberStatus`` values.
    """

    __tablename__ = "subscriptions"
    __table_args__ = (UniqueConstraint("email", name=EMAIL_UNIQUE_CONSTRAINT),)

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        description="The unique identifier for the subscriber.",
    )
    email: str = Field(
        sa_column=Column(String, nullable=False),
        description="Unique email address of the subscriber.",
    )
    name: str = Field(
        sa_column=Column(String, nullable=False, index=True),
        description="Display name of the subscriber.",
    )
    subscribed_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False),
        description="Creation timestamp.",
    )
    status: str = Field(
        default=SubscriberStatus.PENDING_CONFIRMATION.value,
        sa_column=Column(String, nullable=False),
        description="Lifecycle state: pending_confirmation or confirmed.",
    )


class ConfirmationToken(SQLModel, table=True):
    """The single live confirmation token of a subscriber.

    ``subscriber_id`` is unique so a subscriber never owns more than one row;
    a new subscription attempt overwrites ``subscription_token`` in place.
    Rows are kept after redemption.
    """

    __tablename__ = "subscription_tokens"

    subscription_token: str = Field(
        primary_key=True,
        max_length=25,
        description="Opaque alphanumeric token embedded in the confirmation link.",
    )
    subscriber_id: Optional[uuid.UUID] = Field(
        default=None,
        foreign_key="subscriptions.id",
        unique=True,
        nullable=False,
        description="Owner of the token.",
    )
