"""Persistent domain entities of the newsletter service."""

from .subscriber import ConfirmationToken, Subscriber, SubscriberStatus

__all__ = ["Subscriber", "SubscriberStatus", "ConfirmationToken"]
