from .channels import EchoNotificationChannel, EmailNotificationChannel
from .factory import build_notification_channel

__all__ = [
    "EchoNotificationChannel",
    "EmailNotificationChannel",
    "build_notification_channel",
]
