from .confirmation_email import ConfirmationEmailBuilder
from .smtp_email_client import SmtpEmailClient
from .templates import get_template_environment

__all__ = ["ConfirmationEmailBuilder", "SmtpEmailClient", "get_template_environment"]
