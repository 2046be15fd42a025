from .subscriber_fields import validate_email, validate_name

__all__ = ["validate_email", "validate_name"]
