"""Newsletter subscription service."""
