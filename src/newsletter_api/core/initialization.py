"""Application initialization and setup.

This module handles the initialization tasks required before the application
starts: environment variable loading and logging configuration.
"""

from dotenv import load_dotenv

from newsletter_api.core.config.settings import Settings, settings
from newsletter_api.core.logging import configure_logging


def initialize_application() -> Settings:
    """Initialize the application with all necessary setup tasks.

    1. Load environment variables from ``.env`` for libraries reading ``os.environ``
    2. Configure logging
    3. Validate the settings singleton

    The singleton was built when ``core.config.settings`` was imported and
    read ``.env`` itself, so it is reused rather than built a second time.

    Returns:
        Settings: The validated settings the application is built from.
    """
    load_dotenv(override=False)

    configure_logging(log_level=settings.LOG_LEVEL, json_logs=settings.LOG_JSON)
    settings.validate_required_fields()
    return settings
