from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from newsletter_api.core.application import create_application
from newsletter_api.core.config.settings import Settings
from newsletter_api.domain.interfaces import IEmailClient
from newsletter_api.infrastructure.dependency_injection.subscription_dependencies import (
    get_notification_channel,
)
from newsletter_api.infrastructure.services.email.confirmation_email import (
    ConfirmationEmailBuilder,
)
from newsletter_api.infrastructure.services.email.templates import get_template_environment
from newsletter_api.infrastructure.services.notification.channels import (
    EmailNotificationChannel,
)
from settings_factory import BASE_URL, make_settings


@pytest.fixture
def settings(tmp_path) -> Settings:
    return make_settings(tmp_path)


@pytest.fixture
def email_client() -> AsyncMock:
    return AsyncMock(spec=IEmailClient)


@pytest_asyncio.fixture
async def app(settings, email_client):
    """Application with its lifespan running and SMTP replaced by a mock."""
    application = create_application(settings)
    builder = ConfirmationEmailBuilder(
        environment=get_template_environment(settings.EMAIL_TEMPLATES_DIR),
        project_name=settings.PROJECT_NAME,
    )
    application.dependency_overrides[get_notification_channel] = (
        lambda: EmailNotificationChannel(email_client=email_client, email_builder=builder)
    )
    async with application.router.lifespan_context(application):
        yield application


@pytest_asyncio.fixture
async def async_client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url=BASE_URL) as client:
        yield client
