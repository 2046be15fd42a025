"""Dependencies for the subscription endpoints.

The long-lived collaborators (session factory, notification channel,
settings) are created by the application lifespan and kept on
``app.state``. The factories below assemble the per-request services from
them, so tests can swap any piece through ``app.dependency_overrides``.
"""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.orm import sessionmaker

from newsletter_api.core.config.settings import Settings
from newsletter_api.domain.interfaces import (
    IConfirmationService,
    INotificationChannel,
    ISubscriberRepository,
    ISubscriptionService,
    ITransactionManager,
)
from newsletter_api.domain.services.subscription import (
    ConfirmationService,
    SubscriptionService,
)
from newsletter_api.infrastructure.database.transaction import SqlAlchemyTransactionManager
from newsletter_api.infrastructure.repositories.subscriber_repository import (
    SubscriberRepository,
)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_session_factory(request: Request) -> sessionmaker:
    return request.app.state.session_factory


def get_notification_channel(request: Request) -> INotificationChannel:
    return request.app.state.notification_channel


SessionFactoryDep = Annotated[sessionmaker, Depends(get_session_factory)]
SettingsDep = Annotated[Settings, Depends(get_settings)]


def get_subscriber_repository(session_factory: SessionFactoryDep) -> ISubscriberRepository:
    return SubscriberRepository(session_factory)


def get_transaction_manager(session_factory: SessionFactoryDep) -> ITransactionManager:
    return SqlAlchemyTransactionManager(session_factory)


def get_subscription_service(
    settings: SettingsDep,
    repository: Annotated[ISubscriberRepository, Depends(get_subscriber_repository)],
    transaction_manager: Annotated[ITransactionManager, Depends(get_transaction_manager)],
    notification_channel: Annotated[INotificationChannel, Depends(get_notification_channel)],
) -> ISubscriptionService:
    return SubscriptionService(
        repository=repository,
        transaction_manager=transaction_manager,
        notification_channel=notification_channel,
        base_url=settings.APP_BASE_URL,
    )


def get_confirmation_service(
    repository: Annotated[ISubscriberRepository, Depends(get_subscriber_repository)],
) -> IConfirmationService:
    return ConfirmationService(repository)


SubscriptionServiceDep = Annotated[ISubscriptionService, Depends(get_subscription_service)]
ConfirmationServiceDep = Annotated[IConfirmationService, Depends(get_confirmation_service)]
