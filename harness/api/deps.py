from functools import lru_cache

from fastapi import Depends

from harness.core.config import settings
from harness.core.credentials import CredentialTable
from harness.services.events import EventStore, get_event_store
from harness.services.payments.apple_pay import ApplePayClient
from harness.services.payments.webhooks import NotificationListener
from harness.services.proxy import ApiProxy, CredentialRoutes


# built once per process; tests swap these out via app.dependency_overrides
@lru_cache
def get_credentials() -> CredentialTable:
    return CredentialTable.from_settings(settings)


@lru_cache
def get_store() -> EventStore:
    return get_event_store(settings)


def get_listener(
    credentials: CredentialTable = Depends(get_credentials),
    store: EventStore = Depends(get_store),
) -> NotificationListener:
    return NotificationListener(credentials, store)


def get_proxy(credentials: CredentialTable = Depends(get_credentials)) -> ApiProxy:
    return ApiProxy(
        credentials=credentials,
        routes=CredentialRoutes.public_for(settings.PUBLIC_KEY_PATHS),
        default_tenant=settings.DEFAULT_TENANT,
        timeout=settings.PROVIDER_TIMEOUT_SECONDS,
    )


def get_apple_pay(credentials: CredentialTable = Depends(get_credentials)) -> ApplePayClient:
    return ApplePayClient(settings, credentials)
