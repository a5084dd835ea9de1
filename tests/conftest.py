import os

# must be set before harness.core.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("EVENT_STORE", "database")

from typing import Callable, Optional

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from harness.api import deps
from harness.core.config import Settings
from harness.core.credentials import CredentialPair, CredentialTable
from harness.db.base import Base
from harness.db.session import build_engine
from harness.main import app
from harness.services.events.file import FileEventStore
from harness.services.events.sql import SqlEventStore
from harness.services.payments.apple_pay import ApplePayClient
from harness.services.proxy import ApiProxy, CredentialRoutes

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture
def credentials() -> CredentialTable:
    return CredentialTable([
        CredentialPair("abc", "sk_test_abc", "pk_test_abc"),
        CredentialPair("nas", "sk_test_nas", "pk_test_nas"),
    ])


@pytest.fixture
def sql_store() -> SqlEventStore:
    engine = build_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    try:
        yield SqlEventStore(sessionmaker(bind=engine, expire_on_commit=False))
    finally:
        engine.dispose()


@pytest.fixture
def file_store(tmp_path) -> FileEventStore:
    return FileEventStore(tmp_path / "events.log")


@pytest.fixture
def harness_settings() -> Settings:
    s = Settings()
    s.PROVIDER_API_URL = "https://api.provider.test"
    s.PROVIDER_TIMEOUT_SECONDS = 2.0
    s.APPLE_PAY_MERCHANT_ID = "merchant.test.harness"
    s.APPLE_PAY_DOMAIN = "harness.test"
    s.APPLE_PAY_DISPLAY_NAME = "Harness"
    s.APPLE_PAY_TENANT = "nas"
    s.CKO_NAS_PROCESSING_CHANNEL_ID = "pc_test"
    return s


@pytest.fixture
def upstream():
    """
    Swappable fake provider: tests assign `upstream.handler` and read
    `upstream.requests` afterwards.
    """
    class _Upstream:
        def __init__(self):
            self.requests: list[httpx.Request] = []
            self.handler: Optional[Handler] = None

        def __call__(self, request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            if self.handler is None:
                return httpx.Response(200, json={}, request=request)
            return self.handler(request)

    fake = _Upstream()
    fake.transport = httpx.MockTransport(fake)
    return fake


@pytest.fixture
def proxy(credentials, upstream) -> ApiProxy:
    return ApiProxy(
        credentials=credentials,
        routes=CredentialRoutes.public_for(["/tokens"]),
        default_tenant="abc",
        timeout=2.0,
        transport=upstream.transport,
    )


@pytest.fixture
def apple_pay(harness_settings, credentials, upstream) -> ApplePayClient:
    return ApplePayClient(harness_settings, credentials, transport=upstream.transport)


@pytest.fixture
def client(credentials, sql_store, proxy, apple_pay):
    app.dependency_overrides[deps.get_credentials] = lambda: credentials
    app.dependency_overrides[deps.get_store] = lambda: sql_store
    app.dependency_overrides[deps.get_proxy] = lambda: proxy
    app.dependency_overrides[deps.get_apple_pay] = lambda: apple_pay
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
