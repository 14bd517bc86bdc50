"""Test configuration and fixtures."""

import os
from typing import Any

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from checkout.bridge import HostBridge
from checkout.order_api import OrderAPIClient
from checkout.orchestrator import CheckoutOrchestrator, CheckoutSession
from checkout.schemas import CartSnapshot
from core.settings import Settings
from db.models import Base

ORDER_API = "https://orders.test"
SUCCESS_URL = "https://orders.test/payment-success"


@pytest.fixture(autouse=True)
def setup_test_environment():
    """Setup test environment variables before each test."""
    original_env = dict(os.environ)

    os.environ.update(
        {
            "DATABASE_URL": "sqlite:///:memory:",
            "PAYPAL_CLIENT_ID": "test_client_id",
            "PAYPAL_SECRET": "test_secret",
            "PAYPAL_BASE": "https://api-m.sandbox.paypal.com",
            "ORDER_API_URL": ORDER_API,
            "PAYMENT_SUCCESS_URL": SUCCESS_URL,
            "APP_NAME": "Test Checkout",
            "ENVIRONMENT": "development",
            "DISABLE_TRACING": "true",
        }
    )

    yield

    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture(autouse=True)
def clear_token_cache():
    import payments.paypal_service

    payments.paypal_service._TOKEN_CACHE = None
    yield
    payments.paypal_service._TOKEN_CACHE = None


@pytest.fixture
def mock_settings():
    return Settings(
        DATABASE_URL="sqlite:///:memory:",
        PAYPAL_CLIENT_ID="test_client_id",
        PAYPAL_SECRET="test_secret",
        ORDER_API_URL=ORDER_API,
        PAYMENT_SUCCESS_URL=SUCCESS_URL,
        APP_NAME="Test Checkout",
        ENVIRONMENT="development",
    )


@pytest.fixture
def test_db_engine():
    """Create a test database engine and setup tables."""
    engine = create_engine(
        "sqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def test_db_session(test_db_engine):
    TestingSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, bind=test_db_engine
    )
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(mock_settings, test_db_engine):
    """FastAPI test client backed by the in-memory test database."""
    from core.dependencies import get_settings
    from db.session import get_db, reset_engines
    from main import app

    TestingSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, bind=test_db_engine
    )

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: mock_settings

    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client

    app.dependency_overrides.clear()
    reset_engines()


# Fakes standing in for the WebView page, the PayPal JS SDK and the host app


class FakeView:
    def __init__(self):
        self.messages: list[tuple[str, str]] = []
        self.summaries = []

    def show_message(self, html: str, kind: str = "info") -> None:
        self.messages.append((html, kind))

    def show_summary(self, summary) -> None:
        self.summaries.append(summary)

    @property
    def last_message(self) -> tuple[str, str]:
        return self.messages[-1]


class FakeSDK:
    def __init__(self, ready_after: int | None = 1, render_error: Exception | None = None):
        self.ready_after = ready_after
        self.render_error = render_error
        self.checks = 0
        self.rendered = None

    def is_ready(self) -> bool:
        self.checks += 1
        return self.ready_after is not None and self.checks >= self.ready_after

    async def render_buttons(self, callbacks, style, container) -> None:
        if self.render_error:
            raise self.render_error
        self.rendered = (callbacks, style, container)


class FakeChannel:
    def __init__(self):
        self.posted: list[str] = []

    def post_message(self, message: str) -> None:
        self.posted.append(message)


class FakeHandlerBridge:
    def __init__(self):
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def call_handler(self, name: str, payload: dict[str, Any]) -> None:
        self.calls.append((name, payload))


class FakeNavigator:
    def __init__(self):
        self.redirects: list[str] = []
        self.back_calls = 0

    def redirect(self, url: str) -> None:
        self.redirects.append(url)

    def back(self) -> None:
        self.back_calls += 1


class RecordingSleep:
    def __init__(self):
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def cart_data():
    return {
        "userId": "u1",
        "items": [{"id": "a", "price": 10, "quantity": 1, "totalPrice": 10}],
        "finalTotal": 10,
    }


@pytest.fixture
def view():
    return FakeView()


@pytest.fixture
def sdk():
    return FakeSDK()


@pytest.fixture
def navigator():
    return FakeNavigator()


@pytest.fixture
def sleep():
    return RecordingSleep()


@pytest.fixture
def make_orchestrator(view, sdk, navigator, sleep):
    def _make(cart=None, success_channel=None, handler_bridge=None, cancel_channel=None):
        bridge = HostBridge(
            navigator,
            success_url=SUCCESS_URL,
            success_channel=success_channel,
            handler_bridge=handler_bridge,
            cancel_channel=cancel_channel,
        )
        session = CheckoutSession(cart=CartSnapshot.from_host(cart))
        return CheckoutOrchestrator(
            sdk, view, bridge, OrderAPIClient(ORDER_API), session, sleep=sleep
        )

    return _make


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: marks tests as unit tests")


@pytest.fixture
def success_channel():
    return FakeChannel()


@pytest.fixture
def cancel_channel():
    return FakeChannel()


@pytest.fixture
def handler_bridge():
    return FakeHandlerBridge()


@pytest.fixture
def sdk_factory():
    return FakeSDK
