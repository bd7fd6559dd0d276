"""
Unit tests for API v1 routes and the health endpoint.

Tests endpoint responses with mocked dependencies.
"""

from unittest.mock import AsyncMock, MagicMock

import discord
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.adapters.discord.notifier import DiscordNotifier
from src.api.dependencies import get_registration_service
from src.api.errors import MISSING_FIELDS_MESSAGE, register_error_handlers
from src.api.main import health_check
from src.api.v1.routes import DM_FAILED_MESSAGE, router
from src.domain.exceptions import NotificationError
from src.domain.registration import RegistrationService
from tests.conftest import InMemoryRecordStore

BODY = {"discordId": "111111111111111111", "sellerId": "S-100", "orderId": "ORD-9"}


@pytest.fixture
def mock_service() -> MagicMock:
    service = MagicMock(spec=RegistrationService)
    service.notify_existing_seller = AsyncMock()
    return service


def build_app(service: RegistrationService | MagicMock) -> FastAPI:
    """Create test FastAPI application mounted like the real one."""
    test_app = FastAPI()
    register_error_handlers(test_app)
    test_app.include_router(router, prefix="/v1")
    test_app.include_router(router, include_in_schema=False)
    test_app.dependency_overrides[get_registration_service] = lambda: service
    return test_app


@pytest.fixture
def client(mock_service: MagicMock) -> TestClient:
    """Create test client for the application."""
    return TestClient(build_app(mock_service))


class TestNotifyExistingSellerEndpoint:
    """Tests for POST /notify-existing-seller and its /v1 mount."""

    @pytest.mark.parametrize("path", ["/notify-existing-seller", "/v1/notify-existing-seller"])
    def test_success_returns_200(
        self, client: TestClient, mock_service: MagicMock, path: str
    ) -> None:
        """Delivered DM returns success on both mounts."""
        response = client.post(path, json=BODY)

        assert response.status_code == 200
        assert response.json() == {"success": True}
        mock_service.notify_existing_seller.assert_awaited_once_with(
            "111111111111111111", "S-100", email=None, order_id="ORD-9"
        )

    def test_email_passed_through(self, client: TestClient, mock_service: MagicMock) -> None:
        response = client.post(
            "/notify-existing-seller", json={**BODY, "email": "seller@example.com"}
        )

        assert response.status_code == 200
        assert mock_service.notify_existing_seller.await_args.kwargs["email"] == "seller@example.com"

    @pytest.mark.parametrize("body", [{"sellerId": "S-100"}, {"discordId": "111111111111111111"}, {}])
    def test_missing_fields_return_400(
        self, client: TestClient, mock_service: MagicMock, body: dict
    ) -> None:
        """Missing ids are rejected before the service runs."""
        response = client.post("/notify-existing-seller", json=body)

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": MISSING_FIELDS_MESSAGE}
        mock_service.notify_existing_seller.assert_not_awaited()

    @pytest.mark.parametrize(
        "body, field",
        [
            ({"discordId": "not-a-snowflake", "sellerId": "S-100"}, "discordId"),
            ({"discordId": "111111111111111111", "sellerId": "S-100", "email": "nope"}, "email"),
        ],
    )
    def test_invalid_fields_return_400(
        self, client: TestClient, mock_service: MagicMock, body: dict, field: str
    ) -> None:
        response = client.post("/notify-existing-seller", json=body)

        assert response.status_code == 400
        assert response.json()["success"] is False
        assert field in response.json()["error"]
        mock_service.notify_existing_seller.assert_not_awaited()

    def test_dm_failure_returns_500(self, client: TestClient, mock_service: MagicMock) -> None:
        """Undeliverable DM maps to 500 with a fixed message."""
        mock_service.notify_existing_seller.side_effect = NotificationError("forbidden")

        response = client.post("/notify-existing-seller", json=BODY)

        assert response.status_code == 500
        assert response.json() == {"success": False, "error": DM_FAILED_MESSAGE}

    def test_bot_not_logged_in_returns_500(self) -> None:
        """A client that never connected yields the DM failure body, not a crash."""
        service = RegistrationService(
            store=InMemoryRecordStore(),
            notifier=DiscordNotifier(discord.Client(intents=discord.Intents.none())),
            forwarder=AsyncMock(),
        )
        client = TestClient(build_app(service))

        response = client.post("/notify-existing-seller", json=BODY)

        assert response.status_code == 500
        assert response.json() == {"success": False, "error": DM_FAILED_MESSAGE}


class TestHealthEndpoint:
    """Tests for GET /health."""

    @pytest.fixture
    def health_app(self) -> FastAPI:
        test_app = FastAPI()
        test_app.add_api_route("/health", health_check, methods=["GET"])
        return test_app

    def test_health_before_startup(self, health_app: FastAPI) -> None:
        """Process is healthy even while Discord is not connected."""
        response = TestClient(health_app).get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "discord": "connecting", "active_sessions": 0}

    def test_health_reports_bot_and_sessions(self, health_app: FastAPI) -> None:
        bot = MagicMock()
        bot.is_ready.return_value = True
        service = MagicMock()
        service.sessions = [object(), object()]
        health_app.state.bot = bot
        health_app.state.service = service

        response = TestClient(health_app).get("/health")

        assert response.json() == {"status": "healthy", "discord": "ready", "active_sessions": 2}
