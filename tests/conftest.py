"""Shared pytest fixtures.

Key goals:
- Prevent the global settings singleton from leaking state across tests.
- Provide a controller wired to an in-memory session store, an in-memory
  notifier and a mocked backend client.
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from parking_admin.config import Settings, set_settings
from parking_admin.domain.services.notification import MemoryNotifier
from parking_admin.domain.services.slot_requests import SlotRequestController
from parking_admin.infra.api.client import SlotRequestApiClient
from parking_admin.infra.session.store import InMemorySessionStore


@pytest.fixture(autouse=True)
def _reset_global_singletons() -> None:
    """Ensure global singletons do not leak between tests."""
    set_settings(None)
    yield
    set_settings(None)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings with a short debounce and a throwaway session file."""
    return Settings(
        search_debounce_seconds=0.05,
        session_file=tmp_path / "session.json",
    )


@pytest.fixture
def session_store() -> InMemorySessionStore:
    return InMemorySessionStore(
        token="admin-token",
        user={"email": "admin@example.com", "role": "admin"},
    )


@pytest.fixture
def notifier() -> MemoryNotifier:
    return MemoryNotifier()


@pytest.fixture
def api_client() -> MagicMock:
    """Mocked backend client with async operations."""
    client = MagicMock(spec=SlotRequestApiClient)
    client.get_slot_requests = AsyncMock(return_value={"data": [], "meta": {}})
    client.approve_slot_request = AsyncMock()
    client.reject_slot_request = AsyncMock()
    client.close = AsyncMock()
    return client


@pytest.fixture
def controller(
    api_client: MagicMock,
    session_store: InMemorySessionStore,
    notifier: MemoryNotifier,
    settings: Settings,
) -> SlotRequestController:
    ctrl = SlotRequestController(api_client, session_store, notifier, settings)
    yield ctrl
    ctrl.close()


def make_request(request_id: int, **overrides: object) -> dict:
    """Build a slot request as the backend sends it."""
    data = {
        "id": request_id,
        "user": {"email": f"user{request_id}@example.com"},
        "vehicle": {"plateNumber": f"ABC-{request_id:03d}", "vehicleType": "car"},
        "slotNumber": None,
        "requestStatus": "pending",
        "createdAt": "2024-03-01T10:00:00Z",
    }
    data.update(overrides)
    return data


def make_page(requests: list[dict], page: int = 1, limit: int = 10, total: int | None = None) -> dict:
    """Build a list response body."""
    total = len(requests) if total is None else total
    return {
        "data": requests,
        "meta": {
            "currentPage": page,
            "limit": limit,
            "totalItems": total,
            "totalPages": max(1, -(-total // limit)),
        },
    }


@pytest.fixture
def request_factory():
    return make_request


@pytest.fixture
def page_factory():
    return make_page
