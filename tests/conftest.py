"""Pytest configuration and fixtures"""
import os
from typing import List
from unittest.mock import Mock

import pytest
import requests

os.environ.setdefault("LOG_TO_FILE", "false")
os.environ.setdefault("LOG_LEVEL", "DEBUG")

from core.models import CatalogItem, CheckoutResult  # noqa: E402
from core.storage import CartStore  # noqa: E402


class FakeBackend:
    """In-memory listing and order service."""

    def __init__(self, items=None, configured=True):
        self.items = list(items or [])
        self._configured = configured
        self.list_calls = []
        self.checkout_calls = []
        self.checkout_result = None
        self.checkout_error = None
        self.list_error = None

    @property
    def configured(self) -> bool:
        return self._configured

    def list_models(self, query: str = "", tag: str = "") -> List[CatalogItem]:
        self.list_calls.append((query, tag))
        if self.list_error is not None:
            raise self.list_error
        return list(self.items)

    def checkout(self, items):
        self.checkout_calls.append(items)
        if self.checkout_error is not None:
            raise self.checkout_error
        return self.checkout_result


@pytest.fixture
def item_a() -> CatalogItem:
    return CatalogItem(id="a-1", name="Knight", price=10.00, formats=("FBX", "GLB"), rigged=True)


@pytest.fixture
def item_b() -> CatalogItem:
    return CatalogItem(alt_id="mongo-b", name="Mech Pilot", price=5.00, animated=True)


@pytest.fixture
def store(tmp_path) -> CartStore:
    return CartStore(db_path=str(tmp_path / "shop.sqlite3"))


@pytest.fixture
def fake_backend(item_a, item_b) -> FakeBackend:
    return FakeBackend(items=[item_a, item_b])


@pytest.fixture
def confirmed_x1() -> CheckoutResult:
    return CheckoutResult.from_dict(
        {
            "order_id": "X1",
            "message": "Thanks! Your order was placed.",
            "subtotal": 35.00,
            "items": [
                {"id": "a-1", "name": "Knight", "qty": 2, "price": 10.0, "line_total": 20.0,
                 "download_links": ["https://cdn.test/a-1.fbx"]},
                {"id": "mongo-b", "name": "Mech Pilot", "qty": 3, "price": 5.0, "line_total": 15.0,
                 "download_links": []},
            ],
        }
    )


@pytest.fixture
def mock_response():
    """Build a requests.Response stand-in."""

    def _make(status_code=200, payload=None, json_error=None):
        r = Mock()
        r.status_code = status_code
        r.ok = 200 <= status_code < 400
        if json_error is not None:
            r.json.side_effect = json_error
        else:
            r.json.return_value = payload
        if r.ok:
            r.raise_for_status.return_value = None
        else:
            r.raise_for_status.side_effect = requests.HTTPError(f"HTTP {status_code}")
        return r

    return _make


@pytest.fixture
def no_retry_sleep(monkeypatch):
    monkeypatch.setattr("tenacity.nap.time.sleep", lambda seconds: None)
