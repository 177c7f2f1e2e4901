# backend/__init__.py
from typing import Any, Dict, List, Optional

import requests

from core.models import CatalogItem, CheckoutResult
from . import catalog, orders
from .orders import CheckoutError
from .session import BACKEND_URL, SESSION, BackendError


class Backend:
    """
    Listing and order service at one base URL.
    An empty base URL leaves the backend unconfigured; callers skip it.
    """

    def __init__(self, base_url: str = BACKEND_URL, session: Optional[requests.Session] = None):
        self.base_url = (base_url or "").strip().rstrip("/")
        self.session = session if session is not None else SESSION

    @property
    def configured(self) -> bool:
        return bool(self.base_url)

    def list_models(self, query: str = "", tag: str = "") -> List[CatalogItem]:
        return catalog.fetch_models(self.base_url, self.session, query, tag)

    def checkout(self, items: List[Dict[str, Any]]) -> CheckoutResult:
        return orders.submit_checkout(self.base_url, self.session, items)


__all__ = ["Backend", "BackendError", "CheckoutError"]
