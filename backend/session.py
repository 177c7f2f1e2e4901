# backend/session.py
import os

import requests

USER_AGENT = os.getenv("SHOP_USER_AGENT", "character-shop/0.1 (+requests)")
BACKEND_URL = os.getenv("BACKEND_URL", "").strip().rstrip("/")
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "30"))


class BackendError(Exception):
    """Generic listing/order service error."""


def build_session() -> requests.Session:
    session = requests.Session()
    session.headers.update({"User-Agent": USER_AGENT, "Accept": "application/json"})
    return session


SESSION = build_session()


def endpoint(base_url: str, path: str) -> str:
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"
