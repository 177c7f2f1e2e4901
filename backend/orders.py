# backend/orders.py
from typing import Any, Dict, List

import requests

from core.logger import get_logger
from core.models import CheckoutResult
from .session import REQUEST_TIMEOUT, BackendError, endpoint

logger = get_logger(__name__)


class CheckoutError(BackendError):
    """Order submission was rejected or could not be completed."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


def submit_checkout(
    base_url: str,
    session: requests.Session,
    items: List[Dict[str, Any]],
) -> CheckoutResult:
    """
    POST {base_url}/checkout with {"items": [{"id", "qty"}, ...]}.
    Not retried: the user retries from the cart, which is left untouched.
    """
    url = endpoint(base_url, "checkout")
    logger.info("Submitting checkout of %d lines to %s", len(items), url)

    try:
        r = session.post(url, json={"items": items}, timeout=REQUEST_TIMEOUT)
    except requests.RequestException as e:
        raise CheckoutError(f"checkout request to {url} failed: {e}") from e

    if not r.ok:
        raise CheckoutError(
            f"checkout rejected by {url} with HTTP {r.status_code}",
            status_code=r.status_code,
        )

    try:
        return CheckoutResult.from_dict(r.json())
    except ValueError as e:
        raise CheckoutError(
            f"checkout response from {url} could not be parsed: {e}",
            status_code=r.status_code,
        ) from e
