# backend/catalog.py
import os
from typing import List

import requests
from tenacity import (
    RetryError,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from core.logger import get_logger
from core.models import CatalogItem
from .session import REQUEST_TIMEOUT, BackendError, endpoint

logger = get_logger(__name__)

CATALOG_MAX_ATTEMPTS = int(os.getenv("CATALOG_MAX_ATTEMPTS", "3"))


@retry(
    wait=wait_exponential_jitter(initial=1, max=10),
    stop=stop_after_attempt(max(1, CATALOG_MAX_ATTEMPTS)),
    retry=retry_if_exception_type(requests.RequestException),
)
def _fetch(session: requests.Session, url: str, params: dict) -> requests.Response:
    r = session.get(url, params=params, timeout=REQUEST_TIMEOUT)
    r.raise_for_status()
    return r


def build_params(query: str = "", tag: str = "") -> dict:
    """Query parameters for the listing endpoint; empty values are omitted."""
    params = {}
    if query:
        params["q"] = query
    if tag:
        params["tag"] = tag
    return params


def parse_models(payload) -> List[CatalogItem]:
    if not isinstance(payload, list):
        raise BackendError(
            f"listing response must be a JSON array, got {type(payload).__name__}"
        )
    return [CatalogItem.from_dict(it) for it in payload if isinstance(it, dict)]


def fetch_models(
    base_url: str,
    session: requests.Session,
    query: str = "",
    tag: str = "",
) -> List[CatalogItem]:
    """
    GET {base_url}/models with optional q/tag filters.
    Raises BackendError when the request or the payload is unusable.
    """
    url = endpoint(base_url, "models")
    params = build_params(query, tag)
    logger.info("Fetching models from %s params=%s", url, params)

    try:
        r = _fetch(session, url, params)
    except RetryError as e:
        raise BackendError(f"listing fetch failed for {url} after retries: {e}") from e

    try:
        payload = r.json()
    except ValueError as e:
        raise BackendError(f"listing response from {url} is not JSON: {e}") from e

    items = parse_models(payload)
    logger.info("Listing: found %d models for %s", len(items), url)
    return items
