# core/catalog.py
from typing import List, Optional, Protocol

from .logger import get_logger
from .models import CatalogItem, resolve_identifier

logger = get_logger(__name__)

TAGS = ("stylized", "fantasy", "sci-fi", "mech", "game-ready", "PBR")


class ListingService(Protocol):
    @property
    def configured(self) -> bool: ...

    def list_models(self, query: str = "", tag: str = "") -> List[CatalogItem]: ...


class CatalogQuery:
    """
    Search text and a single-select tag, turned into listing requests.

    Changing either input re-issues the request. Each request takes a sequence
    number and only the latest issued one may replace the displayed list.
    """

    def __init__(self, backend: ListingService, query: str = "", active_tag: str = ""):
        self.backend = backend
        self.query = query
        self.active_tag = active_tag
        self.items: List[CatalogItem] = []
        self.last_error: Optional[Exception] = None
        self._issued = 0

    @property
    def latest_seq(self) -> int:
        return self._issued

    def set_query(self, text: Optional[str]) -> bool:
        text = (text or "").strip()
        if text == self.query:
            return False
        self.query = text
        self.refresh()
        return True

    def select_tag(self, tag: Optional[str]):
        tag = (tag or "").strip()
        self.active_tag = "" if tag == self.active_tag else tag
        self.refresh()

    def begin_request(self) -> int:
        self._issued += 1
        return self._issued

    def apply_response(self, seq: int, items: List[CatalogItem]) -> bool:
        if seq != self._issued:
            logger.debug(
                "Discarding stale listing response #%d (latest is #%d).",
                seq, self._issued,
            )
            return False
        self.items = list(items)
        self.last_error = None
        return True

    def refresh(self) -> bool:
        """Fetch the listing for the current inputs. Returns True if the list was replaced."""
        if not self.backend.configured:
            logger.debug("No backend configured; skipping listing query.")
            return False

        seq = self.begin_request()
        try:
            items = self.backend.list_models(self.query, self.active_tag)
        except Exception as e:
            self.last_error = e
            logger.error(
                "Failed to load models (q=%r, tag=%r): %s",
                self.query, self.active_tag, e,
            )
            return False
        return self.apply_response(seq, items)

    def find(self, identifier: str) -> Optional[CatalogItem]:
        for item in self.items:
            if resolve_identifier(item) == identifier:
                return item
        return None
