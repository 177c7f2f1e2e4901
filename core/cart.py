# core/cart.py
from typing import Any, Dict, Iterator, List, Optional, Protocol

from .logger import get_logger
from .models import CartLine, CatalogItem, coerce_qty, resolve_identifier, resolve_wire_id

logger = get_logger(__name__)


class CartPersistence(Protocol):
    def load(self) -> List[CartLine]: ...

    def save(self, lines: List[CartLine]) -> None: ...


class Cart:
    """
    Insertion-ordered cart lines, unique by identifier.

    The full cart is handed to the store after every mutation.
    """

    def __init__(self, store: Optional[CartPersistence] = None):
        self._store = store
        self._lines: List[CartLine] = list(store.load()) if store is not None else []

    def __iter__(self) -> Iterator[CartLine]:
        return iter(self._lines)

    def __len__(self) -> int:
        return len(self._lines)

    def __bool__(self) -> bool:
        return bool(self._lines)

    @property
    def lines(self) -> List[CartLine]:
        return list(self._lines)

    def get(self, identifier: str) -> Optional[CartLine]:
        for line in self._lines:
            if line.identifier == identifier:
                return line
        return None

    def _persist(self):
        if self._store is not None:
            self._store.save(list(self._lines))

    def add_to_cart(self, item: CatalogItem) -> CartLine:
        ident = resolve_identifier(item)
        line = self.get(ident)
        if line is not None:
            line.qty += 1
        else:
            line = CartLine(item=item, qty=1)
            self._lines.append(line)
        logger.debug("Cart add %s -> qty %d", ident, line.qty)
        self._persist()
        return line

    def remove_from_cart(self, identifier: str):
        before = len(self._lines)
        self._lines = [line for line in self._lines if line.identifier != identifier]
        if len(self._lines) != before:
            logger.debug("Cart remove %s", identifier)
        self._persist()

    def update_qty(self, identifier: str, qty: Any = None):
        qty = coerce_qty(qty)
        line = self.get(identifier)
        if line is not None:
            line.qty = qty
            logger.debug("Cart qty %s -> %d", identifier, qty)
        self._persist()

    def clear_cart(self):
        self._lines = []
        self._persist()

    @property
    def subtotal(self) -> float:
        return sum((line.line_total for line in self._lines), 0.0)

    @property
    def count(self) -> int:
        return sum(line.qty for line in self._lines)

    def checkout_payload(self) -> List[Dict[str, Any]]:
        return [{"id": resolve_wire_id(line.item), "qty": line.qty} for line in self._lines]
