# core/models.py
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Tuple, Union


def _as_price(value: Any) -> float:
    if value is None or value == "":
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _as_str(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _as_id(value: Any) -> Any:
    # Identity fields keep their wire value; falsy ones count as unset.
    return value if value else ""


def coerce_qty(value: Any) -> int:
    """Quantity from user input or a payload: anything non-numeric counts as 1, floor of 1."""
    if isinstance(value, bool):
        return 1
    if isinstance(value, str):
        value = value.strip()
    try:
        qty = int(value)
    except (TypeError, ValueError, OverflowError):
        try:
            qty = int(float(value))
        except (TypeError, ValueError, OverflowError):
            return 1
    return max(1, qty)


@dataclass(frozen=True)
class CatalogItem:
    """
    A character listing as returned by the listing service.
    The three identity fields mirror the wire payload; use resolve_identifier()
    rather than reading them directly.
    """
    id: Any = ""
    alt_id: Any = ""
    name: str = ""
    price: float = 0.0
    description: str = ""
    thumbnail_url: str = ""
    preview_url: str = ""
    formats: Tuple[str, ...] = ()
    rigged: bool = False
    animated: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CatalogItem":
        formats = data.get("formats") or []
        if isinstance(formats, str):
            formats = [formats]
        elif not isinstance(formats, (list, tuple)):
            formats = []
        return cls(
            id=_as_id(data.get("id")),
            alt_id=_as_id(data.get("_id")),
            name=_as_str(_as_id(data.get("name"))),
            price=_as_price(data.get("price")),
            description=_as_str(data.get("description")),
            thumbnail_url=_as_str(data.get("thumbnail_url")),
            preview_url=_as_str(data.get("preview_url")),
            formats=tuple(str(f) for f in formats),
            rigged=bool(data.get("rigged")),
            animated=bool(data.get("animated")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "_id": self.alt_id,
            "name": self.name,
            "price": self.price,
            "description": self.description,
            "thumbnail_url": self.thumbnail_url,
            "preview_url": self.preview_url,
            "formats": list(self.formats),
            "rigged": self.rigged,
            "animated": self.animated,
        }


@dataclass
class CartLine:
    item: CatalogItem
    qty: int = 1

    @property
    def identifier(self) -> str:
        return resolve_identifier(self.item)

    @property
    def line_total(self) -> float:
        return self.item.price * self.qty

    def to_dict(self) -> Dict[str, Any]:
        data = self.item.to_dict()
        data["qty"] = self.qty
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CartLine":
        return cls(item=CatalogItem.from_dict(data), qty=coerce_qty(data.get("qty")))


Identifiable = Union[CatalogItem, CartLine, Mapping[str, Any]]


def resolve_wire_id(item: Identifiable) -> Any:
    """
    First non-empty of id, _id, name, as sent by the listing service
    (a numeric id stays numeric). Returns "" when none is set.
    """
    if isinstance(item, CartLine):
        item = item.item
    if isinstance(item, CatalogItem):
        candidates = (item.id, item.alt_id, item.name)
    else:
        candidates = (item.get("id"), item.get("_id"), item.get("name"))
    for candidate in candidates:
        if candidate:
            return candidate
    return ""


def resolve_identifier(item: Identifiable) -> str:
    """Identity of a listing as a string key; see resolve_wire_id()."""
    return str(resolve_wire_id(item))


@dataclass
class ConfirmedLine:
    id: str
    name: str = ""
    qty: int = 1
    price: float = 0.0
    line_total: float = 0.0
    download_links: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ConfirmedLine":
        links = data.get("download_links") or []
        if not isinstance(links, list):
            links = [links]
        return cls(
            id=resolve_identifier(data),
            name=_as_str(data.get("name")),
            qty=coerce_qty(data.get("qty")),
            price=_as_price(data.get("price")),
            line_total=_as_price(data.get("line_total")),
            download_links=[str(link) for link in links if link],
        )


@dataclass
class CheckoutResult:
    """Server-confirmed order. Held only until the confirmation is dismissed."""
    order_id: str
    message: str = ""
    subtotal: float = 0.0
    items: List[ConfirmedLine] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CheckoutResult":
        if not isinstance(data, Mapping):
            raise ValueError("checkout response must be a JSON object")
        order_id = _as_str(data.get("order_id"))
        if not order_id:
            raise ValueError("checkout response is missing order_id")
        items = data.get("items") or []
        if not isinstance(items, list):
            raise ValueError("checkout response 'items' must be a list")
        return cls(
            order_id=order_id,
            message=_as_str(data.get("message")),
            subtotal=_as_price(data.get("subtotal")),
            items=[ConfirmedLine.from_dict(it) for it in items if isinstance(it, Mapping)],
        )
