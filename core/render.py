import os
from pathlib import Path
from typing import Iterable, List, Sequence

from jinja2 import Environment, FileSystemLoader, select_autoescape

from .cart import Cart
from .models import CatalogItem, CheckoutResult, resolve_identifier

# Resolve template directory relative to this file
TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"
env = Environment(
    loader=FileSystemLoader(str(TEMPLATE_DIR)),
    autoescape=select_autoescape(["html"]),
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
)

SHOP_THEME = os.getenv("SHOP_THEME", "dark").strip().lower()
if SHOP_THEME not in ("light", "dark"):
    SHOP_THEME = "dark"

THEMES = {
    "light": {
        "page_bg": "#f8fafc",
        "card_bg": "#ffffff",
        "card_border": "#e2e8f0",
        "text_primary": "#0f172a",
        "text_secondary": "#475569",
        "accent": "#c026d3",
        "badge_rigged": "#047857",
        "badge_animated": "#0369a1",
    },
    "dark": {
        "page_bg": "#020617",
        "card_bg": "#0f172a",
        "card_border": "#1e293b",
        "text_primary": "#f8fafc",
        "text_secondary": "#cbd5e1",
        "accent": "#e879f9",
        "badge_rigged": "#6ee7b7",
        "badge_animated": "#7dd3fc",
    },
}


def format_price(amount: float | None) -> str:
    return f"${(amount or 0):.2f}"


def _item_data(it: CatalogItem) -> dict:
    badges = list(it.formats)
    if it.rigged:
        badges.append("Rigged")
    if it.animated:
        badges.append("Animated")
    return {
        "id": resolve_identifier(it),
        "name": it.name,
        "price_str": format_price(it.price),
        "description": it.description,
        "thumbnail_url": it.thumbnail_url,
        "preview_url": it.preview_url,
        "formats": list(it.formats),
        "rigged": it.rigged,
        "animated": it.animated,
        "badges": badges,
    }


def _cart_data(cart: Cart) -> dict:
    return {
        "lines": [
            {
                "id": line.identifier,
                "name": line.item.name,
                "qty": line.qty,
                "price_str": format_price(line.item.price),
                "line_total_str": format_price(line.line_total),
            }
            for line in cart
        ],
        "count": cart.count,
        "subtotal_str": format_price(cart.subtotal),
    }


def build_catalog_text(items: Sequence[CatalogItem], query: str = "", active_tag: str = "") -> str:
    template = env.get_template("catalog.txt")
    return template.render(
        items=[_item_data(it) for it in items],
        query=query,
        active_tag=active_tag,
    )


def build_cart_text(cart: Cart, notice: str = "") -> str:
    template = env.get_template("cart.txt")
    return template.render(cart=_cart_data(cart), notice=notice)


def build_confirmation_text(result: CheckoutResult) -> str:
    template = env.get_template("confirmation.txt")
    lines = [
        {
            "id": it.id,
            "name": it.name or it.id,
            "qty": it.qty,
            "price_str": format_price(it.price),
            "line_total_str": format_price(it.line_total),
            "download_links": it.download_links,
        }
        for it in result.items
    ]
    return template.render(
        order_id=result.order_id,
        message=result.message,
        subtotal_str=format_price(result.subtotal),
        lines=lines,
    )


def build_storefront_html(
    items: Iterable[CatalogItem],
    tags: List[str],
    active_tag: str = "",
    query: str = "",
    cart: Cart | None = None,
    theme: str = SHOP_THEME,
) -> str:
    template = env.get_template("storefront.html")
    colors = THEMES.get(theme, THEMES[SHOP_THEME])
    return template.render(
        title="3D Character Shop",
        items=[_item_data(it) for it in items],
        tags=list(tags),
        active_tag=active_tag,
        query=query,
        cart=_cart_data(cart) if cart is not None else None,
        colors=colors,
    )
