import argparse
import sys
from pathlib import Path
from typing import List, Optional

from backend import Backend
from core.cart import Cart
from core.catalog import TAGS
from core.logger import get_logger
from core.render import (
    build_cart_text,
    build_catalog_text,
    build_confirmation_text,
    build_storefront_html,
)
from core.storage import CartStore
from core.storefront import Storefront

logger = get_logger(__name__)


def build_storefront(backend: Optional[Backend] = None, store: Optional[CartStore] = None) -> Storefront:
    backend = backend if backend is not None else Backend()
    store = store if store is not None else CartStore()
    if not backend.configured:
        logger.info("BACKEND_URL is not set; running without a backend.")
    return Storefront(backend, Cart(store))


def _load_listing(shop: Storefront, args) -> None:
    # One-shot invocation: set both inputs, then issue a single request.
    shop.catalog.query = (getattr(args, "q", "") or "").strip()
    shop.catalog.active_tag = getattr(args, "tag", "") or ""
    shop.catalog.refresh()


def cmd_search(shop: Storefront, args) -> int:
    _load_listing(shop, args)
    print(build_catalog_text(shop.catalog.items, shop.catalog.query, shop.catalog.active_tag), end="")
    return 0


def cmd_tags(shop: Storefront, args) -> int:
    for t in TAGS:
        print(t)
    return 0


def cmd_add(shop: Storefront, args) -> int:
    _load_listing(shop, args)
    line = shop.add_to_cart(args.id)
    if line is None:
        print(f"No model '{args.id}' in the current listing.", file=sys.stderr)
        return 1
    print(f"Added {line.item.name or line.identifier} (qty {line.qty}). Cart: {shop.cart.count}")
    return 0


def cmd_remove(shop: Storefront, args) -> int:
    shop.cart.remove_from_cart(args.id)
    print(build_cart_text(shop.cart), end="")
    return 0


def cmd_qty(shop: Storefront, args) -> int:
    shop.cart.update_qty(args.id, args.qty)
    print(build_cart_text(shop.cart), end="")
    return 0


def cmd_clear(shop: Storefront, args) -> int:
    shop.cart.clear_cart()
    print(build_cart_text(shop.cart), end="")
    return 0


def cmd_cart(shop: Storefront, args) -> int:
    shop.open_cart()
    print(build_cart_text(shop.cart), end="")
    return 0


def cmd_checkout(shop: Storefront, args) -> int:
    shop.open_cart()
    if not shop.checkout_flow.can_checkout:
        if not shop.cart:
            print("Your cart is empty.")
        else:
            print("Checkout is unavailable: no backend configured.")
        return 1

    result = shop.checkout()
    if result is None:
        print(build_cart_text(shop.cart, notice=shop.notice), end="")
        return 1

    print(build_confirmation_text(result), end="")
    shop.dismiss_confirmation()
    return 0


def cmd_html(shop: Storefront, args) -> int:
    _load_listing(shop, args)
    html = build_storefront_html(
        shop.catalog.items,
        list(TAGS),
        active_tag=shop.catalog.active_tag,
        query=shop.catalog.query,
        cart=shop.cart,
    )
    if args.out:
        Path(args.out).write_text(html, encoding="utf-8")
        logger.info("Wrote storefront page to %s", args.out)
    else:
        print(html, end="")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="character-shop",
        description="Browse and buy 3D character models.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    def listing_args(p):
        p.add_argument("--q", default="", help="search text")
        p.add_argument("--tag", default="", choices=("",) + TAGS, help="filter tag")

    p = sub.add_parser("search", help="list models")
    listing_args(p)
    p.set_defaults(func=cmd_search)

    p = sub.add_parser("tags", help="list filter tags")
    p.set_defaults(func=cmd_tags)

    p = sub.add_parser("add", help="add a listed model to the cart")
    p.add_argument("id")
    listing_args(p)
    p.set_defaults(func=cmd_add)

    p = sub.add_parser("remove", help="remove a line from the cart")
    p.add_argument("id")
    p.set_defaults(func=cmd_remove)

    p = sub.add_parser("qty", help="set the quantity of a cart line")
    p.add_argument("id")
    p.add_argument("qty")
    p.set_defaults(func=cmd_qty)

    p = sub.add_parser("clear", help="empty the cart")
    p.set_defaults(func=cmd_clear)

    p = sub.add_parser("cart", help="show the cart")
    p.set_defaults(func=cmd_cart)

    p = sub.add_parser("checkout", help="place an order for the cart")
    p.set_defaults(func=cmd_checkout)

    p = sub.add_parser("html", help="render the storefront page")
    listing_args(p)
    p.add_argument("--out", default="", help="write to this file instead of stdout")
    p.set_defaults(func=cmd_html)

    return parser


def main(argv: Optional[List[str]] = None, shop: Optional[Storefront] = None) -> int:
    args = build_parser().parse_args(argv)
    shop = shop if shop is not None else build_storefront()
    return args.func(shop, args)


def run() -> int:
    try:
        return main()
    except Exception as e:
        logger.exception("Fatal shop error: %s", e)
        return 2


if __name__ == "__main__":
    raise SystemExit(run())
