"""
Tests for text and HTML views
"""

from core.cart import Cart
from core.catalog import TAGS
from core.models import CatalogItem
from core.render import (
    build_cart_text,
    build_catalog_text,
    build_confirmation_text,
    build_storefront_html,
    format_price,
)


def test_format_price():
    assert format_price(35) == "$35.00"
    assert format_price(None) == "$0.00"


def test_empty_catalog_message():
    assert "No models to display yet." in build_catalog_text([])


def test_catalog_lists_badges(item_a, item_b):
    text = build_catalog_text([item_a, item_b], query="kn", active_tag="fantasy")

    assert "Knight  $10.00  [a-1]" in text
    assert "FBX · GLB · Rigged" in text
    assert "Animated" in text
    assert '"kn"' in text and "#fantasy" in text


def test_cart_text(item_a, item_b):
    cart = Cart()
    cart.add_to_cart(item_a)
    cart.add_to_cart(item_a)
    cart.add_to_cart(item_b)
    cart.update_qty("mongo-b", 3)

    text = build_cart_text(cart, notice="Checkout failed.")

    assert "Your Cart (5)" in text
    assert "! Checkout failed." in text
    assert "$5.00 x 3 = $15.00" in text
    assert "Subtotal: $35.00" in text


def test_empty_cart_text():
    text = build_cart_text(Cart())

    assert "Your cart is empty." in text
    assert "Subtotal: $0.00" in text


def test_confirmation_text(confirmed_x1):
    text = build_confirmation_text(confirmed_x1)

    assert "Order X1 confirmed" in text
    assert "Subtotal: $35.00" in text
    assert "https://cdn.test/a-1.fbx" in text


def test_storefront_html_escapes_and_marks_active_tag(item_a):
    evil = CatalogItem(id="x", name="<script>alert(1)</script>", price=1)
    cart = Cart()
    cart.add_to_cart(item_a)

    html = build_storefront_html([item_a, evil], list(TAGS), active_tag="mech", cart=cart, theme="light")

    assert "<script>alert(1)</script>" not in html
    assert "&lt;script&gt;" in html
    assert "Knight" in html
    assert "$10.00" in html
    assert "Your Cart" in html


def test_storefront_html_empty_listing():
    html = build_storefront_html([], list(TAGS))

    assert "No models to display yet." in html
    assert "Your Cart" not in html
