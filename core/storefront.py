# core/storefront.py
from typing import Optional

from .cart import Cart
from .catalog import CatalogQuery
from .checkout import CheckoutFlow
from .logger import get_logger
from .models import CartLine, CheckoutResult

logger = get_logger(__name__)


class Storefront:
    """
    Application state for one session: the catalog query, the cart and the
    checkout flow, plus whether the cart drawer is open. The cart and the
    backend are supplied by the caller.
    """

    def __init__(self, backend, cart: Cart):
        self.backend = backend
        self.cart = cart
        self.catalog = CatalogQuery(backend)
        self.checkout_flow = CheckoutFlow(cart, backend)
        self.cart_open = False

    @property
    def confirmation(self) -> Optional[CheckoutResult]:
        return self.checkout_flow.result

    @property
    def notice(self) -> str:
        return self.checkout_flow.notice

    def open_cart(self):
        self.cart_open = True

    def close_cart(self):
        self.cart_open = False

    def add_to_cart(self, identifier: str) -> Optional[CartLine]:
        item = self.catalog.find(identifier)
        if item is None:
            logger.warning("No listed model with identifier '%s'.", identifier)
            return None
        return self.cart.add_to_cart(item)

    def checkout(self) -> Optional[CheckoutResult]:
        result = self.checkout_flow.checkout()
        if result is not None:
            self.close_cart()
        return result

    def dismiss_confirmation(self):
        self.checkout_flow.dismiss()
