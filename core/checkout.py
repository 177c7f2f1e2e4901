# core/checkout.py
from enum import Enum
from typing import Any, Dict, List, Optional, Protocol

from backend.session import BackendError

from .cart import Cart
from .logger import get_logger
from .models import CheckoutResult
from .reconcile import reconcile, subtotal_mismatch

logger = get_logger(__name__)

FAILURE_NOTICE = "Checkout failed. Your cart has been kept, please try again."


class OrderService(Protocol):
    @property
    def configured(self) -> bool: ...

    def checkout(self, items: List[Dict[str, Any]]) -> CheckoutResult: ...


class CheckoutState(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    CONFIRMED = "confirmed"


class CheckoutFlow:
    """
    Idle -> Submitting -> Confirmed, or back to Idle with a notice on failure.
    Calls made while Submitting are suppressed.
    """

    def __init__(self, cart: Cart, backend: OrderService):
        self.cart = cart
        self.backend = backend
        self.state = CheckoutState.IDLE
        self.result: Optional[CheckoutResult] = None
        self.notice: str = ""
        self.last_error: Optional[Exception] = None

    @property
    def can_checkout(self) -> bool:
        return (
            len(self.cart) > 0
            and self.backend.configured
            and self.state is not CheckoutState.SUBMITTING
        )

    def checkout(self) -> Optional[CheckoutResult]:
        if self.state is CheckoutState.SUBMITTING:
            logger.debug("Checkout already in flight; ignoring duplicate submission.")
            return None
        if not self.cart:
            logger.debug("Cart is empty; nothing to check out.")
            return None
        if not self.backend.configured:
            logger.info("No backend configured; checkout is disabled.")
            return None

        submitted = self.cart.lines
        local_subtotal = self.cart.subtotal
        payload = self.cart.checkout_payload()

        self.state = CheckoutState.SUBMITTING
        self.notice = ""
        try:
            result = self.backend.checkout(payload)
        except BackendError as e:
            self.state = CheckoutState.IDLE
            self.last_error = e
            self.notice = FAILURE_NOTICE
            logger.error("Checkout failed: %s", e)
            return None
        except Exception:
            self.state = CheckoutState.IDLE
            raise

        self._log_discrepancies(submitted, local_subtotal, result)

        self.result = result
        self.last_error = None
        self.cart.clear_cart()
        self.state = CheckoutState.CONFIRMED
        logger.info("Order %s confirmed (subtotal %.2f).", result.order_id, result.subtotal)
        return result

    def dismiss(self):
        self.result = None
        self.notice = ""
        self.state = CheckoutState.IDLE

    def _log_discrepancies(self, submitted, local_subtotal: float, result: CheckoutResult):
        missing, unexpected, qty_changes = reconcile(submitted, result)
        if missing:
            logger.warning("Order %s did not confirm: %s", result.order_id, missing)
        if unexpected:
            logger.warning("Order %s confirmed unrequested items: %s", result.order_id, unexpected)
        for iid, before, after in qty_changes:
            logger.warning(
                "Order %s changed qty of %s from %d to %d.",
                result.order_id, iid, before, after,
            )
        if subtotal_mismatch(local_subtotal, result):
            logger.warning(
                "Order %s subtotal %.2f differs from cart subtotal %.2f.",
                result.order_id, result.subtotal, local_subtotal,
            )
