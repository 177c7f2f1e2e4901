# core/reconcile.py
from typing import List, Tuple

from .models import CartLine, CheckoutResult


def reconcile(
    submitted: List[CartLine], result: CheckoutResult
) -> tuple[List[str], List[str], List[Tuple[str, int, int]]]:
    """
    Compare the cart that was submitted with the confirmed order lines.
    Returns:
      (missing_ids, unexpected_ids, qty_changes[(id, submitted_qty, confirmed_qty)])
    Order follows the submitted cart, then the confirmation.
    """
    sent = {line.identifier: line.qty for line in submitted}
    confirmed = {}
    for it in result.items:
        confirmed[it.id] = confirmed.get(it.id, 0) + it.qty

    missing = [iid for iid in sent if iid not in confirmed]
    unexpected = [iid for iid in confirmed if iid not in sent]

    qty_changes: List[Tuple[str, int, int]] = []
    for iid, before in sent.items():
        after = confirmed.get(iid)
        if after is None or after == before:
            continue
        qty_changes.append((iid, before, after))

    return missing, unexpected, qty_changes


def subtotal_mismatch(local_subtotal: float, result: CheckoutResult) -> bool:
    """True when the confirmed subtotal differs from the local one by a cent or more."""
    return abs(round(local_subtotal * 100) - round(result.subtotal * 100)) >= 1
