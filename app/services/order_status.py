"""Order status transition helpers."""

from __future__ import annotations

SELECTED: str = "SELECTED"
PAID: str = "PAID"
ORDER_STATUSES: list[str] = [SELECTED, PAID]
# Statuses that count as an application in reconciliation and are eligible for marking.
APPLIED_STATUSES: tuple[str, ...] = (SELECTED, PAID)

ALLOWED_TRANSITIONS: dict[str, set[str]] = {
    SELECTED: {PAID},
    PAID: {SELECTED},
}


def can_transition(current: str, new: str) -> bool:
    """Return whether order can move from current to new status."""
    return new in ALLOWED_TRANSITIONS.get(current, set())


def status_for_paid_flag(paid: bool) -> str:
    """Map an admin paid checkbox to the ledger status."""
    return PAID if paid else SELECTED


def sources_for(new_status: str) -> tuple[str, ...]:
    """Statuses an order may leave to reach ``new_status``."""
    if new_status not in ORDER_STATUSES:
        raise ValueError(f"Unknown order status: {new_status}")
    return tuple(status for status in ORDER_STATUSES if can_transition(status, new_status))
