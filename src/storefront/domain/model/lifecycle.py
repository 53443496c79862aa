"""Order lifecycle: statuses, actors and the legal transition table.

Statuses are listed in forward-progress order.  ``Cancelled`` sits at the
end of the list but is an absorbing side branch, not a step of progress.

Only the transitions in ``_TRANSITIONS`` exist.  Anything else is rejected
with IllegalTransitionError before a write is attempted.
"""

from __future__ import annotations

from enum import Enum

from storefront.domain.exceptions import IllegalTransitionError


class OrderStatus(Enum):
    PREPARING = "Preparing"
    OUT_FOR_DELIVERY = "Out for Delivery"
    DELIVERED = "Delivered"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"

    @property
    def index(self) -> int:
        return _PROGRESS.index(self)


class Actor(Enum):
    """Who requests a transition."""

    BUYER = "buyer"
    OPERATOR = "operator"  # restaurant / rider side


_PROGRESS = list(OrderStatus)

INITIAL_STATUS = OrderStatus.PREPARING
TERMINAL_STATUSES = frozenset({OrderStatus.COMPLETED, OrderStatus.CANCELLED})

_TRANSITIONS: frozenset[tuple[OrderStatus, Actor, OrderStatus]] = frozenset({
    (OrderStatus.PREPARING, Actor.OPERATOR, OrderStatus.OUT_FOR_DELIVERY),
    (OrderStatus.OUT_FOR_DELIVERY, Actor.OPERATOR, OrderStatus.DELIVERED),
    (OrderStatus.DELIVERED, Actor.BUYER, OrderStatus.COMPLETED),
    (OrderStatus.PREPARING, Actor.BUYER, OrderStatus.CANCELLED),
})


# --- Classification predicates ------------------------------------------------

def is_terminal(status: OrderStatus) -> bool:
    return status in TERMINAL_STATUSES


def is_shipped(status: OrderStatus) -> bool:
    """True once the order has left the origin.

    Cancelled orders never ship, even though ``Cancelled`` is last in the
    status list.
    """
    if status == OrderStatus.CANCELLED:
        return False
    return status.index >= OrderStatus.OUT_FOR_DELIVERY.index


def is_completed(status: OrderStatus) -> bool:
    return status in (OrderStatus.DELIVERED, OrderStatus.COMPLETED)


def is_cancellable(status: OrderStatus) -> bool:
    return status.index <= OrderStatus.PREPARING.index


def is_awaiting_receipt_confirmation(status: OrderStatus) -> bool:
    return status == OrderStatus.DELIVERED


def progress_percent(status: OrderStatus) -> int:
    """Progress bar value: 0 at Preparing, 100 from Delivered onwards."""
    if status == OrderStatus.CANCELLED:
        return 0
    ratio = status.index / OrderStatus.DELIVERED.index
    return round(min(100.0, max(0.0, ratio * 100)))


# --- Transitions --------------------------------------------------------------

def allowed_targets(status: OrderStatus, actor: Actor) -> list[OrderStatus]:
    """Statuses *actor* may move an order in *status* to, in progress order."""
    return [
        target
        for target in _PROGRESS
        if (status, actor, target) in _TRANSITIONS
    ]


def next_status(status: OrderStatus) -> OrderStatus:
    """The status an operator's "advance" action leads to."""
    targets = allowed_targets(status, Actor.OPERATOR)
    if not targets:
        raise IllegalTransitionError(
            f"Operator cannot advance an order that is {status.value}"
        )
    return targets[0]


def ensure_transition(current: OrderStatus, actor: Actor, target: OrderStatus) -> None:
    """Raise IllegalTransitionError unless (current, actor, target) is legal."""
    if (current, actor, target) in _TRANSITIONS:
        return
    if is_terminal(current):
        raise IllegalTransitionError(
            f"Order is {current.value}; no further status changes are allowed"
        )
    raise IllegalTransitionError(
        f"{actor.value.capitalize()} cannot move an order from "
        f"{current.value} to {target.value}"
    )
