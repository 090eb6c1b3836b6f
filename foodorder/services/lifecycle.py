"""
Order lifecycle: legal statuses, the transition graph and the operations that
move an order along it.

    confirmed -> preparing -> on_the_way -> delivered

Any non-terminal status may also move to cancelled. delivered and cancelled
are terminal.
"""
import logging
from datetime import datetime
from typing import Dict, FrozenSet, Optional

from foodorder.core.config import settings
from foodorder.core.errors import (
    Forbidden, InvalidInput, InvalidTransition, NotFound, TerminalState
)
from foodorder.models.order import OrderCreate, OrderOut, OrderStatus
from foodorder.models.user import UserPublic
from foodorder.repositories.order_repository import OrderRepository

logger = logging.getLogger(__name__)

INITIAL_STATUS = OrderStatus.CONFIRMED

TERMINAL_STATUSES: FrozenSet[OrderStatus] = frozenset([
    OrderStatus.DELIVERED,
    OrderStatus.CANCELLED,
])

ALLOWED_TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.CONFIRMED: frozenset([OrderStatus.PREPARING, OrderStatus.CANCELLED]),
    OrderStatus.PREPARING: frozenset([OrderStatus.ON_THE_WAY, OrderStatus.CANCELLED]),
    OrderStatus.ON_THE_WAY: frozenset([OrderStatus.DELIVERED, OrderStatus.CANCELLED]),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}

# Customers may only call off an order the kitchen hasn't started
CUSTOMER_CANCELLABLE: FrozenSet[OrderStatus] = frozenset([OrderStatus.CONFIRMED])

REQUIRED_TEXT_FIELDS = ("delivery_address", "customer_name", "customer_phone")


def is_terminal(status: OrderStatus) -> bool:
    return status in TERMINAL_STATUSES


def can_transition(current: OrderStatus, new: OrderStatus) -> bool:
    return new in ALLOWED_TRANSITIONS[current]


def parse_status(value: str) -> OrderStatus:
    try:
        return OrderStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in OrderStatus)
        raise InvalidInput(f"Unknown order status '{value}' (expected one of: {allowed})", field="status")


def expected_total(subtotal: int, delivery_fee: int = 0) -> int:
    """subtotal + delivery fee + tax, tax rounded half up to whole rupees"""
    tax = int(subtotal * settings.TAX_RATE + 0.5)
    return subtotal + delivery_fee + tax


class OrderLifecycle:
    """Creates orders and applies status and delivery-time changes.

    Concurrent admin updates to the same order are last-write-wins; there is
    no row versioning.
    """

    def __init__(self, repo: OrderRepository):
        self.repo = repo

    def create(self, user_id: Optional[str], order_input: OrderCreate) -> OrderOut:
        self._validate(order_input)
        self._check_total(order_input)

        now = datetime.now()
        estimate = order_input.estimated_delivery_time or settings.DEFAULT_ESTIMATED_DELIVERY_MINUTES
        order = self.repo.create({
            "user_id": user_id,
            "items": order_input.items,
            "total": order_input.total,
            "status": INITIAL_STATUS.value,
            "delivery_address": order_input.delivery_address.strip(),
            "payment_method": order_input.payment_method.value,
            "customer_name": order_input.customer_name.strip(),
            "customer_phone": order_input.customer_phone.strip(),
            "estimated_delivery_time": estimate,
            "created_at": now,
            "updated_at": now,
        })
        logger.info(f"Order {order.id} placed by user {user_id} for {order.total} ({len(order.items)} items)")
        return order

    def transition(self, order_id: str, new_status: str) -> OrderOut:
        target = parse_status(new_status)
        order = self._get(order_id)

        if not can_transition(order.status, target):
            logger.warning(f"Rejected transition of order {order_id}: {order.status.value} -> {target.value}")
            raise InvalidTransition(order.status.value, target.value)

        updated = self._update(order_id, {"status": target.value})
        logger.info(f"Order {order_id} moved {order.status.value} -> {target.value}")
        return updated

    def reestimate(self, order_id: str, minutes: int) -> OrderOut:
        if minutes <= 0:
            raise InvalidInput("Estimated delivery time must be a positive number of minutes",
                               field="estimated_delivery_time")
        order = self._get(order_id)
        if is_terminal(order.status):
            raise TerminalState(order_id, order.status.value)

        updated = self._update(order_id, {"estimated_delivery_time": minutes})
        logger.info(f"Order {order_id} re-estimated to {minutes} minutes")
        return updated

    def cancel_by_customer(self, order_id: str, user: UserPublic) -> OrderOut:
        order = self._get(order_id)
        if order.user_id != user.id:
            raise Forbidden()
        if order.status not in CUSTOMER_CANCELLABLE:
            raise InvalidTransition(order.status.value, OrderStatus.CANCELLED.value)

        updated = self._update(order_id, {"status": OrderStatus.CANCELLED.value})
        logger.info(f"Order {order_id} cancelled by customer {user.id}")
        return updated

    def _get(self, order_id: str) -> OrderOut:
        order = self.repo.get_by_id(order_id)
        if order is None:
            raise NotFound("Order", order_id)
        return order

    def _update(self, order_id: str, fields: dict) -> OrderOut:
        updated = self.repo.update_partial(order_id, fields)
        if updated is None:
            # Deleted between the read and the write
            raise NotFound("Order", order_id)
        return updated

    def _validate(self, order_input: OrderCreate):
        if not order_input.items:
            raise InvalidInput("An order needs at least one item", field="items")
        for field in REQUIRED_TEXT_FIELDS:
            value = getattr(order_input, field)
            if value is None or not value.strip():
                raise InvalidInput(f"{field} is required", field=field)

    def _check_total(self, order_input: OrderCreate):
        subtotal = sum(item.line_total for item in order_input.items)
        candidates = {expected_total(subtotal), expected_total(subtotal, settings.EXPRESS_DELIVERY_FEE)}
        if order_input.total in candidates:
            return
        if settings.ENFORCE_ORDER_TOTAL:
            raise InvalidInput(
                f"Order total {order_input.total} does not match items, fees and tax", field="total"
            )
        logger.warning(
            f"Client total {order_input.total} differs from server calculation "
            f"{sorted(candidates)} (subtotal {subtotal}); accepting client value"
        )
