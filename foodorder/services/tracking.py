"""
Order tracking for polling clients.

Clients re-read an order at a fixed interval; every read returns the full
current snapshot plus values derived from it here. Nothing in this module is
persisted, so a new delivery estimate changes the reported arrival time
immediately.
"""
import math
from datetime import datetime, timedelta
from typing import List, Optional

from foodorder.core.config import settings
from foodorder.core.errors import Forbidden
from foodorder.models.order import OrderOut, OrderStatus, OrderTracking, PollingPolicy, TrackingStep
from foodorder.models.user import UserPublic
from foodorder.services.lifecycle import is_terminal

STATUS_STEPS: List[OrderStatus] = [
    OrderStatus.CONFIRMED,
    OrderStatus.PREPARING,
    OrderStatus.ON_THE_WAY,
    OrderStatus.DELIVERED,
]

STEP_TEXT = {
    OrderStatus.CONFIRMED: ("Order Confirmed", "Your order has been received and confirmed"),
    OrderStatus.PREPARING: ("Preparing", "Your food is being prepared"),
    OrderStatus.ON_THE_WAY: ("On the Way", "Your order is on its way to you"),
    OrderStatus.DELIVERED: ("Delivered", "Order delivered successfully"),
}


def progress_index(status: OrderStatus) -> Optional[int]:
    """Position of the status in STATUS_STEPS, None for a cancelled order."""
    if status == OrderStatus.CANCELLED:
        return None
    return STATUS_STEPS.index(status)


def estimated_arrival(order: OrderOut) -> Optional[datetime]:
    if order.estimated_delivery_time is None:
        return None
    return order.created_at + timedelta(minutes=order.estimated_delivery_time)


def minutes_remaining(order: OrderOut, now: Optional[datetime] = None) -> Optional[int]:
    arrival = estimated_arrival(order)
    if arrival is None or is_terminal(order.status):
        return None
    now = now or datetime.now()
    seconds = (arrival - now).total_seconds()
    return max(0, math.ceil(seconds / 60))


def authorize_order_read(order: OrderOut, user: UserPublic):
    """Customers may only see their own orders."""
    if order.user_id != user.id:
        raise Forbidden()


def polling_policy() -> PollingPolicy:
    return PollingPolicy(
        tracking_seconds=settings.TRACKING_POLL_SECONDS,
        order_list_seconds=settings.ORDER_LIST_POLL_SECONDS,
        admin_orders_seconds=settings.ADMIN_ORDERS_POLL_SECONDS,
        admin_stats_seconds=settings.ADMIN_STATS_POLL_SECONDS,
    )


def build_tracking(order: OrderOut, now: Optional[datetime] = None) -> OrderTracking:
    index = progress_index(order.status)
    terminal = is_terminal(order.status)

    steps = []
    for position, status in enumerate(STATUS_STEPS):
        label, description = STEP_TEXT[status]
        steps.append(TrackingStep(
            status=status,
            label=label,
            description=description,
            completed=index is not None and position <= index,
            current=position == index,
        ))

    return OrderTracking(
        order=order,
        steps=steps,
        progress_index=index,
        total_steps=len(STATUS_STEPS),
        halted=index is None,
        is_terminal=terminal,
        estimated_arrival=estimated_arrival(order),
        minutes_remaining=minutes_remaining(order, now),
        # Terminal orders never change again, so clients can stop polling
        poll_interval_seconds=None if terminal else settings.TRACKING_POLL_SECONDS,
    )
