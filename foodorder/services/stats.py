"""
Admin dashboard statistics, recomputed from the full order set on every call
"""
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional

from foodorder.models.order import (
    FoodCounts, OrderCounts, OrderOut, OrderStats, OrderStatus,
    PopularItem, RevenueSums, UserCounts
)

POPULAR_ITEMS_LIMIT = 5
RECENT_ORDERS_LIMIT = 10


def period_starts(now: datetime) -> Dict[str, datetime]:
    """Lower bounds of the today/weekly/monthly buckets on the server clock."""
    today = now.replace(hour=0, minute=0, second=0, microsecond=0)
    return {
        "today": today,
        "weekly": now - timedelta(days=7),
        "monthly": today.replace(day=1),
    }


def popular_items(orders: Iterable[OrderOut], limit: int = POPULAR_ITEMS_LIMIT) -> List[PopularItem]:
    # Dict keeps first-seen order, and sorted() is stable, so ties stay in that order
    quantities: Dict[str, int] = {}
    for order in orders:
        for item in order.items:
            quantities[item.name] = quantities.get(item.name, 0) + item.quantity

    ranked = sorted(quantities.items(), key=lambda entry: entry[1], reverse=True)
    return [PopularItem(name=name, count=count) for name, count in ranked[:limit]]


def compute_order_stats(
    orders: List[OrderOut],
    now: Optional[datetime] = None,
    user_created_at: Iterable[Optional[datetime]] = (),
    food_availability: Iterable[bool] = (),
) -> OrderStats:
    now = now or datetime.now()
    starts = period_starts(now)

    counts = {name: 0 for name in starts}
    revenue = {name: 0 for name in starts}
    by_status = {status.value: 0 for status in OrderStatus}

    for order in orders:
        for name, start in starts.items():
            if order.created_at >= start:
                counts[name] += 1
                revenue[name] += order.total
        by_status[order.status.value] = by_status.get(order.status.value, 0) + 1

    recent = sorted(orders, key=lambda order: order.created_at, reverse=True)[:RECENT_ORDERS_LIMIT]

    user_dates = list(user_created_at)
    availability = list(food_availability)

    return OrderStats(
        orders=OrderCounts(
            total=len(orders),
            today=counts["today"],
            weekly=counts["weekly"],
            monthly=counts["monthly"],
            by_status=by_status,
            recent=recent,
        ),
        revenue=RevenueSums(
            total=sum(order.total for order in orders),
            today=revenue["today"],
            weekly=revenue["weekly"],
            monthly=revenue["monthly"],
        ),
        users=UserCounts(
            total=len(user_dates),
            new_today=len([d for d in user_dates if d is not None and d >= starts["today"]]),
        ),
        foods=FoodCounts(
            total=len(availability),
            available=len([a for a in availability if a]),
        ),
        popular_items=popular_items(orders),
        last_updated=now,
    )
