"""
Order persistence. The item list is stored as a JSON text blob; this module is
the only place that encodes or decodes it.
"""
import json
import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import desc
from sqlalchemy.orm import Session

from foodorder.core.database import storage_guard
from foodorder.models.order import Order, OrderItem, OrderOut

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = {"status", "estimated_delivery_time", "actual_delivery_time"}


def encode_items(items: List[OrderItem]) -> str:
    return json.dumps([item.model_dump() for item in items])


def decode_items(blob: str) -> List[OrderItem]:
    """Parse a stored item blob. Raises ValueError if it is not a list of items."""
    raw = json.loads(blob)
    if not isinstance(raw, list):
        raise ValueError("item blob is not a list")
    return [OrderItem.model_validate(entry) for entry in raw]


class OrderRepository(ABC):
    @abstractmethod
    def create(self, values: Dict[str, Any]) -> OrderOut:
        pass

    @abstractmethod
    def get_by_id(self, order_id: str) -> Optional[OrderOut]:
        pass

    @abstractmethod
    def list_by_user(self, user_id: str) -> List[OrderOut]:
        pass

    @abstractmethod
    def list_all(self) -> List[OrderOut]:
        pass

    @abstractmethod
    def update_partial(self, order_id: str, fields: Dict[str, Any]) -> Optional[OrderOut]:
        pass

    @abstractmethod
    def delete_by_id(self, order_id: str) -> bool:
        pass

    @abstractmethod
    def delete_all(self) -> int:
        pass


class SqlAlchemyOrderRepository(OrderRepository):

    def __init__(self, db: Session):
        self.db = db

    def _storage(self, operation: str):
        return storage_guard(self.db, operation)

    def create(self, values: Dict[str, Any]) -> OrderOut:
        values = dict(values)
        values["items"] = encode_items(values["items"])
        with self._storage("create"):
            order = Order(**values)
            self.db.add(order)
            self.db.commit()
            self.db.refresh(order)
        return _to_out(order)

    def get_by_id(self, order_id: str) -> Optional[OrderOut]:
        with self._storage("get_by_id"):
            order = self.db.query(Order).filter(Order.id == order_id).first()
        return _to_out(order) if order else None

    def list_by_user(self, user_id: str) -> List[OrderOut]:
        with self._storage("list_by_user"):
            orders = (
                self.db.query(Order)
                .filter(Order.user_id == user_id)
                .order_by(desc(Order.created_at))
                .all()
            )
        return [_to_out(order) for order in orders]

    def list_all(self) -> List[OrderOut]:
        """All orders, newest first."""
        with self._storage("list_all"):
            orders = self.db.query(Order).order_by(desc(Order.created_at)).all()
        return [_to_out(order) for order in orders]

    def update_partial(self, order_id: str, fields: Dict[str, Any]) -> Optional[OrderOut]:
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields cannot be updated: {sorted(unknown)}")

        with self._storage("update_partial"):
            order = self.db.query(Order).filter(Order.id == order_id).first()
            if order is None:
                return None
            for field, value in fields.items():
                setattr(order, field, value)
            order.updated_at = datetime.now()
            self.db.commit()
            self.db.refresh(order)
        return _to_out(order)

    def delete_by_id(self, order_id: str) -> bool:
        with self._storage("delete_by_id"):
            deleted = self.db.query(Order).filter(Order.id == order_id).delete()
            self.db.commit()
        return deleted > 0

    def delete_all(self) -> int:
        with self._storage("delete_all"):
            deleted = self.db.query(Order).delete()
            self.db.commit()
        return deleted


def _to_out(order: Order) -> OrderOut:
    try:
        items = decode_items(order.items)
    except (ValueError, TypeError):
        # One corrupt row must not break listings or stats
        logger.warning(f"Order {order.id} has an undecodable item list")
        items = []

    return OrderOut(
        id=order.id,
        user_id=order.user_id,
        items=items,
        total=order.total,
        status=order.status,
        delivery_address=order.delivery_address,
        payment_method=order.payment_method,
        customer_name=order.customer_name,
        customer_phone=order.customer_phone,
        estimated_delivery_time=order.estimated_delivery_time,
        actual_delivery_time=order.actual_delivery_time,
        created_at=order.created_at,
        updated_at=order.updated_at,
    )
