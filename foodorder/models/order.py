"""
Order management data models and database schemas
"""
import enum
import json
import uuid
from datetime import datetime
from typing import Dict, List, Optional
from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey
from sqlalchemy.orm import relationship
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from foodorder.core.database import Base

# Enums

class OrderStatus(str, enum.Enum):
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    ON_THE_WAY = "on_the_way"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"

class PaymentMethod(str, enum.Enum):
    CASH = "cash"  # cash on delivery is the only method offered

# Database Models

class Order(Base):
    """Order database model"""
    __tablename__ = "orders"

    id = Column(String(50), primary_key=True, index=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(50), ForeignKey("users.id"), index=True)

    items = Column(Text, nullable=False)  # JSON list of {name, quantity, price}
    total = Column(Integer, nullable=False)
    status = Column(String(20), nullable=False, default=OrderStatus.CONFIRMED.value)

    # Delivery and contact details
    delivery_address = Column(Text, nullable=False)
    payment_method = Column(String(20), nullable=False)
    customer_name = Column(String(255))
    customer_phone = Column(String(20))

    # Minutes
    estimated_delivery_time = Column(Integer, default=35)
    actual_delivery_time = Column(Integer)

    created_at = Column(DateTime, default=datetime.now, index=True)
    updated_at = Column(DateTime, default=datetime.now)

    # Relationships
    user = relationship("User", back_populates="orders")

# Pydantic Models for API

class CamelModel(BaseModel):
    """Order payloads use camelCase keys on the wire; snake_case is accepted too"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

class OrderItem(CamelModel):
    """One cart line, priced at the moment the order was placed"""
    name: str = Field(..., min_length=1)
    quantity: int = Field(..., ge=1)
    price: int = Field(..., ge=0)

    @property
    def line_total(self) -> int:
        return self.price * self.quantity

class OrderCreate(CamelModel):
    items: List[OrderItem]
    total: int = Field(..., ge=0)
    delivery_address: str
    payment_method: PaymentMethod
    customer_name: str
    customer_phone: str
    estimated_delivery_time: Optional[int] = Field(None, gt=0)

    @field_validator("items", mode="before")
    @classmethod
    def parse_serialized_items(cls, value):
        # Browsers send the cart as a JSON string
        if isinstance(value, str):
            try:
                return json.loads(value)
            except ValueError:
                raise ValueError("items must be a JSON list")
        return value

class OrderOut(CamelModel):
    id: str
    user_id: Optional[str] = None
    items: List[OrderItem]
    total: int
    status: OrderStatus
    delivery_address: str
    payment_method: str
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    estimated_delivery_time: Optional[int] = None
    actual_delivery_time: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    @property
    def subtotal(self) -> int:
        return sum(item.line_total for item in self.items)

# Request/Response Models

class OrderStatusUpdate(CamelModel):
    status: str

class DeliveryTimeUpdate(CamelModel):
    estimated_delivery_time: int

class TrackingStep(CamelModel):
    status: OrderStatus
    label: str
    description: str
    completed: bool
    current: bool

class OrderTracking(CamelModel):
    order: OrderOut
    steps: List[TrackingStep]
    progress_index: Optional[int] = None
    total_steps: int
    halted: bool
    is_terminal: bool
    estimated_arrival: Optional[datetime] = None
    minutes_remaining: Optional[int] = None
    poll_interval_seconds: Optional[int] = None

class PollingPolicy(CamelModel):
    tracking_seconds: int
    order_list_seconds: int
    admin_orders_seconds: int
    admin_stats_seconds: int

class PopularItem(CamelModel):
    name: str
    count: int

class OrderCounts(CamelModel):
    total: int
    today: int
    weekly: int
    monthly: int
    by_status: Dict[str, int]
    recent: List[OrderOut]

class RevenueSums(CamelModel):
    total: int
    today: int
    weekly: int
    monthly: int

class UserCounts(CamelModel):
    total: int
    new_today: int

class FoodCounts(CamelModel):
    total: int
    available: int

class OrderStats(CamelModel):
    orders: OrderCounts
    revenue: RevenueSums
    users: UserCounts
    foods: FoodCounts
    popular_items: List[PopularItem]
    last_updated: datetime
