"""
Food catalog data models and database schemas
"""
import uuid
from datetime import datetime
from typing import Optional
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Text
from pydantic import BaseModel, ConfigDict, Field
from foodorder.core.database import Base

# Database Models

class FoodItem(Base):
    """Food item database model"""
    __tablename__ = "food_items"

    id = Column(String(50), primary_key=True, index=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    price = Column(Integer, nullable=False)  # whole rupees
    category = Column(String(100), nullable=False)
    image = Column(String(500), nullable=False)
    is_veg = Column(Boolean, nullable=False, default=True)
    prep_time = Column(String(50), nullable=False, default="15-20 mins")
    rating = Column(String(5), nullable=False, default="4.0")
    available = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

# Pydantic Models for API

class FoodItemBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str
    price: int = Field(..., ge=0)
    category: str
    image: str
    is_veg: bool = True
    prep_time: str = "15-20 mins"
    rating: str = "4.0"
    available: bool = True

class FoodItemCreate(FoodItemBase):
    pass

class FoodItemUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    price: Optional[int] = Field(None, ge=0)
    category: Optional[str] = None
    image: Optional[str] = None
    is_veg: Optional[bool] = None
    prep_time: Optional[str] = None
    rating: Optional[str] = None
    available: Optional[bool] = None

class FoodItemOut(FoodItemBase):
    id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
