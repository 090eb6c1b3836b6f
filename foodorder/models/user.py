"""
User data models and database schemas
"""
import uuid
from datetime import datetime
from typing import Optional
from sqlalchemy import Column, String, Boolean, DateTime, Text
from sqlalchemy.orm import relationship
from pydantic import BaseModel, ConfigDict, Field
from foodorder.core.database import Base

# Database Models

class User(Base):
    """User database model"""
    __tablename__ = "users"

    id = Column(String(50), primary_key=True, index=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(255), unique=True, index=True, nullable=False)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    hashed_password = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default="customer")  # customer, admin
    phone = Column(String(20))
    profile_picture = Column(Text)
    is_deleted = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    # Relationships
    orders = relationship("Order", back_populates="user")

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

# Pydantic Models for API

class UserBase(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    phone: Optional[str] = None

class UserCreate(UserBase):
    password: str = Field(..., min_length=6)

class AdminUserCreate(UserCreate):
    role: str = Field("customer", pattern="^(customer|admin)$")

class UserLogin(BaseModel):
    email: str
    password: str

class UserUpdate(BaseModel):
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    phone: Optional[str] = None
    profile_picture: Optional[str] = None

class UserPublic(UserBase):
    """Password-free snapshot of a user, also what a session holds"""
    id: str
    role: str
    profile_picture: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

class AuthResponse(BaseModel):
    session_id: str
    user: UserPublic

class PasswordResetResponse(BaseModel):
    message: str
    temp_password: str
