"""
Admin API router: order management, dashboard statistics and user management
"""
import logging
import secrets
from datetime import datetime
from typing import Any, List, Optional
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy import desc
from sqlalchemy.orm import Session
from werkzeug.security import generate_password_hash
from foodorder.core.config import settings
from foodorder.core.database import commit, get_db
from foodorder.core.errors import Conflict, InvalidInput, NotFound
from foodorder.core.sessions import SessionStore, get_session_store
from foodorder.api.auth import get_current_admin
from foodorder.api.orders import get_order_lifecycle, get_order_repository
from foodorder.models.food import FoodItem
from foodorder.models.order import DeliveryTimeUpdate, OrderOut, OrderStats, OrderStatusUpdate
from foodorder.models.user import AdminUserCreate, PasswordResetResponse, User, UserPublic, UserUpdate
from foodorder.repositories.order_repository import OrderRepository
from foodorder.services.lifecycle import OrderLifecycle
from foodorder.services.stats import compute_order_stats

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(get_current_admin)])

# Orders

@router.get("/orders", response_model=List[OrderOut])
async def get_all_orders(
    repo: OrderRepository = Depends(get_order_repository)
) -> Any:
    """All orders, newest first, with no ownership filter"""
    return repo.list_all()

@router.patch("/orders/{order_id}/status", response_model=OrderOut)
async def update_order_status(
    order_id: str,
    status_update: OrderStatusUpdate,
    lifecycle: OrderLifecycle = Depends(get_order_lifecycle)
) -> Any:
    """Move an order along its lifecycle"""
    return lifecycle.transition(order_id, status_update.status)

@router.patch("/orders/{order_id}/delivery-time", response_model=OrderOut)
async def update_order_delivery_time(
    order_id: str,
    update: DeliveryTimeUpdate,
    lifecycle: OrderLifecycle = Depends(get_order_lifecycle)
) -> Any:
    """Change the estimated delivery time (minutes) of an open order"""
    return lifecycle.reestimate(order_id, update.estimated_delivery_time)

@router.delete("/orders/{order_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_order(
    order_id: str,
    current_admin: UserPublic = Depends(get_current_admin),
    repo: OrderRepository = Depends(get_order_repository)
):
    if not repo.delete_by_id(order_id):
        raise NotFound("Order", order_id)
    logger.info(f"Order {order_id} deleted by admin {current_admin.id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.delete("/orders", status_code=status.HTTP_204_NO_CONTENT)
async def reset_orders(
    confirm: Optional[str] = None,
    current_admin: UserPublic = Depends(get_current_admin),
    repo: OrderRepository = Depends(get_order_repository)
):
    """Delete every order. Requires ?confirm=<reset phrase>."""
    if confirm != settings.RESET_CONFIRMATION_PHRASE:
        raise InvalidInput(
            f"Type '{settings.RESET_CONFIRMATION_PHRASE}' to confirm deleting all orders",
            field="confirm"
        )
    deleted = repo.delete_all()
    logger.warning(f"Admin {current_admin.id} reset all orders ({deleted} deleted)")
    return Response(status_code=status.HTTP_204_NO_CONTENT)

# Statistics

@router.get("/stats", response_model=OrderStats)
async def get_stats(
    repo: OrderRepository = Depends(get_order_repository),
    db: Session = Depends(get_db)
) -> Any:
    """Dashboard numbers, recomputed from all orders on each call"""
    orders = repo.list_all()
    user_dates = [row.created_at for row in db.query(User.created_at).filter(User.is_deleted == False)]
    availability = [row.available for row in db.query(FoodItem.available)]
    return compute_order_stats(orders, user_created_at=user_dates, food_availability=availability)

# Users

@router.get("/users", response_model=List[UserPublic])
async def get_users(db: Session = Depends(get_db)) -> Any:
    """Active users, newest first"""
    return db.query(User).filter(User.is_deleted == False).order_by(desc(User.created_at)).all()

@router.post("/users", response_model=UserPublic, status_code=status.HTTP_201_CREATED)
async def create_user(
    user_data: AdminUserCreate,
    db: Session = Depends(get_db)
) -> Any:
    email = user_data.email.strip().lower()
    if db.query(User).filter(User.email == email).first():
        raise Conflict("User already exists with this email")

    user = User(
        email=email,
        first_name=user_data.first_name,
        last_name=user_data.last_name,
        phone=user_data.phone,
        hashed_password=generate_password_hash(user_data.password),
        role=user_data.role,
    )
    db.add(user)
    commit(db, "create_user")
    db.refresh(user)
    return user

def _get_active_user(db: Session, user_id: str) -> User:
    user = db.query(User).filter(User.id == user_id, User.is_deleted == False).first()
    if user is None:
        raise NotFound("User", user_id)
    return user

@router.patch("/users/{user_id}", response_model=UserPublic)
async def update_user(
    user_id: str,
    user_update: UserUpdate,
    db: Session = Depends(get_db),
    sessions: SessionStore = Depends(get_session_store)
) -> Any:
    user = _get_active_user(db, user_id)
    for field, value in user_update.model_dump(exclude_unset=True).items():
        setattr(user, field, value)
    user.updated_at = datetime.now()
    commit(db, "update_user")
    db.refresh(user)

    # Snapshots are taken at login; make the user log in again to see the change
    sessions.invalidate_user(user.id)
    return user

@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: str,
    current_admin: UserPublic = Depends(get_current_admin),
    db: Session = Depends(get_db),
    sessions: SessionStore = Depends(get_session_store)
):
    """Deactivate a user (soft delete) and end their sessions"""
    user = _get_active_user(db, user_id)
    user.is_deleted = True
    user.updated_at = datetime.now()
    commit(db, "delete_user")

    sessions.invalidate_user(user_id)
    logger.info(f"User {user_id} deactivated by admin {current_admin.id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.patch("/users/{user_id}/reset-password", response_model=PasswordResetResponse)
async def reset_password(
    user_id: str,
    db: Session = Depends(get_db),
    sessions: SessionStore = Depends(get_session_store)
) -> Any:
    """Replace the user's password with a temporary one"""
    user = _get_active_user(db, user_id)
    temp_password = secrets.token_urlsafe(6)
    user.hashed_password = generate_password_hash(temp_password)
    user.updated_at = datetime.now()
    commit(db, "reset_password")

    sessions.invalidate_user(user_id)
    return PasswordResetResponse(message="Password reset successfully", temp_password=temp_password)
