"""
Orders API router
"""
from typing import Any, List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from foodorder.core.database import get_db
from foodorder.core.errors import NotFound
from foodorder.api.auth import get_current_user
from foodorder.models.order import OrderCreate, OrderOut, OrderTracking, PollingPolicy
from foodorder.models.user import UserPublic
from foodorder.repositories.order_repository import OrderRepository, SqlAlchemyOrderRepository
from foodorder.services.lifecycle import OrderLifecycle
from foodorder.services.tracking import authorize_order_read, build_tracking, polling_policy

router = APIRouter(prefix="/orders", tags=["orders"])

def get_order_repository(db: Session = Depends(get_db)) -> OrderRepository:
    return SqlAlchemyOrderRepository(db)

def get_order_lifecycle(repo: OrderRepository = Depends(get_order_repository)) -> OrderLifecycle:
    return OrderLifecycle(repo)

def _get_owned_order(order_id: str, user: UserPublic, repo: OrderRepository) -> OrderOut:
    order = repo.get_by_id(order_id)
    if order is None:
        raise NotFound("Order", order_id)
    authorize_order_read(order, user)
    return order

@router.post("", response_model=OrderOut, status_code=status.HTTP_201_CREATED)
async def create_order(
    order_data: OrderCreate,
    current_user: UserPublic = Depends(get_current_user),
    lifecycle: OrderLifecycle = Depends(get_order_lifecycle)
) -> Any:
    """Place a cash-on-delivery order for the logged-in user"""
    return lifecycle.create(current_user.id, order_data)

@router.get("", response_model=List[OrderOut])
async def get_user_orders(
    current_user: UserPublic = Depends(get_current_user),
    repo: OrderRepository = Depends(get_order_repository)
) -> Any:
    """Get the caller's orders, newest first"""
    return repo.list_by_user(current_user.id)

@router.get("/polling", response_model=PollingPolicy)
async def get_polling_policy() -> Any:
    """How often clients should re-fetch each view"""
    return polling_policy()

@router.get("/{order_id}", response_model=OrderOut)
async def get_order_details(
    order_id: str,
    current_user: UserPublic = Depends(get_current_user),
    repo: OrderRepository = Depends(get_order_repository)
) -> Any:
    """Get one of the caller's orders"""
    return _get_owned_order(order_id, current_user, repo)

@router.get("/{order_id}/tracking", response_model=OrderTracking)
async def get_order_tracking(
    order_id: str,
    current_user: UserPublic = Depends(get_current_user),
    repo: OrderRepository = Depends(get_order_repository)
) -> Any:
    """Order snapshot plus progress and arrival estimate, meant to be polled"""
    order = _get_owned_order(order_id, current_user, repo)
    return build_tracking(order)

@router.post("/{order_id}/cancel", response_model=OrderOut)
async def cancel_order(
    order_id: str,
    current_user: UserPublic = Depends(get_current_user),
    lifecycle: OrderLifecycle = Depends(get_order_lifecycle)
) -> Any:
    """Cancel an order that the kitchen hasn't started yet"""
    return lifecycle.cancel_by_customer(order_id, current_user)
