"""
Food catalog API router
"""
from typing import Any, List, Optional
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from foodorder.core.database import commit, get_db
from foodorder.core.errors import NotFound
from foodorder.api.auth import get_current_admin
from foodorder.models.food import FoodItem, FoodItemCreate, FoodItemOut, FoodItemUpdate

router = APIRouter(tags=["food-catalog"])

def _get_food_item(db: Session, food_id: str) -> FoodItem:
    food_item = db.query(FoodItem).filter(FoodItem.id == food_id).first()
    if not food_item:
        raise NotFound("Food item", food_id)
    return food_item

@router.get("/foods", response_model=List[FoodItemOut])
async def get_food_items(
    category: Optional[str] = None,
    veg_only: bool = False,
    db: Session = Depends(get_db)
) -> Any:
    """Menu items currently available, optionally filtered"""
    query = db.query(FoodItem).filter(FoodItem.available == True)

    if category:
        query = query.filter(FoodItem.category == category)

    if veg_only:
        query = query.filter(FoodItem.is_veg == True)

    return query.order_by(FoodItem.name).all()

@router.get("/foods/{food_id}", response_model=FoodItemOut)
async def get_food_item(food_id: str, db: Session = Depends(get_db)) -> Any:
    return _get_food_item(db, food_id)

# Admin endpoints

@router.post(
    "/admin/foods",
    response_model=FoodItemOut,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(get_current_admin)]
)
async def create_food_item(food_data: FoodItemCreate, db: Session = Depends(get_db)) -> Any:
    food_item = FoodItem(**food_data.model_dump())
    db.add(food_item)
    commit(db, "create_food_item")
    db.refresh(food_item)
    return food_item

@router.patch("/admin/foods/{food_id}", response_model=FoodItemOut, dependencies=[Depends(get_current_admin)])
async def update_food_item(
    food_id: str,
    food_update: FoodItemUpdate,
    db: Session = Depends(get_db)
) -> Any:
    food_item = _get_food_item(db, food_id)
    for field, value in food_update.model_dump(exclude_unset=True).items():
        setattr(food_item, field, value)
    commit(db, "update_food_item")
    db.refresh(food_item)
    return food_item

@router.delete("/admin/foods/{food_id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=[Depends(get_current_admin)])
async def delete_food_item(food_id: str, db: Session = Depends(get_db)):
    food_item = _get_food_item(db, food_id)
    db.delete(food_item)
    commit(db, "delete_food_item")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
