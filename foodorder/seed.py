"""
Startup seed: admin account and a sample menu
"""
import logging
from sqlalchemy.orm import Session
from werkzeug.security import generate_password_hash
from foodorder.core.config import settings
from foodorder.core.database import SessionLocal, create_tables
from foodorder.models.food import FoodItem
from foodorder.models.user import User

logger = logging.getLogger(__name__)

SAMPLE_MENU = [
    {
        "name": "Margherita Pizza",
        "description": "Wood-fired pizza with fresh mozzarella, tomato sauce and basil",
        "price": 380,
        "category": "Pizza",
        "image": "https://images.unsplash.com/photo-1513104890138-7c749659a591",
        "is_veg": True,
        "prep_time": "20-25 mins",
        "rating": "4.5",
    },
    {
        "name": "Chicken Biryani",
        "description": "Fragrant basmati rice with tender chicken and aromatic spices",
        "price": 320,
        "category": "Rice",
        "image": "https://images.unsplash.com/photo-1563379091339-03246963d271",
        "is_veg": False,
        "prep_time": "30-35 mins",
        "rating": "4.7",
    },
    {
        "name": "Caesar Salad",
        "description": "Fresh romaine lettuce with parmesan cheese and croutons",
        "price": 180,
        "category": "Salads",
        "image": "https://images.unsplash.com/photo-1546793665-c74683f339c1",
        "is_veg": True,
        "prep_time": "10-15 mins",
        "rating": "4.2",
    },
    {
        "name": "Pad Thai",
        "description": "Stir-fried rice noodles with tamarind and peanuts",
        "price": 280,
        "category": "Noodles",
        "image": "https://images.unsplash.com/photo-1559314809-0f31657def5d",
        "is_veg": True,
        "prep_time": "20-25 mins",
        "rating": "4.4",
    },
    {
        "name": "Chocolate Lava Cake",
        "description": "Warm chocolate cake with a molten center and vanilla ice cream",
        "price": 220,
        "category": "Desserts",
        "image": "https://images.unsplash.com/photo-1606313564200-e75d5e30476c",
        "is_veg": True,
        "prep_time": "15-20 mins",
        "rating": "4.8",
    },
    {
        "name": "Cappuccino",
        "description": "Espresso with steamed milk and foam",
        "price": 120,
        "category": "Beverages",
        "image": "https://images.unsplash.com/photo-1510591509098-f4fdc6d0ff04",
        "is_veg": True,
        "prep_time": "5-10 mins",
        "rating": "4.3",
    },
]

def seed_admin(db: Session) -> bool:
    if db.query(User).filter(User.email == settings.ADMIN_EMAIL).first():
        return False
    db.add(User(
        email=settings.ADMIN_EMAIL,
        first_name="Admin",
        last_name="User",
        hashed_password=generate_password_hash(settings.ADMIN_PASSWORD),
        role="admin",
    ))
    db.commit()
    logger.info(f"Created admin account {settings.ADMIN_EMAIL}")
    return True

def seed_menu(db: Session) -> int:
    if db.query(FoodItem).first():
        return 0
    for entry in SAMPLE_MENU:
        db.add(FoodItem(**entry))
    db.commit()
    logger.info(f"Seeded {len(SAMPLE_MENU)} menu items")
    return len(SAMPLE_MENU)

def init_db():
    """Create tables and, when enabled, the admin account and sample menu"""
    create_tables()
    if not settings.SEED_SAMPLE_DATA:
        return

    db = SessionLocal()
    try:
        seed_admin(db)
        seed_menu(db)
    finally:
        db.close()
