"""
Seed a demo owner, restaurant, items, menu and a paired-ready display.

Usage: python -m menuboard.scripts.seed_demo
"""
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from menuboard.core.config import get_settings
from menuboard.core.security import hash_password
from menuboard.db.base import Base
from menuboard.models.display import Display
from menuboard.models.item import Item
from menuboard.models.menu import Menu
from menuboard.models.restaurant import Restaurant
from menuboard.models.user import User

DEMO_EMAIL = "admin@menuboard.dev"
DEMO_PASSWORD = "password123"
DEMO_PAIRING_CODE = "DEMO123"

DEMO_ITEMS = [
    ("Classic Burger", "Juicy beef burger with fresh lettuce, tomato, and special sauce", 12.99, "Main Course"),
    ("Margherita Pizza", "Traditional pizza with tomato sauce, mozzarella, and basil", 16.99, "Main Course"),
    ("Caesar Salad", "Fresh romaine lettuce with Caesar dressing, croutons, and parmesan", 8.99, "Appetizer"),
    ("Chocolate Milkshake", "Rich and creamy chocolate milkshake with whipped cream", 5.99, "Beverages"),
    ("French Fries", "Crispy golden fries served with ketchup", 4.99, "Sides"),
]


def seed(db) -> Display:
    print("Checking for demo user...")
    user = db.query(User).filter(User.email == DEMO_EMAIL).first()
    if not user:
        print("Creating demo user and restaurant...")
        user = User(email=DEMO_EMAIL, hashed_password=hash_password(DEMO_PASSWORD))
        user.restaurant = Restaurant(name="Demo Restaurant")
        db.add(user)
        db.commit()
        db.refresh(user)
    else:
        print("Demo user already exists.")

    restaurant = user.restaurant

    items = []
    for name, description, price, category in DEMO_ITEMS:
        item = db.query(Item).filter(Item.restaurant_id == restaurant.id, Item.name == name).first()
        if not item:
            item = Item(
                restaurant_id=restaurant.id,
                name=name,
                description=description,
                price=price,
                category=category,
                is_available=True,
            )
            db.add(item)
        items.append(item)
    db.commit()

    menu = db.query(Menu).filter(Menu.restaurant_id == restaurant.id, Menu.name == "Lunch Menu").first()
    if not menu:
        print("Creating demo menu...")
        menu = Menu(restaurant_id=restaurant.id, name="Lunch Menu", description="Our delicious lunch options")
        menu.set_items(items)
        db.add(menu)
        db.commit()

    display = db.query(Display).filter(Display.pairing_code == DEMO_PAIRING_CODE).first()
    if not display:
        print("Creating demo display...")
        display = Display(
            restaurant_id=restaurant.id,
            name="Kitchen Display",
            pairing_code=DEMO_PAIRING_CODE,
            current_menu_id=menu.id,
        )
        db.add(display)
        db.commit()

    return display


def main():
    settings = get_settings()
    engine = create_engine(settings.DATABASE_URL)
    Base.metadata.create_all(bind=engine)
    Session = sessionmaker(bind=engine)

    with Session() as db:
        seed(db)

    print("Seeding complete!")
    print(f"Login with: {DEMO_EMAIL} / {DEMO_PASSWORD}")
    print(f"Pair a display with code: {DEMO_PAIRING_CODE}")


if __name__ == "__main__":
    main()
