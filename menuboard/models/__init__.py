"""
SQLAlchemy models for Menuboard.
"""
# Core entities
from menuboard.models.user import User
from menuboard.models.restaurant import Restaurant

# Menu content
from menuboard.models.item import Item
from menuboard.models.menu import Menu, MenuEntry

# Screens
from menuboard.models.display import Display


__all__ = [
    # Core
    "User",
    "Restaurant",
    # Menu content
    "Item",
    "Menu",
    "MenuEntry",
    # Screens
    "Display",
]
