# ==============================================================================
# REPOSITORY LAYER - Access to the relational store
# ==============================================================================
# STRUCTURE:
# ├── interfaces.py           → Protocols the services depend on
# ├── base.py                 → Session access and error wrapping
# ├── user_repository.py      → users, roles, user_roles
# ├── category_repository.py  → categories
# └── product_repository.py   → products (joined with their category)
# ==============================================================================

from .interfaces import (
    IUserRepository,
    ICategoryRepository,
    IProductRepository,
)

from .base import BaseRepository
from .user_repository import UserRepository
from .category_repository import CategoryRepository
from .product_repository import ProductRepository

__all__ = [
    # Interfaces
    'IUserRepository',
    'ICategoryRepository',
    'IProductRepository',

    # Implementations
    'BaseRepository',
    'UserRepository',
    'CategoryRepository',
    'ProductRepository',
]
