# ==============================================================================
# MODELS LAYER
# ==============================================================================
# entities.py -> tables of the relational store (Flask-SQLAlchemy)
# dtos.py     -> dataclasses returned by the services and serialized by routes
# ==============================================================================

from .entities import (
    # Accounts
    User,
    Role,
    UserRole,
    UserRoleLink,
    DEFAULT_ROLE,

    # Catalog
    Category,
    Product,

    # Helpers
    normalize_name,
    utcnow,
)
from .dtos import (
    CategoryDto,
    ProductDto,
    ProductPage,
    UserData,
    LoginResult,
)

__all__ = [
    'User',
    'Role',
    'UserRole',
    'UserRoleLink',
    'DEFAULT_ROLE',
    'Category',
    'Product',
    'normalize_name',
    'utcnow',
    'CategoryDto',
    'ProductDto',
    'ProductPage',
    'UserData',
    'LoginResult',
]
