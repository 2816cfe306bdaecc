# ==============================================================================
# SERVICE LAYER - Business logic
# ==============================================================================
# PRINCIPLES:
# 1. Services orchestrate repositories and enforce the business rules
# 2. Routes only translate request → service → response
# 3. Services raise api_ecommerce.errors exceptions; routes never catch them
#
# STRUCTURE:
# ├── token_service.py    → Signed session tokens (issue / verify / authorize)
# ├── user_service.py     → Registration, login, account queries
# ├── category_service.py → Category lifecycle
# └── product_service.py  → Product lifecycle, queries, purchases
# ==============================================================================

from api_ecommerce.services.token_service import TokenService
from api_ecommerce.services.user_service import UserService
from api_ecommerce.services.category_service import CategoryService
from api_ecommerce.services.product_service import ProductService

__all__ = [
    'TokenService',
    'UserService',
    'CategoryService',
    'ProductService',
]
