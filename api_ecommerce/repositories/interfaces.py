# ==============================================================================
# REPOSITORY INTERFACES
# ==============================================================================
# Services depend on these protocols, not on the SQLAlchemy implementations.
# Tests may hand a service any object that satisfies them.
# ==============================================================================

from typing import List, Optional, Protocol, runtime_checkable

from api_ecommerce.models.entities import Category, Product, User


@runtime_checkable
class IUserRepository(Protocol):
    """Accounts and the role registry."""

    def get_user(self, user_id: int) -> Optional[User]:
        ...

    def get_users(self) -> List[User]:
        ...

    def get_by_username(self, username: str) -> Optional[User]:
        ...

    def is_unique_user(self, username: str) -> bool:
        ...

    def create_user(self, username: str, name: str, password_hash: str, role_name: str) -> Optional[User]:
        """Account + role assignment in one transaction; None if the handle is taken."""
        ...


@runtime_checkable
class ICategoryRepository(Protocol):

    def get_categories(self, order_by_name: bool = False) -> List[Category]:
        ...

    def get_category(self, category_id: int) -> Optional[Category]:
        ...

    def category_exists(self, category_id: int) -> bool:
        ...

    def name_exists(self, name: str, exclude_id: int = None) -> bool:
        ...

    def create_category(self, category: Category) -> Optional[Category]:
        ...

    def update_category(self, category: Category) -> Optional[Category]:
        ...

    def delete_category(self, category: Category) -> None:
        ...


@runtime_checkable
class IProductRepository(Protocol):

    def get_products(self) -> List[Product]:
        ...

    def get_product(self, product_id: int) -> Optional[Product]:
        ...

    def get_by_name(self, name: str) -> Optional[Product]:
        ...

    def product_exists(self, product_id: int) -> bool:
        ...

    def name_exists(self, name: str, exclude_id: int = None) -> bool:
        ...

    def get_products_for_category(self, category_id: int) -> List[Product]:
        ...

    def search_products(self, term: str) -> List[Product]:
        ...

    def count_products(self) -> int:
        ...

    def get_products_slice(self, offset: int, limit: int) -> List[Product]:
        ...

    def create_product(self, product: Product) -> Optional[Product]:
        ...

    def update_product(self, product: Product) -> Optional[Product]:
        ...

    def delete_product(self, product: Product) -> None:
        ...

    def decrement_stock(self, product_id: int, quantity: int) -> bool:
        """Conditional decrement; False when stock was insufficient at write time."""
        ...
