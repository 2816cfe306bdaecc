# ==============================================================================
# TRANSFER OBJECTS - What the API returns
# ==============================================================================
# Entities never leave the service layer. Services map them into these
# dataclasses and routes serialize them with to_dict() (camelCase keys).
# Secrets and password hashes have no field here on purpose.
# ==============================================================================

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from api_ecommerce.models.entities import Category, Product, User


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass
class CategoryDto:
    id: int
    name: str
    creation_date: Optional[datetime] = None

    @classmethod
    def from_entity(cls, category: Category) -> 'CategoryDto':
        return cls(id=category.id, name=category.name, creation_date=category.creation_date)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'creationDate': _iso(self.creation_date),
        }


@dataclass
class ProductDto:
    """
    Product projection.

    category_name is copied from the Category row loaded together with the
    product (never resolved lazily).
    """
    product_id: int
    name: str
    description: str
    price: Decimal
    img_url: str
    sku: str
    stock_quantity: int
    creation_date: Optional[datetime]
    update_date: Optional[datetime]
    category_id: int
    category_name: str = ''

    @classmethod
    def from_entity(cls, product: Product) -> 'ProductDto':
        return cls(
            product_id=product.product_id,
            name=product.name,
            description=product.description or '',
            price=Decimal(product.price or 0),
            img_url=product.img_url or '',
            sku=product.sku,
            stock_quantity=product.stock_quantity,
            creation_date=product.creation_date,
            update_date=product.update_date,
            category_id=product.category_id,
            category_name=product.category.name if product.category else '',
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'productId': self.product_id,
            'name': self.name,
            'description': self.description,
            'price': float(self.price),
            'imgUrl': self.img_url,
            'sku': self.sku,
            'stockQuantity': self.stock_quantity,
            'creationDate': _iso(self.creation_date),
            'updateDate': _iso(self.update_date),
            'categoryId': self.category_id,
            'categoryName': self.category_name,
        }


@dataclass
class ProductPage:
    page_number: int
    page_size: int
    total_pages: int
    total_count: int
    items: List[ProductDto] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'pageNumber': self.page_number,
            'pageSize': self.page_size,
            'totalPages': self.total_pages,
            'totalCount': self.total_count,
            'items': [item.to_dict() for item in self.items],
        }


@dataclass
class UserData:
    """Public projection of an account."""
    id: int
    username: str
    name: str
    role: Optional[str]

    @classmethod
    def from_entity(cls, user: User) -> 'UserData':
        return cls(id=user.id, username=user.username, name=user.name, role=user.primary_role)

    def to_dict(self) -> Dict[str, Any]:
        return {'id': self.id, 'username': self.username, 'name': self.name, 'role': self.role}


@dataclass
class LoginResult:
    """
    Outcome of a login attempt.

    Failures are reported here (empty token, no user, message set) instead
    of raising, so callers can tell a bad username from a bad password
    without exception handling.
    """
    token: str = ''
    user: Optional[UserData] = None
    message: str = ''

    @property
    def ok(self) -> bool:
        return bool(self.token) and self.user is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'token': self.token,
            'user': self.user.to_dict() if self.user else None,
            'message': self.message,
        }
