# ==============================================================================
# DOMAIN ENTITIES - Persistent tables
# ==============================================================================
# Each entity is a row of the relational store (Flask-SQLAlchemy models).
# Uniqueness on users is backed by a normalized column with a unique index;
# product and category names get the same treatment through name_normalized,
# kept in step with name by a validator.
# ==============================================================================

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from sqlalchemy.orm import validates

from api_ecommerce.extensions import db


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def normalize_name(value: Optional[str]) -> str:
    """Comparison key for handles and catalog names: trimmed, lower-case."""
    return (value or '').strip().lower()


# ==============================================================================
# ENUMERATIONS
# ==============================================================================

class UserRole(str, Enum):
    """Roles accepted by the system."""
    ADMIN = "Admin"
    USER = "User"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional['UserRole']:
        """Case-insensitive lookup; None when the label is unknown."""
        key = normalize_name(value)
        for role in cls:
            if role.value.lower() == key:
                return role
        return None


DEFAULT_ROLE = UserRole.USER


# ==============================================================================
# ACCOUNTS
# ==============================================================================

class Role(db.Model):
    """Role registry. Rows are created on demand by 'ensure role exists'."""

    __tablename__ = 'roles'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(50), unique=True, nullable=False)

    def __repr__(self) -> str:
        return f"<Role {self.name}>"


class UserRoleLink(db.Model):
    """Assignment of a role to an account. Assignment order is the claim order."""

    __tablename__ = 'user_roles'
    __table_args__ = (db.UniqueConstraint('user_id', 'role_id', name='uq_user_roles_user_role'),)

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    role_id = db.Column(db.Integer, db.ForeignKey('roles.id'), nullable=False)
    assigned_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    role = db.relationship('Role', lazy='joined')


class User(db.Model):
    """
    Registered account.

    Attributes:
        username: Login handle as entered (trimmed)
        username_normalized: Lower-case trimmed handle, unique
        name: Display name
        password_hash: werkzeug hash, the plain secret is never stored
    """

    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(150), nullable=False)
    username_normalized = db.Column(db.String(150), unique=True, nullable=False, index=True)
    name = db.Column(db.String(150), nullable=False, default='')
    password_hash = db.Column(db.String(255), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    role_links = db.relationship(
        'UserRoleLink',
        order_by='UserRoleLink.id',
        lazy='selectin',
        cascade='all, delete-orphan',
    )

    @property
    def role_names(self) -> List[str]:
        return [link.role.name for link in self.role_links]

    @property
    def primary_role(self) -> Optional[str]:
        """First assigned role; the only one embedded in a session token."""
        names = self.role_names
        return names[0] if names else None

    def __repr__(self) -> str:
        return f"<User {self.username}>"


# ==============================================================================
# CATALOG
# ==============================================================================

class Category(db.Model):
    __tablename__ = 'categories'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(50), nullable=False)
    name_normalized = db.Column(db.String(50), unique=True, nullable=False, index=True)
    creation_date = db.Column(db.DateTime, nullable=False, default=utcnow)

    @validates('name')
    def _sync_name_key(self, key, value):
        self.name_normalized = normalize_name(value)
        return value

    def __repr__(self) -> str:
        return f"<Category {self.id} {self.name}>"


class Product(db.Model):
    """
    Catalog product.

    stock_quantity is guarded twice: the services refuse to go below zero
    and the table carries a CHECK constraint.
    """

    __tablename__ = 'products'
    __table_args__ = (
        db.CheckConstraint('stock_quantity >= 0', name='ck_products_stock_non_negative'),
        db.CheckConstraint('price >= 0', name='ck_products_price_non_negative'),
    )

    product_id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    name_normalized = db.Column(db.String(200), unique=True, nullable=False, index=True)
    description = db.Column(db.Text, nullable=False, default='')
    price = db.Column(db.Numeric(18, 2), nullable=False, default=0)
    img_url = db.Column(db.String(500), nullable=False, default='')
    sku = db.Column(db.String(100), nullable=False)
    stock_quantity = db.Column(db.Integer, nullable=False, default=0)
    creation_date = db.Column(db.DateTime, nullable=False, default=utcnow)
    update_date = db.Column(db.DateTime, nullable=True)

    category_id = db.Column(db.Integer, db.ForeignKey('categories.id'), nullable=False)
    # Loaded explicitly by the repository (joinedload), never lazily.
    category = db.relationship('Category', lazy='raise')

    @validates('name')
    def _sync_name_key(self, key, value):
        self.name_normalized = normalize_name(value)
        return value

    def __repr__(self) -> str:
        return f"<Product {self.product_id} {self.name}>"
