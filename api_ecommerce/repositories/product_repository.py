# ==============================================================================
# PRODUCT REPOSITORY
# ==============================================================================
# Every read joins the owning Category in the same query (joinedload), so a
# product always comes back with its category populated.
#
# Stock decrements are a single conditional UPDATE:
#   UPDATE products SET stock_quantity = stock_quantity - :q
#   WHERE product_id = :id AND stock_quantity >= :q
# The store applies it atomically per row; rowcount tells whether it won.
# ==============================================================================

from typing import List, Optional

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import joinedload

from api_ecommerce.errors import PersistenceFailure
from api_ecommerce.models.entities import Product, normalize_name
from api_ecommerce.repositories.base import BaseRepository


class ProductRepository(BaseRepository):
    """Persistence for catalog products."""

    def _select(self):
        return (
            select(Product)
            .options(joinedload(Product.category))
            .execution_options(populate_existing=True)
        )

    def _list(self, action: str, stmt) -> List[Product]:
        return self._run(action, lambda: list(self.session.scalars(stmt).unique()))

    # =========================================================================
    # READS
    # =========================================================================

    def get_products(self) -> List[Product]:
        return self._list('listing products', self._select().order_by(Product.name))

    def get_product(self, product_id: int) -> Optional[Product]:
        """
        Gets a product with its category.

        Args:
            product_id: Product id (non-positive ids never match)

        Returns:
            The product or None
        """
        if product_id is None or product_id <= 0:
            return None
        stmt = self._select().where(Product.product_id == product_id)
        return self._run('reading a product', lambda: self.session.scalars(stmt).unique().first())

    def get_by_name(self, name: str) -> Optional[Product]:
        key = normalize_name(name)
        if not key:
            return None
        stmt = self._select().where(Product.name_normalized == key)
        return self._run('reading a product', lambda: self.session.scalars(stmt).unique().first())

    def product_exists(self, product_id: int) -> bool:
        if product_id is None or product_id <= 0:
            return False
        stmt = select(Product.product_id).where(Product.product_id == product_id)
        return self._run('checking products', lambda: self.session.scalars(stmt).first() is not None)

    def name_exists(self, name: str, exclude_id: int = None) -> bool:
        key = normalize_name(name)
        if not key:
            return False
        stmt = select(Product.product_id).where(Product.name_normalized == key)
        if exclude_id is not None:
            stmt = stmt.where(Product.product_id != exclude_id)
        return self._run('checking product names', lambda: self.session.scalars(stmt).first() is not None)

    def get_products_for_category(self, category_id: int) -> List[Product]:
        if category_id is None or category_id <= 0:
            return []
        stmt = self._select().where(Product.category_id == category_id).order_by(Product.name)
        return self._list('listing products of a category', stmt)

    def search_products(self, term: str) -> List[Product]:
        """
        Case-insensitive substring search on name or description.
        A blank term returns every product.
        """
        stmt = self._select()
        key = normalize_name(term)
        if key:
            stmt = stmt.where(
                Product.name.icontains(key, autoescape=True)
                | Product.description.icontains(key, autoescape=True)
            )
        return self._list('searching products', stmt.order_by(Product.name))

    def count_products(self) -> int:
        stmt = select(func.count()).select_from(Product)
        return self._run('counting products', lambda: self.session.scalar(stmt) or 0)

    def get_products_slice(self, offset: int, limit: int) -> List[Product]:
        stmt = self._select().order_by(Product.name, Product.product_id).offset(offset).limit(limit)
        return self._list('paging products', stmt)

    # =========================================================================
    # WRITES
    # =========================================================================

    def create_product(self, product: Product) -> Optional[Product]:
        """
        Inserts a product.

        Returns:
            The product, or None if its name is already taken
        """
        name = product.name
        self.session.add(product)
        if not self._commit_unique(f'saving the record {name}', lambda: self.name_exists(name)):
            return None
        return product

    def update_product(self, product: Product) -> Optional[Product]:
        """Commits changed fields; None if another product already uses the name."""
        product_id, name = product.product_id, product.name
        if not self._commit_unique(
            f'updating the record {name}',
            lambda: self.name_exists(name, exclude_id=product_id),
        ):
            return None
        return product

    def delete_product(self, product: Product) -> None:
        name = product.name
        self.session.delete(product)
        self._commit(f'deleting the record {name}')

    def decrement_stock(self, product_id: int, quantity: int) -> bool:
        """
        Compare-and-set stock decrement.

        Args:
            product_id: Product to update
            quantity: Units to remove (> 0)

        Returns:
            True if the row had enough stock and was updated, False otherwise

        Raises:
            PersistenceFailure: If the store rejects the statement
        """
        stmt = (
            update(Product)
            .where(Product.product_id == product_id, Product.stock_quantity >= quantity)
            .values(stock_quantity=Product.stock_quantity - quantity)
            .execution_options(synchronize_session=False)
        )
        try:
            result = self.session.execute(stmt)
            updated = result.rowcount == 1
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            self._logger().error("Stock update failed for product %s: %s", product_id, e)
            raise PersistenceFailure('Something went wrong when updating stock') from e
        return updated
