# ==============================================================================
# PRODUCT SERVICE
# ==============================================================================
# Catalog products and stock.
#
# RULES:
# - Product names are unique (case-insensitive, trimmed)
# - categoryId must point to an existing category on create AND update
# - Stock never goes negative. buy_product() uses the repository's
#   compare-and-set decrement, so concurrent purchases cannot oversell.
# ==============================================================================

import logging
import math
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Mapping

from api_ecommerce.errors import (
    DuplicateIdentity,
    InsufficientStock,
    InvalidArgument,
    NotFound,
    ReferentialViolation,
)
from api_ecommerce.models.dtos import ProductDto, ProductPage
from api_ecommerce.models.entities import Product, utcnow
from api_ecommerce.performance_logger import profile_function
from api_ecommerce.repositories.interfaces import ICategoryRepository, IProductRepository

logger = logging.getLogger(__name__)


# Integer columns are 32-bit; prices are Numeric(18, 2)
INT_LIMIT = 2 ** 31 - 1
PRICE_LIMIT = Decimal('9999999999999999.99')


def _to_int(value: Any, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise InvalidArgument(f'{field} must be an integer')
    if isinstance(value, str):
        try:
            value = int(value.strip())
        except ValueError:
            raise InvalidArgument(f'{field} must be an integer')
    if abs(value) > INT_LIMIT:
        raise InvalidArgument(f'{field} is out of range')
    return value


def _to_price(value: Any) -> Decimal:
    if isinstance(value, bool) or value is None:
        raise InvalidArgument('price must be a number')
    try:
        price = Decimal(str(value))
        if not price.is_finite() or price < 0:
            raise InvalidArgument('price must be zero or positive')
        if price > PRICE_LIMIT:
            raise InvalidArgument('price is out of range')
        return price.quantize(Decimal('0.01'))
    except (InvalidOperation, ValueError):
        raise InvalidArgument('price must be a number')


class ProductService:
    """
    Product lifecycle, catalog queries and purchases.

    Accepted product fields (camelCase, as sent by the API):
        name, description, price, imgUrl, sku, stockQuantity, categoryId
    """

    def __init__(
        self,
        product_repo: IProductRepository,
        category_repo: ICategoryRepository
    ):
        self.product_repo = product_repo
        self.category_repo = category_repo

    # =========================================================================
    # INPUT
    # =========================================================================

    def parse_fields(self, fields: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Validates a product payload.

        Args:
            fields: Raw payload

        Returns:
            Dict with entity attribute names (snake_case)

        Raises:
            InvalidArgument: Missing or malformed value
        """
        if not isinstance(fields, Mapping):
            raise InvalidArgument('Product payload must be an object')

        name = fields.get('name')
        if not isinstance(name, str) or not name.strip():
            raise InvalidArgument('The Name field is required.')
        name = name.strip()

        sku = fields.get('sku')
        if not isinstance(sku, str) or not sku.strip():
            raise InvalidArgument('The SKU field is required.')

        stock = _to_int(fields.get('stockQuantity', 0), 'stockQuantity')
        if stock < 0:
            raise InvalidArgument('stockQuantity must be zero or positive')

        if fields.get('categoryId') is None:
            raise InvalidArgument('The CategoryId field is required.')

        return {
            'name': name,
            'description': str(fields.get('description') or ''),
            'price': _to_price(fields.get('price', 0)),
            'img_url': str(fields.get('imgUrl') or ''),
            'sku': sku.strip(),
            'stock_quantity': stock,
            'category_id': _to_int(fields.get('categoryId'), 'categoryId'),
        }

    def _check_category(self, category_id: int) -> None:
        if not self.category_repo.category_exists(category_id):
            raise ReferentialViolation(f'Category with id {category_id} does not exist.')

    def _get_entity(self, product_id: int) -> Product:
        product = self.product_repo.get_product(product_id)
        if product is None:
            raise NotFound(f'Product with id {product_id} not found.')
        return product

    # =========================================================================
    # QUERIES
    # =========================================================================

    def get_products(self) -> List[ProductDto]:
        return [ProductDto.from_entity(p) for p in self.product_repo.get_products()]

    def get_product(self, product_id: int) -> ProductDto:
        return ProductDto.from_entity(self._get_entity(product_id))

    def get_products_for_category(self, category_id: int) -> List[ProductDto]:
        if not self.category_repo.category_exists(category_id):
            raise NotFound(f'Category with id {category_id} not found.')
        return [ProductDto.from_entity(p) for p in self.product_repo.get_products_for_category(category_id)]

    def search_products(self, term: str) -> List[ProductDto]:
        return [ProductDto.from_entity(p) for p in self.product_repo.search_products(term or '')]

    def get_products_paged(self, page_number: Any, page_size: Any) -> ProductPage:
        """
        One page of the catalog ordered by name.

        Raises:
            InvalidArgument: page_number or page_size not positive
            NotFound: page_number beyond the last page (an empty catalog
                still answers page 1 with no items)
        """
        page_number = _to_int(page_number, 'pageNumber')
        page_size = _to_int(page_size, 'pageSize')
        if page_number <= 0 or page_size <= 0:
            raise InvalidArgument('pageNumber and pageSize must be greater than zero')

        total = self.product_repo.count_products()
        total_pages = math.ceil(total / page_size)
        if page_number > max(total_pages, 1):
            raise NotFound(f'Page {page_number} not found. Total pages: {total_pages}')

        items = self.product_repo.get_products_slice((page_number - 1) * page_size, page_size)
        return ProductPage(
            page_number=page_number,
            page_size=page_size,
            total_pages=total_pages,
            total_count=total,
            items=[ProductDto.from_entity(p) for p in items],
        )

    # =========================================================================
    # MUTATIONS
    # =========================================================================

    def create_product(self, fields: Mapping[str, Any]) -> ProductDto:
        """
        Creates a product.

        Returns:
            The stored product, re-read with its category (categoryName set)

        Raises:
            InvalidArgument: Bad payload
            DuplicateIdentity: Name already used
            ReferentialViolation: categoryId does not exist
        """
        data = self.parse_fields(fields)
        if self.product_repo.name_exists(data['name']):
            raise DuplicateIdentity('Product already exists!')
        self._check_category(data['category_id'])

        now = utcnow()
        product = self.product_repo.create_product(Product(creation_date=now, update_date=now, **data))
        if product is None:
            raise DuplicateIdentity('Product already exists!')
        product_id = product.product_id
        logger.info("Product %s created (%s)", product_id, data['name'])
        return self.get_product(product_id)

    def update_product(self, product_id: int, fields: Mapping[str, Any]) -> ProductDto:
        """
        Overwrites a product's fields.

        Raises:
            NotFound: Unknown id
            InvalidArgument: Bad payload
            ReferentialViolation: categoryId does not exist
            DuplicateIdentity: Another product already uses the name
        """
        product = self._get_entity(product_id)
        data = self.parse_fields(fields)
        self._check_category(data['category_id'])
        if self.product_repo.name_exists(data['name'], exclude_id=product_id):
            raise DuplicateIdentity('Product already exists!')

        for key, value in data.items():
            setattr(product, key, value)
        product.update_date = utcnow()
        if self.product_repo.update_product(product) is None:
            raise DuplicateIdentity('Product already exists!')
        logger.info("Product %s updated", product_id)
        return self.get_product(product_id)

    def delete_product(self, product_id: int) -> None:
        product = self._get_entity(product_id)
        self.product_repo.delete_product(product)
        logger.info("Product %s deleted", product_id)

    @profile_function(name='Buy product')
    def buy_product(self, name: str, quantity: Any) -> None:
        """
        Removes `quantity` units of the product called `name`.

        The check and the write are one conditional UPDATE; when it loses
        against a concurrent purchase the product is re-checked so the caller
        gets NotFound or InsufficientStock, never a negative stock.

        Raises:
            InvalidArgument: Blank name or quantity <= 0
            NotFound: No product with that name (case-insensitive, trimmed)
            InsufficientStock: quantity > current stock
        """
        if not isinstance(name, str) or not name.strip():
            raise InvalidArgument('Product name is required')
        quantity = _to_int(quantity, 'quantity')
        if quantity <= 0:
            raise InvalidArgument('quantity must be greater than zero')

        product = self.product_repo.get_by_name(name)
        if product is None:
            raise NotFound(f'Product {name.strip()} not found.')

        product_id = product.product_id
        product_name = product.name
        if quantity > product.stock_quantity:
            raise InsufficientStock(
                f'Not enough stock for {product_name}: requested {quantity}, available {product.stock_quantity}'
            )

        if not self.product_repo.decrement_stock(product_id, quantity):
            if not self.product_repo.product_exists(product_id):
                raise NotFound(f'Product {name.strip()} not found.')
            raise InsufficientStock(f'Not enough stock for {product_name}: requested {quantity}')

        logger.info("Sold %s unit(s) of product %s", quantity, product_id)
