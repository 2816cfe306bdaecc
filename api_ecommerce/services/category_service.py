# ==============================================================================
# CATEGORY SERVICE
# ==============================================================================

import logging
from typing import List

from api_ecommerce.errors import DuplicateIdentity, InvalidArgument, NotFound
from api_ecommerce.models.dtos import CategoryDto
from api_ecommerce.models.entities import Category, utcnow
from api_ecommerce.repositories.interfaces import ICategoryRepository

logger = logging.getLogger(__name__)


class CategoryService:
    """
    Category lifecycle with name uniqueness and existence checks.

    Deleting a category that products still reference is NOT checked here;
    the store's foreign key settings decide what happens.
    """

    NAME_MIN_LENGTH = 3
    NAME_MAX_LENGTH = 50

    def __init__(self, category_repo: ICategoryRepository):
        self.category_repo = category_repo

    def _validate_name(self, name: str) -> str:
        """
        Returns the trimmed name.

        Raises:
            InvalidArgument: Missing name or length outside 3..50
        """
        if name is None or not str(name).strip():
            raise InvalidArgument('The Name field is required.')
        name = str(name).strip()
        if len(name) < self.NAME_MIN_LENGTH:
            raise InvalidArgument(
                f'The Name field must be at least {self.NAME_MIN_LENGTH} characters long.'
            )
        if len(name) > self.NAME_MAX_LENGTH:
            raise InvalidArgument(
                f'The Name field must not exceed {self.NAME_MAX_LENGTH} characters.'
            )
        return name

    def _get_entity(self, category_id: int) -> Category:
        category = self.category_repo.get_category(category_id)
        if category is None:
            raise NotFound(f'Category with id {category_id} not found.')
        return category

    def get_categories(self, order_by_name: bool = False) -> List[CategoryDto]:
        return [CategoryDto.from_entity(c) for c in self.category_repo.get_categories(order_by_name)]

    def get_category(self, category_id: int) -> CategoryDto:
        return CategoryDto.from_entity(self._get_entity(category_id))

    def category_exists(self, category_id: int) -> bool:
        return self.category_repo.category_exists(category_id)

    def create_category(self, name: str) -> CategoryDto:
        """
        Raises:
            InvalidArgument: Bad name
            DuplicateIdentity: Name already used (case-insensitive, trimmed)
        """
        name = self._validate_name(name)
        if self.category_repo.name_exists(name):
            raise DuplicateIdentity('Category already exists!')

        category = self.category_repo.create_category(Category(name=name, creation_date=utcnow()))
        if category is None:
            raise DuplicateIdentity('Category already exists!')
        logger.info("Category %s created (%s)", category.id, name)
        return CategoryDto.from_entity(category)

    def update_category(self, category_id: int, name: str) -> CategoryDto:
        """
        Renames a category.

        Raises:
            NotFound: Unknown id
            InvalidArgument: Bad name
            DuplicateIdentity: Another category already uses the name
        """
        category = self._get_entity(category_id)
        name = self._validate_name(name)
        if self.category_repo.name_exists(name, exclude_id=category_id):
            raise DuplicateIdentity('Category already exists!')

        category.name = name
        if self.category_repo.update_category(category) is None:
            raise DuplicateIdentity('Category already exists!')
        logger.info("Category %s renamed to %s", category_id, name)
        return CategoryDto.from_entity(category)

    def delete_category(self, category_id: int) -> None:
        category = self._get_entity(category_id)
        self.category_repo.delete_category(category)
        logger.info("Category %s deleted", category_id)
