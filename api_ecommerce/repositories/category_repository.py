# ==============================================================================
# CATEGORY REPOSITORY
# ==============================================================================

from typing import List, Optional

from sqlalchemy import select

from api_ecommerce.models.entities import Category, normalize_name
from api_ecommerce.repositories.base import BaseRepository


class CategoryRepository(BaseRepository):
    """Persistence for catalog categories."""

    def get_categories(self, order_by_name: bool = False) -> List[Category]:
        """
        Lists every category.

        Args:
            order_by_name: Sort by name instead of id

        Returns:
            List of categories
        """
        order = Category.name if order_by_name else Category.id
        stmt = select(Category).order_by(order)
        return self._run('listing categories', lambda: list(self.session.scalars(stmt)))

    def get_category(self, category_id: int) -> Optional[Category]:
        if category_id is None or category_id <= 0:
            return None
        return self._run('reading a category', lambda: self.session.get(Category, category_id))

    def category_exists(self, category_id: int) -> bool:
        return self.get_category(category_id) is not None

    def name_exists(self, name: str, exclude_id: int = None) -> bool:
        """
        Checks whether a category already uses this name (case-insensitive, trimmed).

        Args:
            name: Candidate name
            exclude_id: Category to ignore (the one being renamed)
        """
        key = normalize_name(name)
        if not key:
            return False
        stmt = select(Category.id).where(Category.name_normalized == key)
        if exclude_id is not None:
            stmt = stmt.where(Category.id != exclude_id)
        return self._run('checking category names', lambda: self.session.scalars(stmt).first() is not None)

    def create_category(self, category: Category) -> Optional[Category]:
        """
        Inserts a category.

        Returns:
            The category, or None if its name is already taken
        """
        name = category.name
        self.session.add(category)
        if not self._commit_unique(f'saving the record {name}', lambda: self.name_exists(name)):
            return None
        return category

    def update_category(self, category: Category) -> Optional[Category]:
        """Commits a rename; None if another category already uses the name."""
        category_id, name = category.id, category.name
        if not self._commit_unique(
            f'updating the record {name}',
            lambda: self.name_exists(name, exclude_id=category_id),
        ):
            return None
        return category

    def delete_category(self, category: Category) -> None:
        name = category.name
        self.session.delete(category)
        self._commit(f'deleting the record {name}')
