# ==============================================================================
# USER REPOSITORY
# ==============================================================================
# Accounts, the role registry and role assignments.
# Handles are compared through users.username_normalized (lower + trim),
# which carries a unique index.
# ==============================================================================

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from api_ecommerce.errors import PersistenceFailure
from api_ecommerce.models.entities import Role, User, UserRoleLink, normalize_name
from api_ecommerce.repositories.base import BaseRepository


class UserRepository(BaseRepository):
    """Persistence for accounts and roles."""

    # One retry covers losing the race to create a missing role row.
    CREATE_ATTEMPTS = 2

    def get_user(self, user_id: int) -> Optional[User]:
        if user_id is None or user_id <= 0:
            return None
        return self._run('reading a user', lambda: self.session.get(User, user_id))

    def get_users(self) -> List[User]:
        """All accounts ordered by username."""
        stmt = select(User).order_by(User.username)
        return self._run('listing users', lambda: list(self.session.scalars(stmt)))

    def get_by_username(self, username: str) -> Optional[User]:
        """
        Looks up an account by handle (case-insensitive, trimmed).

        Args:
            username: Handle as typed by the caller

        Returns:
            The account or None
        """
        key = normalize_name(username)
        if not key:
            return None
        stmt = select(User).where(User.username_normalized == key)
        return self._run('reading a user', lambda: self.session.scalars(stmt).first())

    def is_unique_user(self, username: str) -> bool:
        return self.get_by_username(username) is None

    def get_role(self, name: str) -> Optional[Role]:
        stmt = select(Role).where(Role.name == name)
        return self.session.scalars(stmt).first()

    def _ensure_role(self, name: str) -> Role:
        """Returns the role row, adding it to the current transaction if absent."""
        role = self.get_role(name)
        if role is None:
            role = Role(name=name)
            self.session.add(role)
            self.session.flush()
        return role

    def create_user(
        self,
        username: str,
        name: str,
        password_hash: str,
        role_name: str
    ) -> Optional[User]:
        """
        Creates an account and assigns its role in ONE transaction.

        The role row is created if it does not exist yet, inside the same
        transaction as the account, so a failure never leaves an orphaned
        role or an account without its role.

        Args:
            username: Trimmed handle
            name: Display name
            password_hash: Already hashed secret
            role_name: Canonical role label

        Returns:
            The created account, or None if the handle is already taken

        Raises:
            PersistenceFailure: If the store rejects the write
        """
        for _ in range(self.CREATE_ATTEMPTS):
            try:
                role = self._ensure_role(role_name)
                user = User(
                    username=username,
                    username_normalized=normalize_name(username),
                    name=name,
                    password_hash=password_hash,
                )
                user.role_links.append(UserRoleLink(role=role))
                self.session.add(user)
                self.session.commit()
                return user
            except IntegrityError:
                self.session.rollback()
                if not self.is_unique_user(username):
                    return None
                self._logger().info("Role '%s' created concurrently, retrying", role_name)
            except SQLAlchemyError as e:
                self.session.rollback()
                self._logger().error("Store rejected user %s: %s", username, e)
                raise PersistenceFailure('Error while registering user') from e

        raise PersistenceFailure('Error while registering user')
