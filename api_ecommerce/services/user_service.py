# ==============================================================================
# USER SERVICE
# ==============================================================================
# All business logic for accounts: registration, login, authorization.
#
# Two failure styles on purpose:
# - register() FAILS FAST with exceptions (InvalidArgument, DuplicateIdentity)
# - login() NEVER raises for bad credentials, it returns a LoginResult whose
#   message tells what was wrong
# ==============================================================================

import logging
from typing import Any, Dict, List, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from api_ecommerce.errors import DuplicateIdentity, InvalidArgument, NotFound
from api_ecommerce.models.dtos import LoginResult, UserData
from api_ecommerce.models.entities import DEFAULT_ROLE, UserRole
from api_ecommerce.performance_logger import profile_function
from api_ecommerce.repositories.interfaces import IUserRepository
from api_ecommerce.services.token_service import TokenService

logger = logging.getLogger(__name__)


class UserService:
    """
    Accounts and sessions.

    Responsibilities:
    - Registration with unique, case-insensitive handles
    - Login with a soft-fail result and a signed session token
    - Token authorization with an optional role requirement
    - Admin listing of accounts
    """

    MSG_USERNAME_REQUIRED = 'Invalid username is required'
    MSG_INVALID_USERNAME = 'Invalid username'
    MSG_PASSWORD_REQUIRED = 'Invalid password is required'
    MSG_INVALID_PASSWORD = 'Invalid password'
    MSG_LOGIN_OK = 'Login successful'

    def __init__(self, user_repo: IUserRepository, token_service: TokenService):
        self.user_repo = user_repo
        self.token_service = token_service

    # =========================================================================
    # ROLES
    # =========================================================================

    def normalize_role(self, role: Optional[str]) -> str:
        """
        Canonical role label; empty means the default role.

        Raises:
            InvalidArgument: Unknown role label
        """
        if role is None or not str(role).strip():
            return DEFAULT_ROLE.value
        parsed = UserRole.parse(role)
        if parsed is None:
            valid = ', '.join(r.value for r in UserRole)
            raise InvalidArgument(f'Unknown role "{role}". Valid roles: {valid}')
        return parsed.value

    # =========================================================================
    # REGISTRATION
    # =========================================================================

    def is_unique_user(self, username: str) -> bool:
        return self.user_repo.is_unique_user(username)

    def register(
        self,
        username: str,
        name: str,
        password: str,
        role: str = None
    ) -> UserData:
        """
        Creates an account.

        Args:
            username: Login handle (trimmed before storing)
            name: Display name
            password: Plain secret, stored only as a werkzeug hash
            role: Role label, defaults to "User"

        Returns:
            Public projection of the new account

        Raises:
            InvalidArgument: Empty handle/secret or unknown role
            DuplicateIdentity: Handle already registered
        """
        if not isinstance(username, str) or not username.strip():
            raise InvalidArgument('Username is required')
        if not isinstance(password, str) or not password:
            raise InvalidArgument('Password is required')

        username = username.strip()
        role_name = self.normalize_role(role)

        if not self.is_unique_user(username):
            raise DuplicateIdentity('Username already exists!')

        user = self.user_repo.create_user(
            username,
            str(name or '').strip(),
            generate_password_hash(password),
            role_name,
        )
        if user is None:
            # Lost a race against a concurrent registration of the same handle
            raise DuplicateIdentity('Username already exists!')

        logger.info("Registered user '%s' with role %s", username, role_name)
        return UserData.from_entity(user)

    # =========================================================================
    # LOGIN
    # =========================================================================

    @profile_function(name='Login')
    def login(self, username: str, password: str) -> LoginResult:
        """
        Verifies credentials and issues a session token.

        Exactly one role claim goes into the token: the account's first
        assigned role.

        Returns:
            LoginResult; on failure token is empty, user is None and
            message explains why
        """
        if not isinstance(username, str) or not username.strip():
            return LoginResult(message=self.MSG_USERNAME_REQUIRED)

        user = self.user_repo.get_by_username(username)
        if user is None:
            logger.warning("Login failed: unknown user '%s'", username.strip())
            return LoginResult(message=self.MSG_INVALID_USERNAME)

        if not isinstance(password, str) or not password:
            return LoginResult(message=self.MSG_PASSWORD_REQUIRED)

        if not check_password_hash(user.password_hash, password):
            logger.warning("Login failed: wrong password for '%s'", user.username)
            return LoginResult(message=self.MSG_INVALID_PASSWORD)

        token = self.token_service.issue(user.id, user.username, user.primary_role)
        logger.info("User '%s' logged in", user.username)
        return LoginResult(token=token, user=UserData.from_entity(user), message=self.MSG_LOGIN_OK)

    def authorize(self, token: str, required_role: str = None) -> Dict[str, Any]:
        """See TokenService.authorize (Unauthenticated / Forbidden)."""
        return self.token_service.authorize(token, required_role)

    # =========================================================================
    # QUERIES
    # =========================================================================

    def get_users(self) -> List[UserData]:
        return [UserData.from_entity(u) for u in self.user_repo.get_users()]

    def get_user(self, user_id: int) -> UserData:
        user = self.user_repo.get_user(user_id)
        if user is None:
            raise NotFound(f'User with id {user_id} not found.')
        return UserData.from_entity(user)
