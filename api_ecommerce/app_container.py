# ==============================================================================
# DEPENDENCY CONTAINER - Service injection
# ==============================================================================
# Central place to obtain repositories and services. Makes it easy to:
#   - Inject the startup Config into the services that need it
#   - Swap a repository in tests
#
# One container per Flask app, stored in app.extensions. Nothing here is a
# process-wide singleton: two apps (e.g. two test fixtures) never share
# configuration or signing keys.
#
# Lazy construction is guarded by a lock: under threaded workers every
# request sees the same repository and service instances.
# ==============================================================================

import threading
from typing import Optional

from flask import current_app

from api_ecommerce.config import Config
from api_ecommerce.repositories import (
    CategoryRepository,
    ProductRepository,
    UserRepository,
)
from api_ecommerce.services import (
    CategoryService,
    ProductService,
    TokenService,
    UserService,
)

EXTENSION_KEY = 'api_ecommerce.container'


class AppContainer:
    """
    Dependency container of one application.

    Usage:
        container = AppContainer(config)
        product_service = container.product_service
    """

    def __init__(self, config: Config):
        """
        Args:
            config: Startup configuration (already validated)
        """
        self.config = config
        self._lock = threading.RLock()

        # Repositories (lazy)
        self._user_repo: Optional[UserRepository] = None
        self._category_repo: Optional[CategoryRepository] = None
        self._product_repo: Optional[ProductRepository] = None

        # Services (lazy)
        self._token_service: Optional[TokenService] = None
        self._user_service: Optional[UserService] = None
        self._category_service: Optional[CategoryService] = None
        self._product_service: Optional[ProductService] = None

    # =========================================================================
    # REPOSITORIES
    # =========================================================================

    @property
    def user_repo(self) -> UserRepository:
        return self._lazy('_user_repo', UserRepository)

    @property
    def category_repo(self) -> CategoryRepository:
        return self._lazy('_category_repo', CategoryRepository)

    @property
    def product_repo(self) -> ProductRepository:
        return self._lazy('_product_repo', ProductRepository)

    # =========================================================================
    # SERVICES
    # =========================================================================

    @property
    def token_service(self) -> TokenService:
        return self._lazy(
            '_token_service',
            lambda: TokenService(self.config.secret_key, self.config.token_ttl_seconds),
        )

    @property
    def user_service(self) -> UserService:
        return self._lazy('_user_service', lambda: UserService(self.user_repo, self.token_service))

    @property
    def category_service(self) -> CategoryService:
        return self._lazy('_category_service', lambda: CategoryService(self.category_repo))

    @property
    def product_service(self) -> ProductService:
        return self._lazy('_product_service', lambda: ProductService(self.product_repo, self.category_repo))

    # =========================================================================
    # UTILITIES
    # =========================================================================

    def _lazy(self, attr: str, factory):
        """Returns self.<attr>, building it once with factory()."""
        value = getattr(self, attr)
        if value is None:
            # Reentrant: a service factory pulls in its repositories
            with self._lock:
                value = getattr(self, attr)
                if value is None:
                    value = factory()
                    setattr(self, attr, value)
        return value

    def init_app(self, app) -> None:
        app.extensions[EXTENSION_KEY] = self


def get_container(app=None) -> AppContainer:
    """
    Returns the container of the given app (or of current_app).

    Raises:
        RuntimeError: If the app was not built by create_app()
    """
    app = app or current_app
    try:
        return app.extensions[EXTENSION_KEY]
    except KeyError:
        raise RuntimeError('AppContainer not registered on this app; use create_app()')
