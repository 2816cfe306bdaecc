# ==============================================================================
# CONFIGURATION
# ==============================================================================
# Built ONCE at process start and injected into create_app() and the
# container. Nothing reads os.environ after startup.
#
# REQUIRED:
#   export ECOMMERCE_SECRET_KEY="a_very_long_random_secret"
# Without it the app refuses to start (ConfigError), it never falls back
# to a default signing key.
# ==============================================================================

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from dotenv import load_dotenv

from api_ecommerce.errors import ConfigError


BASE_DIR = Path(__file__).resolve().parent.parent

DEFAULT_DATABASE_URL = 'sqlite:///' + str(BASE_DIR / 'api_ecommerce.db')
DEFAULT_TOKEN_TTL_HOURS = 2


def _env_flag(value: Optional[str], default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


@dataclass(frozen=True)
class Config:
    """
    Process-wide settings.

    Attributes:
        secret_key: Key used to sign session tokens (required)
        database_url: SQLAlchemy URL of the relational store
        token_ttl_hours: Validity window of a session token
        log_level: Name of the stdlib logging level
        logs_dir: Directory for the application and performance logs
        enable_profiling: Register the request timing hooks
        engine_options: Extra keyword arguments for create_engine()
    """
    secret_key: str
    database_url: str = DEFAULT_DATABASE_URL
    token_ttl_hours: int = DEFAULT_TOKEN_TTL_HOURS
    log_level: str = 'INFO'
    logs_dir: Path = BASE_DIR / 'logs'
    enable_profiling: bool = True
    engine_options: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not self.secret_key or not self.secret_key.strip():
            raise ConfigError('ECOMMERCE_SECRET_KEY must be set to a non-empty value')
        if self.token_ttl_hours <= 0:
            raise ConfigError('TOKEN_TTL_HOURS must be a positive integer')

    @property
    def token_ttl_seconds(self) -> int:
        return self.token_ttl_hours * 3600

    @classmethod
    def from_env(cls, environ: Mapping[str, str] = None, dotenv: bool = True) -> 'Config':
        """
        Builds the configuration from environment variables.

        Args:
            environ: Mapping to read from (defaults to os.environ)
            dotenv: Load a .env file first (only when reading os.environ)

        Returns:
            Validated configuration

        Raises:
            ConfigError: If the signing key is missing or a value is malformed
        """
        if environ is None:
            if dotenv:
                load_dotenv()
            environ = os.environ

        try:
            ttl = int(environ.get('TOKEN_TTL_HOURS', DEFAULT_TOKEN_TTL_HOURS))
        except ValueError:
            raise ConfigError('TOKEN_TTL_HOURS must be an integer')

        logs_dir = environ.get('LOGS_DIR')

        return cls(
            secret_key=environ.get('ECOMMERCE_SECRET_KEY', ''),
            database_url=environ.get('DATABASE_URL', DEFAULT_DATABASE_URL),
            token_ttl_hours=ttl,
            log_level=environ.get('LOG_LEVEL', 'INFO').upper(),
            logs_dir=Path(logs_dir) if logs_dir else BASE_DIR / 'logs',
            enable_profiling=_env_flag(environ.get('ENABLE_PROFILING'), True),
        )


def setup_logging(config: Config) -> None:
    """Configure the root logger: console plus logs/api_ecommerce.log."""
    config.logs_dir.mkdir(parents=True, exist_ok=True)
    log_format = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

    root = logging.getLogger()
    root.setLevel(getattr(logging, config.log_level, logging.INFO))

    # create_app() may run several times per process (tests)
    for handler in list(root.handlers):
        if getattr(handler, '_api_ecommerce', False):
            root.removeHandler(handler)
            handler.close()

    for handler in (
        logging.FileHandler(config.logs_dir / 'api_ecommerce.log', encoding='utf-8'),
        logging.StreamHandler(),
    ):
        handler.setFormatter(logging.Formatter(log_format))
        handler._api_ecommerce = True
        root.addHandler(handler)
