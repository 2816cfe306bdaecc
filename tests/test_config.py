import logging

import pytest

from api_ecommerce.config import Config, setup_logging
from api_ecommerce.errors import ConfigError
from api_ecommerce.main import create_app


@pytest.mark.parametrize('secret', ['', '   '])
def test_config_requires_secret_key(secret):
    with pytest.raises(ConfigError):
        Config(secret_key=secret)


def test_from_env_without_secret_refuses_to_start():
    with pytest.raises(ConfigError):
        Config.from_env(environ={})


def test_create_app_without_secret_refuses_to_start(monkeypatch):
    monkeypatch.delenv('ECOMMERCE_SECRET_KEY', raising=False)

    with pytest.raises(ConfigError):
        create_app()


def test_from_env_reads_settings(tmp_path):
    config = Config.from_env(environ={
        'ECOMMERCE_SECRET_KEY': 'k3y',
        'DATABASE_URL': 'sqlite:///:memory:',
        'TOKEN_TTL_HOURS': '5',
        'LOG_LEVEL': 'debug',
        'LOGS_DIR': str(tmp_path / 'logs'),
        'ENABLE_PROFILING': 'off',
    })

    assert config.secret_key == 'k3y'
    assert config.database_url == 'sqlite:///:memory:'
    assert config.token_ttl_seconds == 5 * 3600
    assert config.log_level == 'DEBUG'
    assert config.logs_dir == tmp_path / 'logs'
    assert config.enable_profiling is False


def test_from_env_defaults():
    config = Config.from_env(environ={'ECOMMERCE_SECRET_KEY': 'k3y'})

    assert config.token_ttl_hours == 2
    assert config.database_url.startswith('sqlite:///')
    assert config.enable_profiling is True


@pytest.mark.parametrize('ttl', ['two', '0', '-1'])
def test_from_env_rejects_bad_ttl(ttl):
    with pytest.raises(ConfigError):
        Config.from_env(environ={'ECOMMERCE_SECRET_KEY': 'k3y', 'TOKEN_TTL_HOURS': ttl})


def test_setup_logging_does_not_stack_handlers(tmp_path):
    config = Config(secret_key='k3y', logs_dir=tmp_path / 'logs')

    setup_logging(config)
    setup_logging(config)

    ours = [h for h in logging.getLogger().handlers if getattr(h, '_api_ecommerce', False)]
    assert len(ours) == 2
    assert (tmp_path / 'logs' / 'api_ecommerce.log').exists()
