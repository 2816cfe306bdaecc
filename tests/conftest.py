import pytest

from api_ecommerce.app_container import get_container
from api_ecommerce.config import Config
from api_ecommerce.extensions import db
from api_ecommerce.main import create_app
from api_ecommerce.performance_logger import reset_stats

from helpers import ADMIN, CUSTOMER

SECRET_KEY = 'test-secret-key-not-for-production'


@pytest.fixture
def config(tmp_path):
    # File database so worker threads get their own connections
    return Config(
        secret_key=SECRET_KEY,
        database_url=f"sqlite:///{tmp_path / 'test.db'}",
        logs_dir=tmp_path / 'logs',
        engine_options={'connect_args': {'timeout': 30}},
    )


@pytest.fixture
def app(config):
    reset_stats()
    app = create_app(config)
    app.config['TESTING'] = True
    with app.app_context():
        yield app
        db.session.remove()
        db.engine.dispose()


@pytest.fixture
def client(app):
    with app.test_client() as c:
        yield c


@pytest.fixture
def container(app):
    return get_container(app)


@pytest.fixture
def admin_token(container):
    container.user_service.register(**ADMIN)
    return container.user_service.login(ADMIN['username'], ADMIN['password']).token


@pytest.fixture
def user_token(container):
    container.user_service.register(**CUSTOMER)
    return container.user_service.login(CUSTOMER['username'], CUSTOMER['password']).token


@pytest.fixture
def category(container):
    return container.category_service.create_category('Electronics')

