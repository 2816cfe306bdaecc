import time

import pytest

from api_ecommerce.errors import DuplicateIdentity, Forbidden, InvalidArgument, NotFound, Unauthenticated
from api_ecommerce.extensions import db
from api_ecommerce.models import Role, User, UserRoleLink
from api_ecommerce.performance_logger import get_function_stats
from api_ecommerce.services import TokenService

from helpers import ADMIN, CUSTOMER


# ---------------------------------------------------------------------------
# Registration
# ---------------------------------------------------------------------------

def test_register_returns_public_projection(container):
    user = container.user_service.register('  bob  ', 'Bob', 'secret')

    assert user.id > 0
    assert user.username == 'bob'
    assert user.name == 'Bob'
    assert user.role == 'User'
    assert 'password' not in user.to_dict()
    assert 'password_hash' not in user.to_dict()


def test_register_stores_only_a_hash(container):
    container.user_service.register('bob', 'Bob', 'secret')

    stored = db.session.scalars(db.select(User).filter_by(username='bob')).one()
    assert stored.password_hash != 'secret'
    assert 'secret' not in stored.password_hash


@pytest.mark.parametrize('handle', ['alice', 'ALICE', '  Alice  ', 'aLiCe\t'])
def test_register_rejects_handles_differing_by_case_or_whitespace(container, handle):
    container.user_service.register(**CUSTOMER)

    with pytest.raises(DuplicateIdentity):
        container.user_service.register(handle, 'Other', 'other-pass')


@pytest.mark.parametrize('handle', ['', '   ', None])
def test_register_requires_username(container, handle):
    with pytest.raises(InvalidArgument):
        container.user_service.register(handle, 'Nobody', 'secret')


def test_register_requires_password(container):
    with pytest.raises(InvalidArgument):
        container.user_service.register('carol', 'Carol', '')


def test_register_rejects_unknown_role(container):
    with pytest.raises(InvalidArgument):
        container.user_service.register('carol', 'Carol', 'secret', role='Superuser')


def test_register_normalizes_role_label(container):
    user = container.user_service.register('carol', 'Carol', 'secret', role='admin')
    assert user.role == 'Admin'


def test_register_creates_role_once(container):
    container.user_service.register('one', 'One', 'secret', role='Admin')
    container.user_service.register('two', 'Two', 'secret', role='Admin')

    roles = db.session.scalars(db.select(Role).filter_by(name='Admin')).all()
    assert len(roles) == 1


# ---------------------------------------------------------------------------
# Login
# ---------------------------------------------------------------------------

@pytest.mark.parametrize('username,password,message', [
    ('', 'whatever', 'Invalid username is required'),
    ('   ', 'whatever', 'Invalid username is required'),
    ('ghost', 'whatever', 'Invalid username'),
    ('alice', '', 'Invalid password is required'),
    ('alice', 'wrong-pass', 'Invalid password'),
])
def test_login_soft_fails_with_message(container, username, password, message):
    container.user_service.register(**CUSTOMER)

    result = container.user_service.login(username, password)

    assert result.token == ''
    assert result.user is None
    assert result.message == message
    assert not result.ok


def test_login_success_embeds_role(container):
    container.user_service.register(**ADMIN)

    result = container.user_service.login('  ADMIN ', ADMIN['password'])

    assert result.ok
    assert result.message == 'Login successful'
    assert result.user.username == 'admin'
    claims = container.token_service.verify(result.token)
    assert claims == {'id': result.user.id, 'username': 'admin', 'role': 'Admin'}


def test_login_embeds_first_role_only(container):
    user = container.user_service.register(**CUSTOMER)
    admin_role = Role(name='Admin')
    db.session.add(admin_role)
    db.session.add(UserRoleLink(user_id=user.id, role=admin_role))
    db.session.commit()

    result = container.user_service.login(CUSTOMER['username'], CUSTOMER['password'])

    assert container.token_service.verify(result.token)['role'] == 'User'


def test_login_is_profiled(container):
    container.user_service.register(**CUSTOMER)
    container.user_service.login(CUSTOMER['username'], CUSTOMER['password'])

    assert get_function_stats()['Login']['calls'] == 1


# ---------------------------------------------------------------------------
# Authorization
# ---------------------------------------------------------------------------

def test_authorize_accepts_matching_role(container, admin_token):
    claims = container.user_service.authorize(admin_token, 'Admin')
    assert claims['username'] == 'admin'


def test_authorize_rejects_role_mismatch(container, user_token):
    with pytest.raises(Forbidden):
        container.user_service.authorize(user_token, 'Admin')


@pytest.mark.parametrize('token', [None, '', 'not-a-token'])
def test_authorize_rejects_missing_or_malformed_token(container, token):
    with pytest.raises(Unauthenticated):
        container.user_service.authorize(token)


def test_authorize_rejects_tampered_token(container, user_token):
    swapped = 'A' if user_token[1] != 'A' else 'B'
    tampered = user_token[0] + swapped + user_token[2:]
    with pytest.raises(Unauthenticated):
        container.user_service.authorize(tampered)


def test_authorize_rejects_token_signed_with_other_key(container):
    user = container.user_service.register(**CUSTOMER)
    forged = TokenService('some-other-key', 7200).issue(user.id, user.username, 'Admin')

    with pytest.raises(Unauthenticated):
        container.user_service.authorize(forged, 'Admin')


def test_token_expires_after_two_hours(container, user_token, monkeypatch):
    real_time = time.time

    monkeypatch.setattr(time, 'time', lambda: real_time() + 2 * 3600 - 60)
    assert container.user_service.authorize(user_token)['username'] == 'alice'

    monkeypatch.setattr(time, 'time', lambda: real_time() + 2 * 3600 + 5)
    with pytest.raises(Unauthenticated):
        container.user_service.authorize(user_token)


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------

def test_get_users_ordered_by_username(container):
    container.user_service.register('zoe', 'Zoe', 'secret')
    container.user_service.register('adam', 'Adam', 'secret')

    assert [u.username for u in container.user_service.get_users()] == ['adam', 'zoe']


def test_is_unique_user_ignores_case_and_whitespace(container):
    assert container.user_service.is_unique_user('alice')

    container.user_service.register(**CUSTOMER)

    assert not container.user_service.is_unique_user(' ALICE ')
    assert container.user_service.is_unique_user('bob')


def test_get_user_not_found(container):
    with pytest.raises(NotFound):
        container.user_service.get_user(4242)
