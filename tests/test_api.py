import pytest

from helpers import CUSTOMER, auth, product_fields


def create_category(client, token, name='Electronics'):
    r = client.post('/api/v1/categories', json={'name': name}, headers=auth(token))
    assert r.status_code == 201
    return r.get_json()


def create_product(client, token, category_id, **overrides):
    r = client.post('/api/products', json=product_fields(category_id, **overrides), headers=auth(token))
    assert r.status_code == 201
    return r.get_json()


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

def test_register_and_login(client):
    r = client.post('/api/v1/users', json=CUSTOMER)
    assert r.status_code == 201
    body = r.get_json()
    assert body == {'id': body['id'], 'username': 'alice', 'name': 'Alice', 'role': 'User'}
    assert r.headers['Location'].endswith(f"/api/v1/users/{body['id']}")

    r2 = client.post('/api/v1/users/login', json={'username': 'alice', 'password': 'alice-pass'})
    assert r2.status_code == 200
    login = r2.get_json()
    assert login['message'] == 'Login successful'
    assert login['token']
    assert login['user']['username'] == 'alice'


def test_register_duplicate_username(client):
    client.post('/api/v1/users', json=CUSTOMER)

    r = client.post('/api/v1/users', json=dict(CUSTOMER, username='ALICE'))

    assert r.status_code == 400
    assert r.get_json() == {'ok': False, 'error': 'Username already exists!', 'kind': 'DuplicateIdentity'}


def test_register_requires_json_object(client):
    r = client.post('/api/v1/users', data='not json', content_type='text/plain')

    assert r.status_code == 400
    assert r.get_json()['kind'] == 'InvalidArgument'


def test_failed_login_answers_401_with_message(client):
    client.post('/api/v1/users', json=CUSTOMER)

    r = client.post('/api/v1/users/login', json={'username': 'alice', 'password': 'nope'})

    assert r.status_code == 401
    assert r.get_json() == {'token': '', 'user': None, 'message': 'Invalid password'}


def test_user_listing_is_admin_only(client, admin_token, user_token):
    assert client.get('/api/v1/users').status_code == 401
    assert client.get('/api/v1/users', headers=auth(user_token)).status_code == 403

    r = client.get('/api/v1/users', headers=auth(admin_token))
    assert r.status_code == 200
    assert [u['username'] for u in r.get_json()] == ['admin', 'alice']
    assert all('password' not in str(u) for u in r.get_json())


def test_get_user(client, admin_token):
    users = client.get('/api/v1/users', headers=auth(admin_token)).get_json()

    r = client.get(f"/api/v1/users/{users[0]['id']}", headers=auth(admin_token))
    assert r.status_code == 200
    assert r.get_json()['role'] == 'Admin'

    assert client.get('/api/v1/users/999', headers=auth(admin_token)).status_code == 404


@pytest.mark.parametrize('header', [
    {'Authorization': 'Bearer garbage'},
    {'Authorization': 'Basic abc'},
    {'Authorization': 'Bearer '},
])
def test_bad_authorization_header_is_401(client, header):
    r = client.get('/api/v1/users', headers=header)

    assert r.status_code == 401
    assert r.get_json()['kind'] == 'Unauthenticated'


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------

def test_category_crud(client, admin_token):
    created = create_category(client, admin_token, 'Toys')
    create_category(client, admin_token, 'Books')

    assert client.get(f"/api/v1/categories/{created['id']}").get_json()['name'] == 'Toys'
    assert [c['name'] for c in client.get('/api/v1/categories').get_json()] == ['Toys', 'Books']
    assert [c['name'] for c in client.get('/api/v2/categories').get_json()] == ['Books', 'Toys']

    r = client.patch(f"/api/v1/categories/{created['id']}", json={'name': 'Games'}, headers=auth(admin_token))
    assert r.status_code == 204
    assert client.get(f"/api/v1/categories/{created['id']}").get_json()['name'] == 'Games'

    r = client.delete(f"/api/v1/categories/{created['id']}", headers=auth(admin_token))
    assert r.status_code == 204
    assert client.get(f"/api/v1/categories/{created['id']}").status_code == 404


def test_category_writes_need_admin(client, user_token):
    assert client.post('/api/v1/categories', json={'name': 'Toys'}).status_code == 401
    assert client.post('/api/v1/categories', json={'name': 'Toys'}, headers=auth(user_token)).status_code == 403
    assert client.get('/api/v1/categories').get_json() == []


def test_category_validation_errors(client, admin_token):
    create_category(client, admin_token, 'Toys')

    r = client.post('/api/v1/categories', json={'name': 'toys'}, headers=auth(admin_token))
    assert r.status_code == 400
    assert r.get_json()['error'] == 'Category already exists!'

    r = client.post('/api/v1/categories', json={'name': 'ab'}, headers=auth(admin_token))
    assert r.status_code == 400
    assert r.get_json()['kind'] == 'InvalidArgument'


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------

def test_product_crud(client, admin_token):
    category = create_category(client, admin_token)
    created = create_product(client, admin_token, category['id'])
    assert created['categoryName'] == 'Electronics'
    assert created['price'] == 9.99

    url = f"/api/products/{created['productId']}"
    assert client.get(url).get_json()['name'] == 'Widget'

    r = client.put(url, json=product_fields(category['id'], name='Widget 2'), headers=auth(admin_token))
    assert r.status_code == 204
    assert client.get(url).get_json()['name'] == 'Widget 2'

    assert client.delete(url, headers=auth(admin_token)).status_code == 204
    assert client.get(url).status_code == 404


def test_product_with_unknown_category(client, admin_token):
    r = client.post('/api/products', json=product_fields(404), headers=auth(admin_token))

    assert r.status_code == 400
    assert r.get_json()['kind'] == 'ReferentialViolation'


def test_product_catalog_queries(client, admin_token):
    category = create_category(client, admin_token)
    for name in ['Cable', 'Adapter', 'Battery']:
        create_product(client, admin_token, category['id'], name=name, description=f'{name} for phones')

    assert [p['name'] for p in client.get('/api/products').get_json()] == ['Adapter', 'Battery', 'Cable']
    assert len(client.get(f"/api/products/category/{category['id']}").get_json()) == 3
    assert client.get('/api/products/category/999').status_code == 404

    found = client.get('/api/products/search?searchTerm=bat').get_json()
    assert [p['name'] for p in found] == ['Battery']

    page = client.get('/api/products/paged?pageNumber=2&pageSize=2').get_json()
    assert page['totalCount'] == 3
    assert page['totalPages'] == 2
    assert [p['name'] for p in page['items']] == ['Cable']

    assert client.get('/api/products/paged?pageNumber=3&pageSize=2').status_code == 404
    assert client.get('/api/products/paged?pageNumber=0&pageSize=2').status_code == 400


def test_buy_product(client, admin_token, user_token):
    category = create_category(client, admin_token)
    created = create_product(client, admin_token, category['id'], stockQuantity=3)
    url = f"/api/products/{created['productId']}"

    r = client.patch('/api/products/buy', json={'name': 'widget', 'quantity': 2}, headers=auth(user_token))
    assert r.status_code == 204
    assert client.get(url).get_json()['stockQuantity'] == 1

    r = client.patch('/api/products/buy', json={'name': 'Widget', 'quantity': 2}, headers=auth(user_token))
    assert r.status_code == 400
    assert r.get_json()['kind'] == 'InsufficientStock'
    assert client.get(url).get_json()['stockQuantity'] == 1

    r = client.patch('/api/products/buy', json={'name': 'Ghost', 'quantity': 1}, headers=auth(user_token))
    assert r.status_code == 404


@pytest.mark.parametrize('quantity', ['--2', '²', 'two', 1.5])
def test_buy_with_malformed_quantity_is_400(client, admin_token, user_token, quantity):
    category = create_category(client, admin_token)
    create_product(client, admin_token, category['id'])

    r = client.patch('/api/products/buy', json={'name': 'Widget', 'quantity': quantity}, headers=auth(user_token))

    assert r.status_code == 400
    assert r.get_json()['kind'] == 'InvalidArgument'


@pytest.mark.parametrize('query', ['pageNumber=--1&pageSize=2', 'pageNumber=%C2%B2&pageSize=2'])
def test_paged_with_malformed_numbers_is_400(client, query):
    r = client.get(f'/api/products/paged?{query}')

    assert r.status_code == 400
    assert r.get_json()['kind'] == 'InvalidArgument'


def test_product_with_out_of_range_price_is_400(client, admin_token):
    category = create_category(client, admin_token)

    r = client.post('/api/products', json=product_fields(category['id'], price='1e100'), headers=auth(admin_token))

    assert r.status_code == 400
    assert r.get_json()['kind'] == 'InvalidArgument'


def test_buy_requires_login(client):
    r = client.patch('/api/products/buy', json={'name': 'Widget', 'quantity': 1})

    assert r.status_code == 401


def test_product_writes_need_admin(client, admin_token, user_token):
    category = create_category(client, admin_token)

    r = client.post('/api/products', json=product_fields(category['id']), headers=auth(user_token))

    assert r.status_code == 403


# ---------------------------------------------------------------------------
# Cross-cutting
# ---------------------------------------------------------------------------

def test_unknown_route_uses_error_shape(client):
    r = client.get('/api/nothing-here')

    assert r.status_code == 404
    assert r.get_json()['ok'] is False


def test_security_headers(client):
    r = client.get('/api/v1/categories')

    assert r.headers['X-Frame-Options'] == 'DENY'
    assert r.headers['X-Content-Type-Options'] == 'nosniff'
