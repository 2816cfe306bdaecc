"""Payload and header builders shared by the tests."""

ADMIN = {'username': 'admin', 'name': 'Admin', 'password': 'admin-pass', 'role': 'Admin'}
CUSTOMER = {'username': 'alice', 'name': 'Alice', 'password': 'alice-pass', 'role': 'User'}


def product_fields(category_id, **overrides):
    fields = {
        'name': 'Widget',
        'description': 'A small widget',
        'price': 9.99,
        'imgUrl': 'https://img.example.com/widget.png',
        'sku': 'PROD-001-BLK-M',
        'stockQuantity': 10,
        'categoryId': category_id,
    }
    fields.update(overrides)
    return fields


def auth(token):
    return {'Authorization': f'Bearer {token}'}
