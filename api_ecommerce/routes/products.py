from flask import Blueprint, request, url_for

from api_ecommerce.app_container import get_container
from api_ecommerce.routes.auth import admin_required, json_body, login_required

bp = Blueprint('products', __name__, url_prefix='/api/products')


@bp.route('', methods=['GET'])
def get_products():
    return [p.to_dict() for p in get_container().product_service.get_products()]


@bp.route('/<int:product_id>', methods=['GET'])
def get_product(product_id):
    return get_container().product_service.get_product(product_id).to_dict()


@bp.route('/category/<int:category_id>', methods=['GET'])
def get_products_for_category(category_id):
    products = get_container().product_service.get_products_for_category(category_id)
    return [p.to_dict() for p in products]


@bp.route('/search', methods=['GET'])
def search_products():
    term = request.args.get('searchTerm', '')
    return [p.to_dict() for p in get_container().product_service.search_products(term)]


@bp.route('/paged', methods=['GET'])
def get_products_paged():
    page = get_container().product_service.get_products_paged(
        request.args.get('pageNumber', '1'),
        request.args.get('pageSize', '5'),
    )
    return page.to_dict()


@bp.route('', methods=['POST'])
@admin_required
def create_product():
    product = get_container().product_service.create_product(json_body())
    location = url_for('products.get_product', product_id=product.product_id)
    return product.to_dict(), 201, {'Location': location}


@bp.route('/<int:product_id>', methods=['PUT'])
@admin_required
def update_product(product_id):
    get_container().product_service.update_product(product_id, json_body())
    return '', 204


@bp.route('/<int:product_id>', methods=['DELETE'])
@admin_required
def delete_product(product_id):
    get_container().product_service.delete_product(product_id)
    return '', 204


@bp.route('/buy', methods=['PATCH'])
@login_required
def buy_product():
    data = json_body()
    get_container().product_service.buy_product(data.get('name'), data.get('quantity'))
    return '', 204
