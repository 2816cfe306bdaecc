from flask import Blueprint, url_for

from api_ecommerce.app_container import get_container
from api_ecommerce.routes.auth import admin_required, json_body

bp = Blueprint('categories', __name__, url_prefix='/api')


@bp.route('/v1/categories', methods=['GET'])
def get_categories():
    # v1 keeps insertion (id) order; v2 sorts by name
    return [c.to_dict() for c in get_container().category_service.get_categories()]


@bp.route('/v2/categories', methods=['GET'])
def get_categories_v2():
    return [c.to_dict() for c in get_container().category_service.get_categories(order_by_name=True)]


@bp.route('/v1/categories/<int:category_id>', methods=['GET'])
def get_category(category_id):
    return get_container().category_service.get_category(category_id).to_dict()


@bp.route('/v1/categories', methods=['POST'])
@admin_required
def create_category():
    category = get_container().category_service.create_category(json_body().get('name'))
    location = url_for('categories.get_category', category_id=category.id)
    return category.to_dict(), 201, {'Location': location}


@bp.route('/v1/categories/<int:category_id>', methods=['PATCH'])
@admin_required
def update_category(category_id):
    get_container().category_service.update_category(category_id, json_body().get('name'))
    return '', 204


@bp.route('/v1/categories/<int:category_id>', methods=['DELETE'])
@admin_required
def delete_category(category_id):
    get_container().category_service.delete_category(category_id)
    return '', 204
