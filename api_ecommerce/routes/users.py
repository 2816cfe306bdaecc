from flask import Blueprint, url_for

from api_ecommerce.app_container import get_container
from api_ecommerce.routes.auth import admin_required, json_body

bp = Blueprint('users', __name__, url_prefix='/api/v1/users')


@bp.route('', methods=['GET'])
@admin_required
def get_users():
    users = get_container().user_service.get_users()
    return [u.to_dict() for u in users]


@bp.route('/<int:user_id>', methods=['GET'])
@admin_required
def get_user(user_id):
    return get_container().user_service.get_user(user_id).to_dict()


@bp.route('', methods=['POST'])
def register_user():
    data = json_body()
    user = get_container().user_service.register(
        data.get('username'),
        data.get('name'),
        data.get('password'),
        data.get('role'),
    )
    return user.to_dict(), 201, {'Location': url_for('users.get_user', user_id=user.id)}


@bp.route('/login', methods=['POST'])
def login_user():
    data = json_body()
    result = get_container().user_service.login(data.get('username'), data.get('password'))
    return result.to_dict(), (200 if result.ok else 401)
