# ==============================================================================
# ROUTE PROTECTION
# ==============================================================================
# Bearer token checks for protected endpoints:
#   Authorization: Bearer <token>
# Missing/bad/expired token → 401, wrong role → 403 (raised as
# Unauthenticated / Forbidden and rendered by the app error handler).
# ==============================================================================

from functools import wraps
from typing import Any, Dict, Mapping, Optional

from flask import g, request

from api_ecommerce.app_container import get_container
from api_ecommerce.errors import InvalidArgument
from api_ecommerce.models.entities import UserRole


def bearer_token() -> Optional[str]:
    header = request.headers.get('Authorization', '')
    scheme, _, token = header.partition(' ')
    if scheme.lower() != 'bearer' or not token.strip():
        return None
    return token.strip()


def _authorize(required_role: Optional[str]) -> Dict[str, Any]:
    claims = get_container().user_service.authorize(bearer_token(), required_role)
    g.claims = claims
    return claims


def login_required(f):
    @wraps(f)
    def wrapper(*args, **kwargs):
        _authorize(None)
        return f(*args, **kwargs)
    return wrapper


def role_required(role_name):
    def deco(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            _authorize(role_name)
            return f(*args, **kwargs)
        return wrapper
    return deco


admin_required = role_required(UserRole.ADMIN.value)


def json_body() -> Mapping[str, Any]:
    """Request body as a JSON object; InvalidArgument otherwise."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise InvalidArgument('Request body must be a JSON object')
    return data
