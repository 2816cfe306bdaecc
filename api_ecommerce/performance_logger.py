# ==============================================================================
# INTERNAL PROFILING
# ==============================================================================
# Times every request and the key service functions without touching the
# responses. Output goes through stdlib logging:
#   logger 'api_ecommerce.performance' → logs/performance.log
#
# ON/OFF: Config.enable_profiling (env ENABLE_PROFILING)
# ==============================================================================

import logging
import threading
import time
from collections import defaultdict
from functools import wraps
from pathlib import Path

# ═══════════════════════════════════════════════════════════════════════════
# SETTINGS
# ═══════════════════════════════════════════════════════════════════════════

# Thresholds in milliseconds
THRESHOLD_WARNING = 300
THRESHOLD_CRITICAL = 700

PERFORMANCE_LOG_NAME = 'performance.log'

# Human readable names for the routes (rule based)
ROUTE_NAMES = {
    'POST /api/v1/users': 'Register user',
    'POST /api/v1/users/login': 'Log in',
    'GET /api/v1/users': 'List users',
    'GET /api/v1/users/<int:user_id>': 'Get user',

    'GET /api/v1/categories': 'List categories',
    'GET /api/v2/categories': 'List categories (by name)',
    'GET /api/v1/categories/<int:category_id>': 'Get category',
    'POST /api/v1/categories': 'Create category',
    'PATCH /api/v1/categories/<int:category_id>': 'Update category',
    'DELETE /api/v1/categories/<int:category_id>': 'Delete category',

    'GET /api/products': 'List products',
    'GET /api/products/<int:product_id>': 'Get product',
    'GET /api/products/category/<int:category_id>': 'Products of a category',
    'GET /api/products/search': 'Search products',
    'GET /api/products/paged': 'Page products',
    'POST /api/products': 'Create product',
    'PUT /api/products/<int:product_id>': 'Update product',
    'DELETE /api/products/<int:product_id>': 'Delete product',
    'PATCH /api/products/buy': 'Buy product',
}

logger = logging.getLogger('api_ecommerce.performance')

# {function_name: {calls, total_time, max_time}}
_function_stats = defaultdict(lambda: {'calls': 0, 'total_time': 0.0, 'max_time': 0.0})
_stats_lock = threading.Lock()


def _get_route_name(method, rule):
    return ROUTE_NAMES.get(f"{method} {rule}", f"{method} {rule}")


def _attach_file_handler(logs_dir: Path) -> None:
    path = Path(logs_dir) / PERFORMANCE_LOG_NAME
    for handler in list(logger.handlers):
        if getattr(handler, '_api_ecommerce', False):
            logger.removeHandler(handler)
            handler.close()
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, encoding='utf-8')
    handler.setFormatter(logging.Formatter('%(asctime)s - %(levelname)s - %(message)s'))
    handler._api_ecommerce = True
    logger.addHandler(handler)


# ═══════════════════════════════════════════════════════════════════════════
# 1️⃣ REQUEST PROFILING (Flask hooks)
# ═══════════════════════════════════════════════════════════════════════════

def log_route_performance(method, path, rule, time_ms, user=None):
    action_name = _get_route_name(method, rule)
    user_str = user or 'anonymous'

    if time_ms >= THRESHOLD_CRITICAL:
        level = logging.CRITICAL
    elif time_ms >= THRESHOLD_WARNING:
        level = logging.WARNING
    else:
        level = logging.INFO

    logger.log(level, "%s | user=%s | %s %s | %.0f ms", action_name, user_str, method, path, time_ms)


def init_profiling(app, logs_dir=None):
    """
    Registers before_request/after_request hooks that time every request.

    Usage:
        from api_ecommerce.performance_logger import init_profiling
        init_profiling(app, config.logs_dir)
    """
    if logs_dir is not None:
        _attach_file_handler(logs_dir)

    @app.before_request
    def _start_timer():
        from flask import g
        g.start_time = time.perf_counter()

    @app.after_request
    def _log_request(response):
        from flask import g, request

        if not hasattr(g, 'start_time'):
            return response

        elapsed = (time.perf_counter() - g.start_time) * 1000
        rule = str(request.url_rule) if request.url_rule else request.path
        claims = getattr(g, 'claims', None) or {}

        log_route_performance(request.method, request.path, rule, elapsed, claims.get('username'))
        return response


# ═══════════════════════════════════════════════════════════════════════════
# 2️⃣ DECORATOR FOR KEY FUNCTIONS
# ═══════════════════════════════════════════════════════════════════════════

def profile_function(func=None, name=None):
    """
    Measures calls, average and max time of a function.

    Usage:
        @profile_function
        def login(...):
            ...

        @profile_function(name="Buy product")
        def buy_product(...):
            ...
    """
    def decorator(fn):
        func_name = name or fn.__name__

        @wraps(fn)
        def wrapper(*args, **kwargs):
            start = time.perf_counter()
            try:
                return fn(*args, **kwargs)
            finally:
                elapsed_ms = (time.perf_counter() - start) * 1000

                with _stats_lock:
                    stats = _function_stats[func_name]
                    stats['calls'] += 1
                    stats['total_time'] += elapsed_ms
                    if elapsed_ms > stats['max_time']:
                        stats['max_time'] = elapsed_ms

                if elapsed_ms >= THRESHOLD_WARNING:
                    severity = 'CRITICAL' if elapsed_ms >= THRESHOLD_CRITICAL else 'SLOW'
                    logger.warning("[%s] function %s took %.0f ms", severity, func_name, elapsed_ms)

        return wrapper

    # Allow bare @profile_function
    if func is not None:
        return decorator(func)
    return decorator


# ═══════════════════════════════════════════════════════════════════════════
# 3️⃣ STATISTICS
# ═══════════════════════════════════════════════════════════════════════════

def get_function_stats():
    """
    Returns:
        dict: {name: {calls, avg_time, max_time}}
    """
    with _stats_lock:
        result = {}
        for func_name, stats in _function_stats.items():
            calls = stats['calls']
            avg = stats['total_time'] / calls if calls > 0 else 0
            result[func_name] = {
                'calls': calls,
                'avg_time': round(avg, 2),
                'max_time': round(stats['max_time'], 2)
            }
        return result


def reset_stats():
    """Clears the statistics (tests)."""
    with _stats_lock:
        _function_stats.clear()


__all__ = [
    'init_profiling',
    'profile_function',
    'get_function_stats',
    'reset_stats',
]
