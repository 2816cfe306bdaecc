# ==============================================================================
# HTTP ROUTES
# ==============================================================================
# Routes only orchestrate request → service → response. Validation and
# business rules live in the services.
# ==============================================================================

from api_ecommerce.routes import categories, products, users

BLUEPRINTS = (users.bp, categories.bp, products.bp)


def register_blueprints(app) -> None:
    for blueprint in BLUEPRINTS:
        app.register_blueprint(blueprint)
