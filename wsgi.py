# ==============================================================================
# WSGI Entry Point - Gunicorn / production
# ==============================================================================
# USAGE:
#   export ECOMMERCE_SECRET_KEY="..."
#   gunicorn wsgi:app --bind 0.0.0.0:$PORT
#
# PROJECT LAYOUT:
#   repo_root/             <- working directory (on sys.path)
#   ├── wsgi.py            <- this file
#   ├── pyproject.toml
#   └── api_ecommerce/     <- Python package
#       ├── main.py        <- create_app()
#       ├── services/
#       ├── repositories/
#       └── routes/
# ==============================================================================

import os

from api_ecommerce.main import create_app

app = create_app()


if __name__ == '__main__':
    app.run(
        debug=os.environ.get('FLASK_DEBUG', '0') == '1',
        host=os.environ.get('FLASK_HOST', '0.0.0.0'),
        port=int(os.environ.get('FLASK_PORT', 5000)),
    )
