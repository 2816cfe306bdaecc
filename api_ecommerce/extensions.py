"""Flask extensions shared across the package."""

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()
