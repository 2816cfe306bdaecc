"""E-commerce catalog REST API: products, categories and users."""

__version__ = '1.0.0'
