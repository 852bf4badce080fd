"""
HTTP surface for the browser client.
"""
from .routes import create_app, configure_routes
from .services import AppServices

__all__ = ['create_app', 'configure_routes', 'AppServices']
