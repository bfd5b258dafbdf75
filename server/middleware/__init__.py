# server/middleware/__init__.py
from .logging import add_request_id_middleware
from .error_handler import register_error_handlers

__all__ = [
    "add_request_id_middleware",
    "register_error_handlers",
]
