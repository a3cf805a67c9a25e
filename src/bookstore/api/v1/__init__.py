from .books import router as books_router
from .error_handlers import register_exception_handlers

__all__ = ["books_router", "register_exception_handlers"]
