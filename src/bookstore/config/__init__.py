from .settings import Settings, get_settings, DATABASE_HOST, DATABASE_PORT

__all__ = ["Settings", "get_settings", "DATABASE_HOST", "DATABASE_PORT"]
