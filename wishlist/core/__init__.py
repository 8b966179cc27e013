# Wishlist Core Module
from .config import ConfigurationError, Settings, get_settings, load_settings, settings
from .database import Base, async_session_maker, check_db_connection, engine, get_db
from .logging import bind_request_context, configure_logging, reset_request_context, setup_logging

__all__ = [
    "settings",
    "Settings",
    "ConfigurationError",
    "get_settings",
    "load_settings",
    "setup_logging",
    "configure_logging",
    "bind_request_context",
    "reset_request_context",
    "Base",
    "engine",
    "async_session_maker",
    "get_db",
    "check_db_connection",
]
