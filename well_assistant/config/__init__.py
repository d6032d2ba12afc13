from .loader import AppConfig, ConfigError, DatabaseConfig, load_config

__all__ = [
    "AppConfig",
    "ConfigError",
    "DatabaseConfig",
    "load_config",
]
