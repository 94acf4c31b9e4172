"""
Utility modules for the catalog backend
"""
from .config_loader import AppConfig, load_app_config, resolve_path

__all__ = [
    'AppConfig',
    'load_app_config',
    'resolve_path',
]
