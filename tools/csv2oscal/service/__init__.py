"""
HTTP upload/download service for csv2oscal
"""

from .app import create_app
from .config import Settings, get_settings

__all__ = [
    'create_app',
    'Settings',
    'get_settings'
]
