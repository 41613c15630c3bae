"""
Configuration for the world generation service.
"""

from .config import Settings, settings

__all__ = ['Settings', 'settings']
