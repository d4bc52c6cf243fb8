"""
Package: config
Description: Application configuration for the Push Relay.
"""

from .settings import Settings, settings

__all__ = ["Settings", "settings"]
