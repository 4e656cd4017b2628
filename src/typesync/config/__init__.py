"""Configuration management: TOML loading, environment settings and models.

Usage:
    >>> from typesync.config import load_config, SyncConfig, SynchronizationMode
"""

from typesync.config.loader import Settings, get_settings, load_config, resolve_url
from typesync.config.models import StoreConfig, SyncConfig, SynchronizationMode

__all__ = [
    "load_config",
    "resolve_url",
    "Settings",
    "get_settings",
    "SyncConfig",
    "StoreConfig",
    "SynchronizationMode",
]
