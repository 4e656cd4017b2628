"""Configuration loading for typesync.

Two sources, kept apart:

- ``typesync.toml``: what to synchronize and where the store lives.
- Environment (``TYPESYNC_*``): per-process overrides read by ``Settings``.
"""

import tomllib
from functools import lru_cache
from pathlib import Path
from urllib.parse import quote

from pydantic_settings import BaseSettings, SettingsConfigDict

from typesync.config.models import StoreConfig, SyncConfig, SynchronizationMode

DEFAULT_CONFIG_FILE = "typesync.toml"


class Settings(BaseSettings):
    """Environment settings.

    - ``TYPESYNC_CONFIG_PATH``: path to typesync.toml
    - ``TYPESYNC_DATABASE_URL``: overrides ``[store].url``
    - ``TYPESYNC_LOG_LEVEL``: CLI log level
    """

    model_config = SettingsConfigDict(env_prefix="TYPESYNC_", extra="ignore")

    config_path: Path | None = None
    database_url: str | None = None
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def load_config(config_path: Path | None = None) -> SyncConfig:
    """Load synchronization configuration from a TOML file.

    Args:
        config_path: Path to typesync.toml (default: ``TYPESYNC_CONFIG_PATH``
            or ``./typesync.toml``)

    Returns:
        SyncConfig with modes, modules and store settings

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config format is invalid
    """
    if config_path is None:
        config_path = get_settings().config_path or Path.cwd() / DEFAULT_CONFIG_FILE

    if not config_path.exists():
        raise FileNotFoundError(
            f"typesync config not found: {config_path}\n"
            f"Create {DEFAULT_CONFIG_FILE} or set TYPESYNC_CONFIG_PATH."
        )

    with open(config_path, "rb") as f:
        data = tomllib.load(f)

    sync_settings = data.get("sync", {})
    modes = sync_settings.get("modes", ["data_types"])
    if isinstance(modes, str):
        modes = [modes]

    modules = sync_settings.get("modules", [])
    if not isinstance(modules, list):
        raise ValueError(f"[sync].modules must be a list in {config_path.name}")

    return SyncConfig(
        modes=SynchronizationMode.parse(modes),
        modules=modules,
        store=StoreConfig(**data.get("store", {})),
    )


def resolve_url(store: StoreConfig, settings: Settings | None = None) -> str:
    """Resolve the store URL with env override and password substitution.

    ``TYPESYNC_DATABASE_URL`` wins over ``[store].url``.  A
    ``[YOUR-PASSWORD]`` placeholder is replaced by the URL-quoted
    ``[store].password``.

    Raises:
        ValueError: If no URL is configured anywhere.

    Example:
        >>> resolve_url(StoreConfig(url="postgresql://u:[YOUR-PASSWORD]@db/cms", password="p@ss"),
        ...             Settings(database_url=None))
        'postgresql://u:p%40ss@db/cms'
    """
    settings = settings or get_settings()

    url = settings.database_url or store.url
    if not url:
        raise ValueError(
            "No store URL configured. Set [store].url in typesync.toml "
            "or TYPESYNC_DATABASE_URL."
        )

    if store.password and "[YOUR-PASSWORD]" in url:
        url = url.replace("[YOUR-PASSWORD]", quote(store.password, safe=""))
    return url
