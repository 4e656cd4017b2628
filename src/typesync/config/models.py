"""Pydantic models for typesync configuration."""

from enum import Flag, auto

from pydantic import BaseModel, Field


# ============================================================================
# Synchronization Modes
# ============================================================================


class SynchronizationMode(Flag):
    """Which schema kinds are synchronized at startup."""

    NONE = 0
    DATA_TYPES = auto()
    DOCUMENT_TYPES = auto()
    MEDIA_TYPES = auto()
    MEMBER_TYPES = auto()
    ALL = DATA_TYPES | DOCUMENT_TYPES | MEDIA_TYPES | MEMBER_TYPES

    @classmethod
    def parse(cls, names: list[str]) -> "SynchronizationMode":
        """Combine mode names (``"data_types"``, ``"all"``, ...) into one flag.

        Raises:
            ValueError: If a name is not a known mode.

        Example:
            >>> SynchronizationMode.parse(["data_types", "media_types"])
            <SynchronizationMode.DATA_TYPES|MEDIA_TYPES: 5>
        """
        mode = cls.NONE
        for name in names:
            try:
                mode |= cls[name.strip().upper()]
            except KeyError:
                valid = ", ".join(member.lower() for member in cls.__members__)
                raise ValueError(
                    f"Unknown synchronization mode '{name}'. Valid modes: {valid}"
                ) from None
        return mode


# ============================================================================
# Configuration Models
# ============================================================================


class StoreConfig(BaseModel):
    """Store connection from the ``[store]`` table."""

    url: str = ""
    password: str | None = None  # For [YOUR-PASSWORD] placeholder substitution
    description: str = ""


class SyncConfig(BaseModel):
    """Complete configuration from typesync.toml."""

    modes: SynchronizationMode = SynchronizationMode.DATA_TYPES
    modules: list[str] = Field(default_factory=list)
    store: StoreConfig = Field(default_factory=StoreConfig)
