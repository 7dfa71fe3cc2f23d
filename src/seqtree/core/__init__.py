"""Core configuration."""

from .config import MAX_SEQUENCE_LENGTH, EngineConfig, load_config

__all__ = [
    "MAX_SEQUENCE_LENGTH",
    "EngineConfig",
    "load_config",
]
