"""Configuration module - exports Settings, load_config and resolve_library_path."""

from lectro.config.loader import load_config, resolve_library_path
from lectro.config.settings import Settings

__all__ = ["Settings", "load_config", "resolve_library_path"]
