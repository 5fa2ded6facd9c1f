"""YAML configuration loader and library-root resolution.

# ─── CONFIGURATION HIERARCHY ──────────────────────────────────────────
#
# Configuration is loaded in layers (later layers override earlier):
#
#   1. config/config.yaml  - Static defaults checked into the repo
#   2. .env file           - Local overrides (not committed)
#   3. Environment vars    - Set at deploy time
#
# The library root (where lectro_vectors.json lives) is resolved separately
# because its precedence differs: an explicit LECTRO_LIBRARY_PATH always
# wins, then ``library.path`` from the YAML file, then ./library.
# ──────────────────────────────────────────────────────────────────────
"""

from pathlib import Path
from typing import Any

import structlog
import yaml

from lectro.config.settings import Settings
from lectro.utils.errors import ConfigurationError

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_LIBRARY_DIR = "library"


def load_config(path: str = "config/config.yaml", settings: Settings | None = None) -> dict:
    """Load YAML config and merge with environment-based Settings.

    Environment variables (via Settings) override YAML values where keys overlap.

    Args:
        path: Path to the YAML configuration file.
        settings: Pre-built settings; a fresh ``Settings()`` is read when omitted.

    Returns:
        Fully resolved configuration dictionary.

    Raises:
        ConfigurationError: If the YAML file exists but cannot be parsed.
    """
    config_path = Path(path)
    if config_path.exists():
        try:
            with open(config_path, encoding="utf-8") as f:
                yaml_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigurationError(
                message=f"Invalid configuration file {config_path}: {exc}"
            ) from exc
    else:
        yaml_config = {}

    settings = settings or Settings()
    env_overrides = {
        "app": {
            "host": settings.app_host,
            "port": settings.app_port,
            "env": settings.app_env,
        },
        "llm": {
            "available_providers": settings.get_available_llm_providers(),
        },
        "logging": {
            "level": settings.log_level,
        },
    }

    _deep_merge(yaml_config, env_overrides)
    return yaml_config


def resolve_library_path(
    settings: Settings,
    config: dict[str, Any] | None = None,
    cwd: Path | None = None,
) -> Path:
    """Return the library root directory, creating it when missing.

    Precedence: ``LECTRO_LIBRARY_PATH`` -> ``library.path`` in the YAML
    config -> ``<cwd>/library``.  If the chosen directory cannot be created
    (e.g. a permission error on ``/library``), falls back to the default
    under *cwd*.

    Raises:
        ConfigurationError: If even the default directory cannot be created.
    """
    base = cwd or Path.cwd()
    default = base / _DEFAULT_LIBRARY_DIR

    configured = ""
    if settings.lectro_library_path:
        configured = settings.lectro_library_path
    elif config:
        configured = (config.get("library") or {}).get("path") or ""

    # Relative paths resolve against *cwd*; joining an absolute path keeps it as is.
    candidate = base / Path(configured).expanduser() if configured else default

    if candidate.is_dir():
        return candidate

    try:
        logger.info("library_dir_create", path=str(candidate))
        candidate.mkdir(parents=True, exist_ok=True)
        return candidate
    except OSError as exc:
        if candidate == default:
            raise ConfigurationError(
                message=f"Failed to create library path at {candidate}: {exc}"
            ) from exc
        logger.warning(
            "library_dir_create_failed",
            path=str(candidate),
            fallback=str(default),
            error=str(exc),
        )

    try:
        default.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ConfigurationError(
            message=f"Failed to create default library path at {default}: {exc}"
        ) from exc
    return default


def _deep_merge(base: dict, overrides: dict) -> None:
    """Recursively merge overrides into base dict, mutating base in place."""
    for key, value in overrides.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
