"""
Runtime settings.

Values come from config/spotter.yaml at the repository root, then from
environment variables (a .env file is honoured). Settings are read at the
edges; engine functions receive explicit arguments.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from dotenv import load_dotenv

from .biomechanics import SafetyMetadataResolver, load_safety_tags
from .catalog import DATA_DIR, DEFAULT_CATALOG_PATH
from .exceptions import ConfigError
from .media import MediaProviderRegistry, build_default_registry, load_provider_mappings

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / "config" / "spotter.yaml"
DEFAULT_SAFETY_TAGS_PATH = DATA_DIR / "safety_tags.yaml"


@dataclass(frozen=True)
class Settings:
    """Resolved runtime configuration."""
    catalog_path: Path = DEFAULT_CATALOG_PATH
    safety_tags_path: Path = DEFAULT_SAFETY_TAGS_PATH
    min_safe_exercises: int = 5
    default_session_minutes: int = 45
    warmup_minutes: int = 5
    cooldown_minutes: int = 5
    log_level: str = "INFO"
    media_mappings_path: Optional[Path] = None

    def metadata_resolver(self) -> SafetyMetadataResolver:
        """Resolver backed by the configured manual tag table."""
        return SafetyMetadataResolver(load_safety_tags(self.safety_tags_path))

    def media_registry(self) -> MediaProviderRegistry:
        """Media registry with asset mappings from the configured file, if any."""
        mappings = load_provider_mappings(self.media_mappings_path) if self.media_mappings_path else None
        return build_default_registry(mappings)


def load_settings(config_path: Optional[Union[str, Path]] = None) -> Settings:
    """
    Load settings from YAML with environment overrides.

    Args:
        config_path: Path to spotter.yaml. If None, uses the repo default;
            a missing default file means built-in defaults.

    Returns:
        Settings

    Raises:
        ConfigError: If the file is unreadable or a value has the wrong type
    """
    load_dotenv()

    explicit = config_path is not None
    path = Path(config_path) if explicit else DEFAULT_CONFIG_PATH

    config: Dict[str, Any] = {}
    if path.exists():
        try:
            with open(path) as f:
                config = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Could not read config {path}: {e}") from e
        if not isinstance(config, dict):
            raise ConfigError(f"Config {path} must be a mapping")
    elif explicit:
        raise ConfigError(f"Config file not found: {path}")

    base = path.parent

    def path_value(env_name: str, key: str, default: Optional[Path]) -> Optional[Path]:
        value = os.getenv(env_name, config.get(key))
        if not value:
            return default
        value = Path(value)
        return value if value.is_absolute() else (base / value)

    def int_value(env_name: Optional[str], key: str, default: int) -> int:
        value = os.getenv(env_name) if env_name else None
        if value is None:
            value = config.get(key, default)
        try:
            result = int(value)
        except (TypeError, ValueError):
            raise ConfigError(f"'{key}' must be an integer, got {value!r}") from None
        if result < 0:
            raise ConfigError(f"'{key}' must not be negative, got {result}")
        return result

    return Settings(
        catalog_path=path_value("SPOTTER_CATALOG_PATH", "catalog_path", DEFAULT_CATALOG_PATH),
        safety_tags_path=path_value("SPOTTER_SAFETY_TAGS_PATH", "safety_tags_path", DEFAULT_SAFETY_TAGS_PATH),
        min_safe_exercises=int_value("SPOTTER_MIN_SAFE_EXERCISES", "min_safe_exercises", 5),
        default_session_minutes=int_value(None, "default_session_minutes", 45),
        warmup_minutes=int_value(None, "warmup_minutes", 5),
        cooldown_minutes=int_value(None, "cooldown_minutes", 5),
        log_level=str(os.getenv("SPOTTER_LOG_LEVEL", config.get("log_level", "INFO"))).upper(),
        media_mappings_path=path_value("SPOTTER_MEDIA_MAPPINGS_PATH", "media_mappings_path", None),
    )
