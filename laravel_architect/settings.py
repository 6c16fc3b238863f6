from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError

from .errors import ConfigurationError

CONFIG_FILENAME = "config.yml"


class Settings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    versions_url: str = "https://laravelversions.com/api/versions"
    http_timeout: float = 10.0
    composer: str = "composer"
    php: str = "php"
    indent: str = "    "
    default_port: str = "8000"


def load_settings(path: Optional[Path] = None) -> Settings:
    """Read ``config.yml`` next to the presets; a missing file means defaults."""
    if path is None or not path.exists():
        return Settings()
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"{path} must contain a mapping")
    try:
        return Settings(**data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid settings in {path}: {e}") from e
