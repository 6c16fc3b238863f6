import json
import logging
import os
import time
from pathlib import Path
from typing import Dict, Optional

from pydantic import ValidationError

from ..errors import ConfigurationError, NotFoundError
from ..models import Preset

logger = logging.getLogger(__name__)

DIRECTORY_NAME = ".laravel-architect"


def resolve_directory() -> Path:
    """Return the per-user preset directory, creating it when missing."""
    home = os.environ.get("USERPROFILE" if os.name == "nt" else "HOME")
    if not home:
        raise ConfigurationError("Could not determine user's home directory.")
    directory = Path(home) / DIRECTORY_NAME
    directory.mkdir(mode=0o755, parents=True, exist_ok=True)
    return directory


class PresetStore:
    def __init__(self, directory: Optional[Path] = None):
        self._directory = Path(directory) if directory is not None else None
        self._presets: Optional[Dict[str, Preset]] = None
        self.loaded_at: Optional[float] = None

    @property
    def directory(self) -> Path:
        if self._directory is not None:
            self._directory.mkdir(mode=0o755, parents=True, exist_ok=True)
            return self._directory
        return resolve_directory()

    def list(self, force_reload: bool = False) -> Dict[str, Preset]:
        if self._presets is None or force_reload:
            self._presets = self._scan(self.directory)
            self.loaded_at = time.time()
        return self._presets

    def get(self, name: str) -> Optional[Preset]:
        presets = self.list()
        if name in presets:
            return presets[name]
        return next((p for p in presets.values() if p.name == name), None)

    def require(self, name: str) -> Preset:
        preset = self.get(name)
        if preset is None:
            raise NotFoundError(f"Preset '{name}' not found.")
        return preset

    def exists(self, name: str) -> bool:
        return name in self.list()

    def save(self, preset: Preset) -> Path:
        path = self.directory / f"{preset.name}.json"
        path.write_text(preset.to_json() + "\n", encoding="utf-8")
        logger.debug("saved preset %s to %s", preset.name, path)
        if self._presets is not None:
            self._presets[preset.name] = preset
        return path

    def delete(self, name: str) -> None:
        path = self.directory / f"{name}.json"
        if not path.is_file():
            raise NotFoundError(f"Preset '{name}' not found.")
        path.unlink()
        if self._presets is not None:
            self._presets.pop(name, None)

    def _scan(self, directory: Path) -> Dict[str, Preset]:
        presets: Dict[str, Preset] = {}
        for path in sorted(directory.iterdir()):
            if not path.is_file() or path.suffix != ".json":
                continue
            try:
                raw = path.read_bytes().decode("utf-8")
                json.loads(raw)
            except ValueError:
                logger.debug("skipping %s: not valid UTF-8 JSON", path)
                continue
            try:
                presets[path.stem] = Preset.from_json(raw)
            except ValidationError as e:
                logger.warning("skipping preset %s: %s", path.name, e)
        return presets
