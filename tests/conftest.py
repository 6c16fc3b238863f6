import io
from pathlib import Path

import pytest
from rich.console import Console


@pytest.fixture
def home(tmp_path: Path, monkeypatch) -> Path:
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    return home


@pytest.fixture
def preset_dir(home: Path) -> Path:
    directory = home / ".laravel-architect"
    directory.mkdir()
    return directory


@pytest.fixture
def console() -> Console:
    return Console(file=io.StringIO(), width=200)
