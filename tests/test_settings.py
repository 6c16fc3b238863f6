from pathlib import Path

import pytest

from laravel_architect.errors import ConfigurationError
from laravel_architect.settings import Settings, load_settings


def test_defaults_without_file(tmp_path: Path):
    assert load_settings(tmp_path / "config.yml") == Settings()
    assert load_settings() == Settings()


def test_empty_file_means_defaults(tmp_path: Path):
    path = tmp_path / "config.yml"
    path.write_text("")
    assert load_settings(path) == Settings()


def test_overrides(tmp_path: Path):
    path = tmp_path / "config.yml"
    path.write_text("composer: /usr/local/bin/composer\nphp: php8.3\nhttp_timeout: 2.5\n")
    settings = load_settings(path)
    assert settings.composer == "/usr/local/bin/composer"
    assert settings.php == "php8.3"
    assert settings.http_timeout == 2.5
    assert settings.indent == "    "


@pytest.mark.parametrize("content", ["composr: x\n", "- a\n- b\n", "php: [unclosed\n"])
def test_invalid_files(tmp_path: Path, content):
    path = tmp_path / "config.yml"
    path.write_text(content)
    with pytest.raises(ConfigurationError):
        load_settings(path)
