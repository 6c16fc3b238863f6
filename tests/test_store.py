import json
from pathlib import Path

import pytest

from laravel_architect.errors import ConfigurationError, NotFoundError
from laravel_architect.models import LaravelOptions, Preset
from laravel_architect.utils.store import PresetStore, resolve_directory

ACME = {"name": "acme", "laravelVersion": "11", "laravelOptions": {"database": "sqlite"}}


def test_resolve_directory_creates_it(home: Path):
    directory = resolve_directory()
    assert directory == home / ".laravel-architect"
    assert directory.is_dir()


def test_resolve_directory_without_home(monkeypatch):
    monkeypatch.delenv("HOME", raising=False)
    monkeypatch.delenv("USERPROFILE", raising=False)
    with pytest.raises(ConfigurationError):
        resolve_directory()


def test_list_skips_invalid_and_non_json(preset_dir: Path):
    (preset_dir / "acme.json").write_text(json.dumps(ACME))
    (preset_dir / "broken.json").write_text("not json")
    (preset_dir / "notes.txt").write_text(json.dumps(ACME))

    store = PresetStore()
    presets = store.list()

    assert list(presets) == ["acme"]
    assert presets["acme"].laravel_version == "11"
    assert presets["acme"].laravel_options.database == "sqlite"
    assert store.exists("acme")
    assert not store.exists("broken")
    assert not store.exists("notes")


def test_list_skips_presets_with_unknown_options(preset_dir: Path):
    bad = dict(ACME, name="typo", laravelOptions={"databse": "mysql"})
    (preset_dir / "typo.json").write_text(json.dumps(bad))
    assert PresetStore().list() == {}


def test_list_is_cached_until_forced(preset_dir: Path):
    store = PresetStore()
    assert store.list() == {}
    first_load = store.loaded_at

    (preset_dir / "acme.json").write_text(json.dumps(ACME))
    assert store.list() == {}
    assert store.loaded_at == first_load

    assert "acme" in store.list(force_reload=True)


def test_keys_are_file_stems(preset_dir: Path):
    (preset_dir / "work.json").write_text(json.dumps(ACME))
    store = PresetStore()
    assert list(store.list()) == ["work"]
    assert store.get("work").name == "acme"
    assert store.get("acme").name == "acme"
    assert store.get("missing") is None


def test_save_round_trips_every_field(preset_dir: Path):
    preset = Preset(
        name="full",
        laravel_version="dev-master",
        laravel_options=LaravelOptions(
            starter_kit="breeze",
            stack="react",
            stack_options=["dark", "typescript"],
            database="pgsql",
            migrate=False,
            dev_environment="none",
            dev_environment_options={"port": "8080"},
            test_framework="phpunit",
        ),
    )
    store = PresetStore()
    path = store.save(preset)

    assert path == preset_dir / "full.json"
    raw = json.loads(path.read_text())
    assert raw["laravelVersion"] == "dev-master"
    assert raw["laravelOptions"]["stackOptions"] == ["dark", "typescript"]
    assert raw["laravelOptions"]["devEnvironmentOptions"] == {"port": "8080"}

    assert PresetStore().list() == {"full": preset}


def test_save_overwrites(preset_dir: Path):
    store = PresetStore()
    store.save(Preset(name="acme", laravel_version="10"))
    store.save(Preset(name="acme", laravel_version="11"))
    assert PresetStore().require("acme").laravel_version == "11"


def test_integer_version_is_read_as_string(preset_dir: Path):
    (preset_dir / "acme.json").write_text(json.dumps(dict(ACME, laravelVersion=11)))
    assert PresetStore().require("acme").laravel_version == "11"


def test_delete(preset_dir: Path):
    store = PresetStore()
    store.save(Preset(name="acme"))
    assert store.exists("acme")
    store.delete("acme")
    assert not store.exists("acme")
    assert not (preset_dir / "acme.json").exists()
    with pytest.raises(NotFoundError):
        store.delete("acme")


def test_require_missing(home: Path):
    with pytest.raises(NotFoundError):
        PresetStore().require("nope")


def test_explicit_directory(tmp_path: Path):
    store = PresetStore(tmp_path / "presets")
    store.save(Preset(name="acme"))
    assert (tmp_path / "presets" / "acme.json").is_file()
    assert store.exists("acme")


@pytest.mark.parametrize("name", ["", "../escape", "a/b"])
def test_preset_name_must_be_a_file_stem(name):
    with pytest.raises(ValueError):
        Preset(name=name)


def test_list_skips_files_that_are_not_utf8(preset_dir: Path):
    (preset_dir / "a.json").write_bytes(b'{"name":"caf\xe9"}')
    (preset_dir / "acme.json").write_text(json.dumps(ACME))
    store = PresetStore()
    assert list(store.list()) == ["acme"]
    assert not store.exists("a")
