import io

from rich.console import Console

from laravel_architect.generator.prompts import Prompter
from laravel_architect.generator.wizard import Wizard, validate_name
from laravel_architect.models import Preset
from laravel_architect.settings import Settings
from laravel_architect.utils.store import PresetStore


def make_wizard(store, answers):
    console = Console(file=io.StringIO(), width=200)
    replies = iter(answers)
    console.input = lambda *args, **kwargs: next(replies)
    return Wizard(Prompter(console), store, Settings()), console


def test_validate_name():
    assert validate_name("example-app_1.0") is None
    assert validate_name("bad name") is not None


def test_main_menu_rejects_preset_mode_without_presets(preset_dir):
    wizard, console = make_wizard(PresetStore(), ["1", "2"])
    assert wizard.main_menu() == ("interactive", None)
    assert "No presets found" in console.file.getvalue()


def test_main_menu_back_then_pick(preset_dir):
    store = PresetStore()
    store.save(Preset(name="acme"))
    # preset mode, back, preset mode, acme
    wizard, _ = make_wizard(store, ["1", "2", "1", "1"])
    assert wizard.main_menu() == ("preset", "acme")


def test_ask_name_existing_directory(preset_dir, tmp_path):
    (tmp_path / "demo").mkdir()
    wizard, _ = make_wizard(PresetStore(), ["demo", "n"])
    assert wizard.ask_name(tmp_path) == (None, False)

    wizard, _ = make_wizard(PresetStore(), ["bad name", "demo", "y"])
    assert wizard.ask_name(tmp_path) == ("demo", True)
