import logging
import re
from pathlib import Path
from typing import Dict, Optional, Tuple

from rich.table import Table

from ..models import LaravelOptions, Preset
from ..settings import Settings
from ..utils.store import PresetStore
from .environment import database_choices, list_dev_environments, php_extensions
from .installer import installation_directory
from .prompts import Prompter
from .versions import fetch_versions

logger = logging.getLogger(__name__)

NAME_PATTERN = re.compile(r"^[\w\-.]+$")

STARTER_KITS = {"none": "No starter kit", "breeze": "Laravel Breeze", "jetstream": "Laravel Jetstream"}
BREEZE_STACKS = {
    "blade": "Blade with Alpine",
    "livewire": "Livewire (Volt Class API) with Alpine",
    "livewire-functional": "Livewire (Volt Functional API) with Alpine",
    "react": "React with Inertia",
    "vue": "Vue with Inertia",
    "api": "API only",
}
BREEZE_INERTIA_FEATURES = {
    "dark": "Dark mode",
    "ssr": "Inertia SSR",
    "typescript": "TypeScript",
    "eslint": "ESLint with Prettier",
}
JETSTREAM_STACKS = {"livewire": "Livewire", "inertia": "Vue with Inertia"}
JETSTREAM_FEATURES = {
    "api": "API support",
    "dark": "Dark mode",
    "verification": "Email verification",
    "teams": "Team support",
}
TEST_FRAMEWORKS = {"pest": "Pest", "phpunit": "PHPUnit"}


def validate_name(value: str) -> Optional[str]:
    if not NAME_PATTERN.match(value):
        return "The name may only contain letters, numbers, dashes, underscores, and periods."
    return None


def application_exists(directory: Path, cwd: Path) -> bool:
    return directory.exists() and directory != cwd


class Wizard:
    def __init__(self, prompter: Prompter, store: PresetStore, settings: Settings) -> None:
        self.prompter = prompter
        self.store = store
        self.settings = settings

    def main_menu(self) -> Tuple[str, Optional[str]]:
        """Ask whether to install a preset or go interactive; returns (mode, preset name)."""
        p = self.prompter
        p.info("Welcome to Laravel Architect!")
        p.info("This tool will help you scaffold a new Laravel application.")
        p.info("You can choose to install a preset or interactively create a new application")

        def no_presets(value):
            if value == "preset" and not self.store.list():
                return "No presets found. Please select the interactive option to create a new application interactively."
            return None

        while True:
            mode = p.select(
                "What do you want to do?",
                {
                    "preset": "Create a new application from a preset",
                    "interactive": "Interactively create a new application",
                },
                default="preset",
                validate=no_presets,
            )
            if mode == "interactive":
                return mode, None
            choices: Dict[str, str] = {key: preset.name for key, preset in self.store.list().items()}
            choices["back"] = "Back to the main menu"
            picked = p.select("Which preset do you want to install?", choices, default="back")
            if picked != "back":
                return mode, picked
            p.new_screen()

    def ask_name(self, cwd: Path) -> Tuple[Optional[str], bool]:
        """Returns the project name (None when the user backs out) and whether to force."""
        p = self.prompter
        p.new_screen()
        name = p.text(
            "What is the name of your project?",
            placeholder="E.g. example-app",
            required="The project name is required.",
            validate=validate_name,
        )
        if application_exists(installation_directory(cwd, name), cwd):
            p.error("Application already exists.")
            if not p.confirm("Would you like to force the installation?", default=False):
                p.info("Installation cancelled.")
                return None, False
            return name, True
        return name, False

    def build_preset(self, advanced: bool = False) -> Preset:
        preset = Preset(name="custom")
        options = LaravelOptions()

        if advanced:
            preset.laravel_version = self.ask_version()
            options.dev_environment, options.dev_environment_options = self.ask_dev_environment()

        options.starter_kit, options.stack, options.stack_options = self.ask_stack()
        options.database, options.migrate = self.ask_database()
        options.test_framework = self.prompter.select(
            "Which testing framework do you prefer?", TEST_FRAMEWORKS, default="pest"
        )
        preset.laravel_options = options
        return preset

    def ask_version(self) -> Optional[str]:
        self.prompter.new_screen()
        with self.prompter.console.status("Fetching Laravel versions..."):
            versions = fetch_versions(self.settings)
        logger.debug("offering versions %s", list(versions))
        version = self.prompter.select(
            "Which version of Laravel would you like to install?", versions, default=next(iter(versions))
        )
        return version or None

    def ask_dev_environment(self):
        p = self.prompter
        p.new_screen()
        environments = list_dev_environments()

        def sail_unavailable(value):
            return "Sail integration is not available yet" if value == "sail" else None

        environment = p.select(
            "Which development environment would you like to use?",
            environments,
            default=next(iter(environments)),
            validate=sail_unavailable,
        )
        options = {}
        if environment == "none":
            options["port"] = p.text("Which port would you like to use?", default=self.settings.default_port)
        return environment, options

    def ask_stack(self):
        p = self.prompter
        p.new_screen()
        kit = p.select("Would you like to install a first-party starter kit?", STARTER_KITS, default="none")
        stack, stack_options = None, []
        if kit == "breeze":
            stack = p.select("Which Breeze stack would you like to install?", BREEZE_STACKS, default="blade")
            if stack in ("react", "vue"):
                stack_options = p.multiselect(
                    "Would you like any optional features?", BREEZE_INERTIA_FEATURES, default=[]
                )
            elif stack != "api" and p.confirm("Would you like dark mode support?", default=False):
                stack_options = ["dark"]
        elif kit == "jetstream":
            stack = p.select("Which Jetstream stack would you like to install?", JETSTREAM_STACKS, default="livewire")
            features = dict(JETSTREAM_FEATURES)
            if stack == "inertia":
                features["ssr"] = "Inertia SSR"
            stack_options = p.multiselect("Would you like any optional features?", features, default=[])
        return kit, stack, stack_options

    def ask_database(self):
        p = self.prompter
        p.new_screen()
        choices = database_choices(php_extensions(self.settings.php))
        database = p.select("Which database will your application use?", choices, default=next(iter(choices)))
        migrate = p.confirm("Would you like to run the database migrations after installation?", default=True)
        return database, migrate

    def review(self, preset: Preset) -> None:
        options = preset.laravel_options
        table = Table(title="Your choices", show_header=False, title_justify="left")
        table.add_column(style="cyan")
        table.add_column()
        table.add_row("Laravel version", preset.laravel_version or "latest")
        table.add_row("Starter kit", STARTER_KITS[options.starter_kit])
        if options.stack:
            table.add_row("Stack", options.stack)
        if options.stack_options:
            table.add_row("Features", ", ".join(options.stack_options))
        table.add_row("Database", options.database + (" (migrated)" if options.migrate else ""))
        table.add_row("Dev environment", options.dev_environment or "-")
        table.add_row("Testing", TEST_FRAMEWORKS[options.test_framework])
        self.prompter.console.print(table)

    def offer_save(self, preset: Preset) -> Preset:
        p = self.prompter
        if not p.confirm("Would you like to save these choices as a preset?", default=False):
            return preset
        name = p.text("Preset name", required="The preset name is required.", validate=validate_name)
        if self.store.exists(name) and not p.confirm(f"Preset '{name}' exists. Overwrite it?", default=False):
            return preset
        preset = preset.model_copy(update={"name": name})
        path = self.store.save(preset)
        p.info(f"Preset saved to {path}")
        return preset
