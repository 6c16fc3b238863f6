import logging
import os
import re
import shutil
from pathlib import Path
from typing import List, Optional

from rich.console import Console

from ..errors import ConfigurationError
from ..models import DEV_MASTER, Preset
from ..settings import Settings
from ..utils.commands import CommandRunner
from .environment import is_executable_available, is_parked_on_herd_or_valet

logger = logging.getLogger(__name__)

DB_KEYS = "HOST|PORT|DATABASE|USERNAME|PASSWORD"
DEFAULT_PORTS = {"pgsql": "5432", "sqlsrv": "1433"}
STARTER_KIT_PACKAGES = {"breeze": "laravel/breeze --dev", "jetstream": "laravel/jetstream"}


def version_constraint(version) -> str:
    if not version:
        return ""
    if version == DEV_MASTER:
        return DEV_MASTER
    if version.isdigit():
        return f'"^{version}.0"'
    return f'"{version}"'


def installation_directory(cwd: Path, name: str) -> Path:
    return cwd if name == "." else cwd / name


def _replace_in_file(path: Path, pattern: str, replacement: str) -> None:
    if not path.is_file():
        return
    text = path.read_text(encoding="utf-8")
    path.write_text(re.sub(pattern, replacement, text, flags=re.MULTILINE), encoding="utf-8")


def configure_database(directory: Path, database: str, name: str) -> None:
    """Point ``.env`` and ``.env.example`` at the chosen engine."""
    for env_file in (directory / ".env", directory / ".env.example"):
        _replace_in_file(env_file, r"^DB_CONNECTION=.*$", f"DB_CONNECTION={database}")
        if database == "sqlite":
            _replace_in_file(env_file, rf"^(DB_(?:{DB_KEYS})=)", r"# \1")
            continue
        _replace_in_file(env_file, rf"^# (DB_(?:{DB_KEYS})=)", r"\1")
        if database in DEFAULT_PORTS:
            _replace_in_file(env_file, r"^DB_PORT=3306$", f"DB_PORT={DEFAULT_PORTS[database]}")
        db_name = name.lower().replace("-", "_") if name != "." else directory.name.lower().replace("-", "_")
        _replace_in_file(env_file, r"^DB_DATABASE=laravel$", f"DB_DATABASE={db_name}")


class ProjectInstaller:
    def __init__(self, runner: CommandRunner, settings: Settings, cwd: Path, console: Optional[Console] = None) -> None:
        self.runner = runner
        self.settings = settings
        self.cwd = Path(cwd)
        self.console = console or runner.console

    def create_commands(self, preset: Preset, name: str) -> List[str]:
        directory = installation_directory(self.cwd, name)
        create = f'{self.settings.composer} create-project laravel/laravel "{name}"'
        constraint = version_constraint(preset.laravel_version)
        if constraint:
            create += f" {constraint}"
        commands = [create + " --remove-vcs --prefer-dist"]
        if os.name != "nt":
            commands.append(f'chmod 755 "{directory / "artisan"}"')
        return commands

    def setup_commands(self, preset: Preset, name: str) -> List[str]:
        options = preset.laravel_options
        composer, php = self.settings.composer, self.settings.php
        pest = options.test_framework == "pest"
        commands: List[str] = []

        if options.starter_kit != "none":
            if not options.stack:
                raise ConfigurationError(f"Preset '{preset.name}' picks {options.starter_kit} without a stack")
            flags = "".join(f" --{flag}" for flag in options.stack_options)
            if pest:
                flags += " --pest"
            commands.append(f"{composer} require {STARTER_KIT_PACKAGES[options.starter_kit]}")
            commands.append(f"{php} artisan {options.starter_kit}:install {options.stack}{flags}")
        elif pest:
            commands += [
                f"{composer} remove phpunit/phpunit --dev --no-update",
                f"{composer} require pestphp/pest pestphp/pest-plugin-laravel --no-update --dev",
                f"{composer} update",
                f"{php} ./vendor/bin/pest --init",
            ]

        if options.migrate:
            commands.append(f"{php} artisan migrate --graceful")

        if options.dev_environment in ("herd", "valet"):
            directory = installation_directory(self.cwd, name)
            if is_parked_on_herd_or_valet(str(directory)):
                logger.debug("%s is already served by a parked directory", directory)
            else:
                commands.append(f"{options.dev_environment} link")
        elif options.dev_environment == "sail":
            logger.warning("Sail integration is not available yet, skipping")

        if is_executable_available("git"):
            commands += ["git init -q", "git add .", 'git commit -q -m "Set up a fresh Laravel app"']
        return commands

    def scaffold(self, preset: Preset, name: str, force: bool = False, dry_run: bool = False) -> int:
        directory = installation_directory(self.cwd, name)
        create = self.create_commands(preset, name)
        setup = self.setup_commands(preset, name)

        if dry_run:
            self.console.print(f"[bold]→[/] in {self.cwd}")
            for command in self.runner.prepare(create):
                self.console.print(f"{self.settings.indent}{command}", markup=False, highlight=False, soft_wrap=True)
            self.console.print(f"[bold]→[/] in {directory}")
            for command in self.runner.prepare(setup):
                self.console.print(f"{self.settings.indent}{command}", markup=False, highlight=False, soft_wrap=True)
            return 0

        if force and directory != self.cwd and directory.exists():
            logger.debug("removing existing %s", directory)
            try:
                shutil.rmtree(directory)
            except OSError as e:
                raise ConfigurationError(f"Could not remove {directory}: {e}") from e

        self.runner.append_all(create)
        self.runner.run_stashed(cwd=str(self.cwd), check=True)

        try:
            configure_database(directory, preset.laravel_options.database, name)
        except OSError as e:
            raise ConfigurationError(f"Could not configure the database in {directory}: {e}") from e

        self.runner.append_all(setup)
        self.runner.run_stashed(cwd=str(directory), check=True)

        self.next_steps(preset, name)
        return 0

    def next_steps(self, preset: Preset, name: str) -> None:
        options = preset.laravel_options
        self.console.print(f"\n  [green]✅ Application ready in [bold]{name}[/bold].[/]")
        if name != ".":
            self.console.print(f"{self.settings.indent}cd {name}")
        if options.dev_environment in ("herd", "valet"):
            self.console.print(f"{self.settings.indent}Open http://{installation_directory(self.cwd, name).name}.test")
        else:
            port = options.dev_environment_options.get("port", self.settings.default_port)
            self.console.print(f"{self.settings.indent}{self.settings.php} artisan serve --port={port}")
