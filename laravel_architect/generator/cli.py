from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..errors import ArchitectError, CommandFailure, NotFoundError
from ..logs import setup_logging
from ..settings import CONFIG_FILENAME, load_settings
from ..utils.commands import CommandRunner
from ..utils.store import PresetStore
from .installer import ProjectInstaller, installation_directory
from .prompts import Prompter
from .wizard import Wizard, application_exists, validate_name

app = typer.Typer(add_completion=False, help="Interactively scaffold new Laravel applications.")
presets_app = typer.Typer(help="Manage saved presets")
app.add_typer(presets_app, name="presets")

console = Console()


def fail(message: str, code: int = 1) -> None:
    console.print(f"[red]{escape(message)}[/]")
    raise typer.Exit(code)


@app.callback()
def callback():
    pass


@app.command("new")
def new(
    name: Optional[str] = typer.Argument(None, help="The name of the application"),
    interactive: bool = typer.Option(False, "--interactive", "-i", help="Interactively create a new application"),
    preset: Optional[str] = typer.Option(None, "--preset", "-p", help="Loads a preset"),
    advanced: bool = typer.Option(False, "--advanced", "-a", help="Advanced mode"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Dry run the commands"),
    debug: bool = typer.Option(False, "--debug", "-d", help="Debug the command"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Pass --quiet to the installers"),
    force: bool = typer.Option(False, "--force", "-f", help="Replace an existing directory"),
):
    """Interactively creates a new Laravel application."""
    setup_logging(debug)
    cwd = Path.cwd()
    try:
        store = PresetStore()
        settings = load_settings(store.directory / CONFIG_FILENAME)
        prompter = Prompter(console)
        wizard = Wizard(prompter, store, settings)

        if preset and store.get(preset) is None:
            raise NotFoundError(f"Preset '{preset}' not found.")
        if not interactive and not preset:
            prompter.new_screen()
            mode, preset = wizard.main_menu()
            interactive = mode == "interactive"

        if not name:
            name, confirmed = wizard.ask_name(cwd)
            if name is None:
                raise typer.Exit(1)
            force = force or confirmed
        else:
            problem = validate_name(name) if name != "." else None
            if problem:
                fail(problem)
            if application_exists(installation_directory(cwd, name), cwd) and not force and not dry_run:
                fail("Application already exists! Use --force to replace it.")

        if interactive:
            chosen = wizard.build_preset(advanced)
            wizard.review(chosen)
            chosen = wizard.offer_save(chosen)
        else:
            chosen = store.require(preset)

        runner = CommandRunner(console, quiet=quiet, indent=settings.indent)
        installer = ProjectInstaller(runner, settings, cwd)
        code = installer.scaffold(chosen, name, force=force, dry_run=dry_run)
    except CommandFailure as e:
        fail(str(e), e.returncode)
    except ArchitectError as e:
        fail(str(e))
    raise typer.Exit(code)


@presets_app.command("list")
def presets_list(debug: bool = typer.Option(False, "--debug", "-d")):
    setup_logging(debug)
    try:
        store = PresetStore()
        presets = store.list()
    except ArchitectError as e:
        fail(str(e))
    if not presets:
        console.print(f"[yellow]No presets found in {store.directory}[/]")
        return
    table = Table("Name", "Laravel", "Starter kit", "Database", "Testing")
    for key, item in presets.items():
        options = item.laravel_options
        kit = options.starter_kit + (f" ({options.stack})" if options.stack else "")
        table.add_row(key, item.laravel_version or "latest", kit, options.database, options.test_framework)
    console.print(table)


@presets_app.command("show")
def presets_show(name: str):
    try:
        item = PresetStore().require(name)
    except ArchitectError as e:
        fail(str(e))
    console.print_json(item.to_json())


@presets_app.command("delete")
def presets_delete(name: str, yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation")):
    try:
        store = PresetStore()
        if not store.exists(name):
            raise NotFoundError(f"Preset '{name}' not found.")
        if not yes and not typer.confirm(f"Delete preset '{name}'?"):
            raise typer.Exit(1)
        store.delete(name)
    except ArchitectError as e:
        fail(str(e))
    console.print(f"[green]Deleted preset:[/] {name}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
