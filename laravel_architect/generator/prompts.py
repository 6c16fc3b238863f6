from typing import Callable, Dict, List, Optional

from rich.console import Console
from rich.prompt import Confirm, Prompt
from rich.table import Table

Validator = Callable[[str], Optional[str]]

BANNER = r"""
  _                               _                       _     _ _            _
 | |                             | |       /\            | |   (_) |          | |
 | |     __ _ _ __ __ ___   _____| |      /  \   _ __ ___| |__  _| |_ ___  ___| |_
 | |    / _` | '__/ _` \ \ / / _ \ |     / /\ \ | '__/ __| '_ \| | __/ _ \/ __| __|
 | |___| (_| | | | (_| |\ V /  __/ |    / ____ \| | | (__| | | | | ||  __/ (__| |_
 |______\__,_|_|  \__,_| \_/ \___|_|   /_/    \_\_|  \___|_| |_|_|\__\___|\___|\__|
"""


class Prompter:
    """Numbered-menu prompts on top of rich."""

    def __init__(self, console: Console) -> None:
        self.console = console

    def new_screen(self) -> None:
        self.console.clear()
        self.console.print(BANNER, style="blue", highlight=False)

    def info(self, message: str) -> None:
        self.console.print(f"  [green]{message}[/]")

    def warning(self, message: str) -> None:
        self.console.print(f"  [yellow]{message}[/]")

    def error(self, message: str) -> None:
        self.console.print(f"  [red]{message}[/]")

    def _menu(self, label: str, options: Dict[str, str], marked=None) -> List[str]:
        keys = list(options)
        table = Table.grid(padding=(0, 2))
        table.add_column(style="cyan", justify="right")
        table.add_column()
        for i, key in enumerate(keys, 1):
            if marked is None:
                table.add_row(f"{i})", options[key])
            else:
                table.add_row(f"{i})", ("● " if key in marked else "○ ") + options[key])
        self.console.print(f"[bold]▶ {label}[/]")
        self.console.print(table)
        return keys

    def select(self, label: str, options: Dict[str, str], default: Optional[str] = None,
               validate: Optional[Validator] = None) -> str:
        keys = self._menu(label, options)
        default_index = str(keys.index(default) + 1) if default in keys else "1"
        while True:
            answer = Prompt.ask("  Enter number", console=self.console, default=default_index)
            if not answer.isdigit() or not 1 <= int(answer) <= len(keys):
                self.error("Invalid choice. Please try again.")
                continue
            key = keys[int(answer) - 1]
            problem = validate(key) if validate else None
            if problem:
                self.error(problem)
                continue
            return key

    def multiselect(self, label: str, options: Dict[str, str], default: Optional[List[str]] = None) -> List[str]:
        keys = self._menu(label, options, marked=tuple(default or ()))
        while True:
            answer = Prompt.ask(
                "  Enter numbers separated by spaces (empty for none)",
                console=self.console,
                default=" ".join(str(keys.index(k) + 1) for k in default or () if k in keys),
                show_default=False,
            ).strip()
            if not answer:
                return []
            parts = answer.replace(",", " ").split()
            if all(p.isdigit() and 1 <= int(p) <= len(keys) for p in parts):
                picked = {keys[int(p) - 1] for p in parts}
                return [k for k in keys if k in picked]
            self.error("Invalid choice detected. Please try again.")

    def confirm(self, label: str, default: bool = False) -> bool:
        return Confirm.ask(f"[bold]▶ {label}[/]", console=self.console, default=default)

    def text(self, label: str, default: Optional[str] = None, placeholder: str = "",
             required: Optional[str] = None, validate: Optional[Validator] = None) -> str:
        hint = f" [dim]{placeholder}[/]" if placeholder else ""
        while True:
            answer = Prompt.ask(f"[bold]▶ {label}[/]{hint}", console=self.console, default=default) or ""
            answer = answer.strip()
            if not answer and required:
                self.error(required)
                continue
            problem = validate(answer) if validate and answer else None
            if problem:
                self.error(problem)
                continue
            return answer
