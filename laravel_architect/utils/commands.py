import logging
import os
import subprocess
import threading
from typing import Dict, Iterable, List, Optional

from rich.console import Console
from rich.markup import escape

from ..errors import CommandFailure, ProcessStartError

logger = logging.getLogger(__name__)

TTY_PATH = "/dev/tty"
# Tools that neither accept nor need --no-ansi / --quiet
UNFLAGGED_PREFIXES = ("chmod", "git")


def add_flag(commands: Iterable[str], flag: str) -> List[str]:
    return [c if c.startswith(UNFLAGGED_PREFIXES) else f"{c} {flag}" for c in commands]


class CommandRunner:
    """Queues shell commands and runs them as one ``&&`` chain."""

    def __init__(
        self,
        console: Optional[Console] = None,
        *,
        quiet: bool = False,
        decorated: Optional[bool] = None,
        tty: Optional[bool] = None,
        indent: str = "    ",
    ) -> None:
        self.console = console or Console()
        self.quiet = quiet
        if decorated is None:
            decorated = self.console.is_terminal and self.console.color_system is not None
        self.decorated = decorated
        self.tty = tty
        self.indent = indent
        self._commands: List[str] = []
        self._lock = threading.Lock()

    @property
    def commands(self) -> List[str]:
        with self._lock:
            return list(self._commands)

    def append(self, command: str) -> None:
        with self._lock:
            self._commands.append(command)

    def append_all(self, commands: Iterable[str]) -> None:
        with self._lock:
            self._commands.extend(commands)

    def prepend(self, command: str) -> None:
        with self._lock:
            self._commands.insert(0, command)

    def prepend_all(self, commands: Iterable[str]) -> None:
        with self._lock:
            self._commands[:0] = list(commands)

    def clear(self) -> None:
        with self._lock:
            self._commands = []

    def prepare(self, commands: Iterable[str]) -> List[str]:
        """Apply the output flags the current console and quiet mode call for."""
        commands = list(commands)
        if not self.decorated:
            commands = add_flag(commands, "--no-ansi")
        if self.quiet:
            commands = add_flag(commands, "--quiet")
        return commands

    def run(
        self,
        commands: Iterable[str],
        cwd: Optional[str] = None,
        env: Optional[Dict[str, str]] = None,
        check: bool = False,
    ) -> subprocess.CompletedProcess:
        commands = self.prepare(commands)
        line = " && ".join(commands)
        if not line:
            logger.debug("nothing to run")
            return subprocess.CompletedProcess(line, 0, "")

        process_env = os.environ.copy()
        if env:
            process_env.update(env)

        logger.debug("running %r in %s", line, cwd or os.getcwd())
        tty = self._open_tty()
        try:
            if tty is not None:
                returncode, output = self._run_attached(line, cwd, process_env, tty)
            else:
                returncode, output = self._run_piped(line, cwd, process_env)
        finally:
            if tty is not None:
                tty.close()

        if check and returncode != 0:
            raise CommandFailure(returncode, line)
        return subprocess.CompletedProcess(line, returncode, output)

    def run_stashed(
        self,
        cwd: Optional[str] = None,
        env: Optional[Dict[str, str]] = None,
        check: bool = False,
    ) -> subprocess.CompletedProcess:
        with self._lock:
            commands, self._commands = self._commands, []
        return self.run(commands, cwd=cwd, env=env, check=check)

    def _open_tty(self):
        if self.tty is False or os.name == "nt":
            return None
        if self.tty is None and not (os.path.exists(TTY_PATH) and os.access(TTY_PATH, os.R_OK)):
            return None
        try:
            return open(TTY_PATH, "r+b", buffering=0)
        except OSError as e:
            self.console.print(f"  [black on yellow] WARN [/] {escape(str(e))}\n")
            return None

    def _start(self, line, cwd, env, **streams) -> subprocess.Popen:
        try:
            return subprocess.Popen(line, shell=True, cwd=cwd, env=env, **streams)
        except OSError as e:
            raise ProcessStartError(f"Could not start '{line}': {e}") from e

    def _run_attached(self, line, cwd, env, tty):
        proc = self._start(line, cwd, env, stdin=tty, stdout=tty, stderr=tty)
        return proc.wait(), ""

    def _run_piped(self, line, cwd, env):
        proc = self._start(
            line, cwd, env,
            stdout=subprocess.PIPE, stderr=subprocess.STDOUT,
            text=True, encoding="utf-8", errors="replace", bufsize=1,
        )
        captured = []
        try:
            with proc.stdout:
                for out in proc.stdout:
                    captured.append(out)
                    self.console.out(self.indent + out.rstrip("\n"), highlight=False)
        finally:
            returncode = proc.wait()
        return returncode, "".join(captured)
