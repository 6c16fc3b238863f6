import json
import logging
import os
import shutil
import subprocess
from typing import Dict, List, Optional, Set

logger = logging.getLogger(__name__)

DATABASES = {
    "sqlite": ("SQLite", "pdo_sqlite"),
    "mysql": ("MySQL", "pdo_mysql"),
    "mariadb": ("MariaDB", "pdo_mysql"),
    "pgsql": ("PostgreSQL", "pdo_pgsql"),
    "sqlsrv": ("SQL Server", "pdo_sqlsrv"),
}


def is_executable_available(name: str) -> bool:
    return shutil.which(name) is not None


def list_dev_environments() -> Dict[str, str]:
    def label(text, tool, missing="Not installed"):
        return text if is_executable_available(tool) else f"{text} ({missing})"

    return {
        "herd": label("Herd", "herd"),
        "none": "PHP built-in server",
        "valet": label("Valet", "valet"),
        "sail": label("Laravel Sail", "docker", "Docker not installed"),
    }


def php_extensions(php: str = "php") -> Set[str]:
    if not is_executable_available(php):
        return set()
    try:
        out = subprocess.run([php, "-m"], capture_output=True, text=True, check=True).stdout
    except (OSError, subprocess.CalledProcessError) as e:
        logger.debug("php -m failed: %s", e)
        return set()
    return {line.strip().lower() for line in out.splitlines() if line.strip() and not line.startswith("[")}


def database_choices(extensions: Set[str]) -> Dict[str, str]:
    """Engines with a loaded PDO driver come first; the rest are flagged."""
    available = lambda key: DATABASES[key][1] in extensions
    ordered = sorted(DATABASES, key=lambda key: 0 if available(key) else 1)
    return {
        key: DATABASES[key][0] + ("" if available(key) else " (Missing PDO extension)")
        for key in ordered
    }


def run_on_valet_or_herd(command: str) -> Optional[str]:
    for tool in ("herd", "valet"):
        try:
            proc = subprocess.run([tool, command, "-v"], capture_output=True, text=True)
        except OSError:
            continue
        if proc.returncode == 0:
            return proc.stdout.strip()
    return None


def is_parked_on_herd_or_valet(directory: str) -> bool:
    output = run_on_valet_or_herd("paths")
    if output is None:
        return False
    try:
        paths: List[str] = json.loads(output)
    except ValueError:
        return False
    return os.path.dirname(directory) in paths
