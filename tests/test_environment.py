from laravel_architect.generator import environment
from laravel_architect.generator.environment import database_choices, list_dev_environments


def test_database_choices_put_available_drivers_first():
    choices = database_choices({"pdo_pgsql", "pdo_sqlite"})
    assert list(choices) == ["sqlite", "pgsql", "mysql", "mariadb", "sqlsrv"]
    assert choices["pgsql"] == "PostgreSQL"
    assert choices["mysql"] == "MySQL (Missing PDO extension)"


def test_list_dev_environments(monkeypatch):
    monkeypatch.setattr(environment.shutil, "which", lambda name: "/usr/bin/herd" if name == "herd" else None)
    assert list_dev_environments() == {
        "herd": "Herd",
        "none": "PHP built-in server",
        "valet": "Valet (Not installed)",
        "sail": "Laravel Sail (Docker not installed)",
    }


def test_php_extensions_without_php(monkeypatch):
    monkeypatch.setattr(environment.shutil, "which", lambda name: None)
    assert environment.php_extensions() == set()


def test_parked_directory(monkeypatch):
    monkeypatch.setattr(environment, "run_on_valet_or_herd", lambda command: '["/home/me/Sites"]')
    assert environment.is_parked_on_herd_or_valet("/home/me/Sites/demo")
    assert not environment.is_parked_on_herd_or_valet("/tmp/demo")
