from datetime import date

from vaulttasks.config import get_settings
from vaulttasks.models.tasks import Task
from vaulttasks.services.query import evaluate_query
from vaulttasks.services.vault import find_all_tasks, resolve_path


def list_tasks(path: str | None = None) -> list[Task]:
    """All tasks under ``path`` (relative to the vault, default the vault root)."""
    directory = resolve_path(path, get_settings().vault_directory)
    return find_all_tasks(directory)


def query_tasks(query: str, path: str | None = None, today: date | str | None = None) -> list[Task]:
    """Tasks under ``path`` matching every line of ``query``."""
    return evaluate_query(list_tasks(path), query, today=today)
