"""Locate Markdown files inside the vault and extract their tasks."""

import logging
from pathlib import Path

from vaulttasks.exceptions import PathAccessError, VaultNotFoundError
from vaulttasks.models.tasks import Task
from vaulttasks.services.parser import parse_tasks

logger = logging.getLogger(__name__)


def resolve_path(relative_path: str | None, vault_directory: Path) -> Path:
    """Resolve a caller-supplied path inside the vault.

    Rejects ``..`` components and anything (including symlink targets) that
    resolves outside the vault directory.
    """
    relative_path = relative_path or "."
    if ".." in relative_path:
        raise PathAccessError(f"Access denied - directory traversal detected in path: {relative_path}")

    vault = Path(vault_directory).expanduser().resolve()
    if not vault.is_dir():
        raise VaultNotFoundError(f"Vault directory does not exist: {vault}")

    resolved = (vault / relative_path).resolve()
    if resolved != vault and vault not in resolved.parents:
        raise PathAccessError(f"Access denied - path outside vault directory: {relative_path}")
    if not resolved.exists():
        raise VaultNotFoundError(f"Path does not exist: {relative_path}")
    return resolved


def find_markdown_files(start: Path) -> list[Path]:
    if start.is_file():
        return [start] if start.suffix == ".md" else []
    return sorted(p for p in start.rglob("*.md") if p.is_file())


def extract_tasks_from_file(file_path: Path) -> list[Task]:
    """Tasks in one file. Unreadable files are logged and yield no tasks."""
    try:
        content = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Error processing file %s: %s", file_path, e)
        return []
    return parse_tasks(content, str(file_path))


def find_all_tasks(directory: Path) -> list[Task]:
    tasks: list[Task] = []
    files = find_markdown_files(directory)
    for file_path in files:
        tasks.extend(extract_tasks_from_file(file_path))
    logger.info("Extracted %d tasks from %d files under %s", len(tasks), len(files), directory)
    return tasks
