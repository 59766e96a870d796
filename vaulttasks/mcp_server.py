from fastmcp import FastMCP

from vaulttasks.config import get_settings
from vaulttasks.exceptions import PathAccessError, VaultNotFoundError
from vaulttasks.services import tasks as tasks_service

mcp = FastMCP("vaulttasks")


def _handle_mcp_error(e: Exception) -> dict:
    """Convert exceptions to agent-friendly error dicts."""
    if isinstance(e, PathAccessError):
        return {"error": "path_access", "message": str(e), "action": "Use a path relative to the vault without '..'"}
    if isinstance(e, VaultNotFoundError):
        return {"error": "not_found", "message": str(e)}
    return {"error": "unknown_error", "message": str(e)}


# --- Task tools ---

@mcp.tool
def list_all_tasks(path: str | None = None) -> dict:
    """Extract all tasks from markdown files in a directory.
    Recursively scans all markdown files and extracts tasks based on the Obsidian Tasks format.
    Returns structured data about each task including status, dates, tags, priority and recurrence.
    The path is optional and relative to the vault directory; it defaults to the vault root
    and cannot contain directory traversal components (..)."""
    try:
        tasks = tasks_service.list_tasks(path)
        return {"tasks": [t.to_dict() for t in tasks], "count": len(tasks)}
    except (PathAccessError, VaultNotFoundError) as e:
        return _handle_mcp_error(e)


@mcp.tool
def query_tasks(query: str, path: str | None = None) -> dict:
    """Search for tasks using Obsidian Tasks query syntax, one filter per line (AND between lines).
    Filters: 'done', 'not done', 'cancelled', 'in progress', 'due today', 'due before 2025-05-01',
    'has due date', 'no due date', 'has tags', 'has tag work', 'tag includes proj',
    'path includes notes', 'description includes report', 'priority is high' (or 'none').
    Within a line, combine filters with 'and', 'or' and a leading 'not'.
    Anything else searches task descriptions. Lines starting with '#' are comments.
    The path is optional and relative to the vault directory."""
    try:
        tasks = tasks_service.query_tasks(query, path)
        return {"tasks": [t.to_dict() for t in tasks], "count": len(tasks)}
    except (PathAccessError, VaultNotFoundError) as e:
        return _handle_mcp_error(e)


# --- Status tool ---

@mcp.tool
def vaulttasks_status() -> dict:
    """Show which vault directory is being served and whether it is available."""
    vault = get_settings().vault_directory.expanduser().resolve()
    exists = vault.is_dir()
    return {
        "vault_directory": str(vault),
        "exists": exists,
        "message": "Vault ready" if exists else f"Vault directory not found: {vault}",
    }
