class PathAccessError(Exception):
    """Raised when a requested path escapes the vault directory."""


class VaultNotFoundError(Exception):
    """Raised when the vault directory or a requested path does not exist."""
