class StorageError(Exception):
    """Base exception for object-store failures."""


class ObjectNotFoundError(StorageError):
    """Raised when a blob or its container does not exist."""
