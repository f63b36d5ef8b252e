class BlobPathError(Exception):
    """Base class for blobpath errors."""


class BlobNotFoundError(BlobPathError, FileNotFoundError):
    """Requested blob does not exist."""

    def __init__(self, container: str, path: str) -> None:
        super().__init__(f"No such blob: '{container}/{path}'")
        self.container = container
        self.path = path


class InvalidArgumentError(BlobPathError, ValueError):
    """Argument rejected before any backend call."""


class ConfigError(BlobPathError, ValueError):
    """Invalid configuration file."""
