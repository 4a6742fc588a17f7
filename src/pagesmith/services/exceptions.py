"""Custom exceptions for pagesmith services."""


class PageLoadError(Exception):
    """Raised when a stored page cannot be read back.

    The file exists but is not valid JSON, or its content does not match the
    page model (unknown block type, duplicate ids, nested container, ...).

    Attributes:
        path: Path to the offending file
        message: Human-readable error message
    """

    def __init__(self, path: str, message: str = "Failed to load saved page"):
        """Initialize PageLoadError.

        Args:
            path: Path to the offending file
            message: Human-readable error message
        """
        self.path = path
        self.message = message
        super().__init__(f"{message}: {path}")
