"""Custom exceptions for clipstash."""

import time


class ClipstashError(Exception):
    """Base exception class for clipstash."""

    def __init__(self, message: str, original_error: Exception = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error
        self.timestamp = time.time()

    def __str__(self):
        base_msg = super().__str__()
        if self.original_error:
            return f"{base_msg} (Caused by: {type(self.original_error).__name__}: {str(self.original_error)})"
        return base_msg


# region Configuration


class ConfigError(ClipstashError):
    """Raised when the user config file cannot be read, parsed or written."""

    pass


class ConfigNotFoundError(ConfigError):
    """Raised when no configuration is present."""

    def __init__(self, message: str = None, original_error: Exception = None):
        super().__init__(
            message
            or "clipstash is not configured. Run 'clipstash setup' to configure the database location.",
            original_error,
        )


# endregion
# region Store


class StoreError(ClipstashError):
    """Base class for history store errors."""

    pass


class StoreNotInitializedError(StoreError):
    """Raised when the backing database file or table is absent."""

    pass


class StoreReadError(StoreError):
    """Raised when reading from the history store fails."""

    pass


class StoreWriteError(StoreError):
    """Raised when a write to the history store fails."""

    pass


# endregion
# region Clipboard / Service


class ClipboardError(ClipstashError):
    """Raised when the OS clipboard cannot be read or written."""

    pass


class ServiceError(ClipstashError):
    """Raised when the daemon service cannot be managed on this platform."""

    pass


# endregion
