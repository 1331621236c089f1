"""Exception hierarchy for the feed reconciler.

Fatal errors (ConfigError, SessionError) abort a run. The others are
recovered at the component that owns them:

- ClassificationError: the AI classifier turns it into "no decision".
- DispatchError: the dispatcher logs it and moves on to the next row.
- NotificationError: the engine logs it after the summary send fails.
"""


class ReconcilerError(Exception):
    """Base exception for all reconciler errors."""

    pass


class ConfigError(ReconcilerError):
    """Raised for invalid configuration or missing collaborator credentials."""

    pass


class ClassificationError(ReconcilerError):
    """Raised when the language model cannot produce a usable answer."""

    pass


class DispatchError(ReconcilerError):
    """Raised when an action cannot be applied to a bank feed row."""

    def __init__(self, message: str, row_handle: object | None = None):
        """Initialize DispatchError.

        Args:
            message: Error message.
            row_handle: Handle of the row that could not be updated.
        """
        self.row_handle = row_handle
        super().__init__(message)


class SessionError(ReconcilerError):
    """Raised when the page automation session is lost. Aborts the batch."""

    pass


class NotificationError(ReconcilerError):
    """Raised when the run summary cannot be delivered."""

    pass
