class RyeError(Exception):
    """Base class for errors raised by rye."""


class ConversationNotFound(RyeError, LookupError):
    """No stored conversation matches an identifier or fragment."""

    def __init__(self, ident, reason=None):
        self.ident = ident
        message = f"No conversation file found matching '{ident}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class StorageError(RyeError, OSError):
    """A filesystem operation on the conversation store failed."""


class StreamError(RyeError):
    """The provider's fragment stream failed mid-transmission."""


class RenderError(RyeError):
    """The display sink rejected a block."""


class ProviderError(RyeError):
    """The provider could not be set up or could not answer a request."""
