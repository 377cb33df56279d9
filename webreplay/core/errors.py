from typing import Optional


class WebReplayError(Exception):
    pass


class RecordingFormatError(WebReplayError):
    """A stored recording could not be parsed into actions."""

    def __init__(self, message: str, index: Optional[int] = None):
        self.index = index
        if index is not None:
            message = f"action #{index}: {message}"
        super().__init__(message)


class ActionValidationError(WebReplayError):
    pass


class DriverError(WebReplayError):
    """A browser-driver call failed. Recoverable for the current action."""


class SelectorTimeoutError(DriverError):
    def __init__(self, selector: str, timeout_ms: int):
        self.selector = selector
        self.timeout_ms = timeout_ms
        super().__init__(f"'{selector}' not visible within {timeout_ms}ms")


class BrowserNotStartedError(WebReplayError):
    pass
