"""Custom xees exceptions."""


class XeesError(Exception):
    """Base exception for xees errors."""

    def __init__(
        self, message: str, original_error: Exception | None = None
    ) -> None:
        super().__init__(message)
        self.original_error = original_error


class ScreensaverError(XeesError):
    """Exception raised when the external screensaver tool fails.

    This typically occurs when:
    - The tool binary is missing or not executable
    - The tool does not answer within the configured timeout
    - The deactivate command exits with a non-zero status
    """

    def __init__(
        self,
        message: str,
        returncode: int | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message, original_error)
        self.returncode = returncode


class BusRegistrationError(XeesError):
    """Exception raised when the daemon cannot claim its bus name.

    This typically occurs when:
    - The session bus is unreachable
    - Another daemon already owns the name
    """

    pass


class DaemonUnavailableError(XeesError):
    """Exception raised by the client when the daemon cannot be reached."""

    pass


class DaemonCallError(XeesError):
    """Exception raised when a running daemon answers with a D-Bus error."""

    def __init__(
        self,
        message: str,
        error_name: str | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message, original_error)
        self.error_name = error_name
