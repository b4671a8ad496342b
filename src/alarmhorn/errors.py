"""Custom alarmhorn exceptions."""


class AlarmHornError(Exception):
    """Base exception for alarmhorn errors."""

    def __init__(
        self, message: str, original_error: Exception | None = None
    ) -> None:
        super().__init__(message)
        self.original_error = original_error


class PlayerNotAvailableError(AlarmHornError):
    """Exception raised when the external playback program is not installed.

    Raised on every play attempt once the program was not found at startup,
    without trying to spawn anything.
    """

    pass


class PlaybackError(AlarmHornError):
    """Exception raised when the playback program fails.

    This typically occurs when:
    - The program exits with a nonzero status
    - The process cannot be spawned
    """

    def __init__(
        self,
        message: str,
        returncode: int | None = None,
        stdout: str = "",
        stderr: str = "",
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message, original_error)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr


class DownloadError(AlarmHornError):
    """Exception raised when a speech clip cannot be fetched from the blob store."""

    def __init__(
        self,
        message: str,
        remote_path: str,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message, original_error)
        self.remote_path = remote_path


class UnknownAlarmKindError(AlarmHornError):
    """Exception raised for an alarm type with no known mapping."""

    def __init__(self, value: object) -> None:
        super().__init__(f"No file mapping for alarm type {value!r}")
        self.value = value


class IndicatorError(AlarmHornError):
    """Exception raised when an indicator output line cannot be driven."""

    def __init__(
        self, message: str, pin: int, original_error: Exception | None = None
    ) -> None:
        super().__init__(message, original_error)
        self.pin = pin


class StationNotFoundError(AlarmHornError):
    """Exception raised when the configured station document does not exist."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Station at {path} returned no data")
        self.path = path


class InvalidAlarmRecordError(AlarmHornError, ValueError):
    """Exception raised when an alarm document field has the wrong type."""

    def __init__(self, field: str, value: object) -> None:
        super().__init__(
            f"Alarm field {field!r} must be a string, got {type(value).__name__}"
        )
        self.field = field
        self.value = value
