"""Error taxonomy shared by the services and the HTTP layer.

Services raise these; routes translate them into HTTP responses. Only the
message of ``ValidationError``, ``NotFoundError`` and ``SoldOutError`` is meant
for end users.
"""


class FlightDeskError(Exception):
    message = "unexpected error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        self.message = message or self.message


class ValidationError(FlightDeskError):
    message = "invalid input"


class NotFoundError(FlightDeskError):
    message = "not found"


class SoldOutError(FlightDeskError):
    message = "flight full"


class StorageError(FlightDeskError):
    message = "storage unavailable"


class NotificationError(FlightDeskError):
    message = "notification could not be sent"
