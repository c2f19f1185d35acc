"""Custom exception hierarchy for the Edda client."""


class EddaError(Exception):
    """Base exception for all client errors."""


class ConfigError(EddaError):
    """Invalid or missing configuration."""


class EddaClientError(EddaError):
    """The request could not be sent or the response could not be understood."""


class EddaServiceError(EddaError):
    """The Edda service (or parameter validation standing in for it) rejected a call."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        error_code: str | None = None,
        response_body: str | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.error_code = error_code
        self.response_body = response_body


class InvalidParameterValue(EddaServiceError):
    """A required request parameter was missing or empty."""

    def __init__(self, name: str, value: str | None):
        super().__init__(
            f"Invalid value for parameter {name}: {value!r}",
            status_code=400,
            error_code="InvalidParameterValue",
        )
        self.parameter = name


class UnsupportedOperationError(EddaError):
    """The operation is not served by the read-only Edda facade."""
