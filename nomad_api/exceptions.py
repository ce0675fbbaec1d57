class NomadError(Exception):
    """Base exception for Nomad-related errors."""

    pass


class NomadRequestError(NomadError):
    """Raised when an HTTP request to Nomad cannot be built."""

    pass


class NomadInvalidInputError(NomadError):
    """Raised when caller input is rejected before a request is sent."""

    pass


class NomadNetworkError(NomadError):
    """Raised when the Nomad API cannot be reached."""

    pass


class NomadDeserializationError(NomadError):
    """Raised when a successful response body does not match the expected type."""

    pass


class NomadServerError(NomadError):
    """Raised when the Nomad API answers with a non-success status code.

    Attributes:
        status_code: The HTTP status code of the response.
        body: The raw response body.
    """

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"Nomad API error: [{status_code}] '{body}'")


class NomadNotFoundError(NomadServerError):
    """Raised when the requested Nomad object does not exist."""

    pass


class NomadEvaluationError(NomadError):
    """Raised when a Nomad evaluation fails or is canceled."""

    pass


class NomadJobSchedulingError(NomadError):
    """Raised when a Nomad job fails to schedule due to resource constraints."""

    pass


class NomadJobTimeoutError(NomadError):
    """Raised when waiting on a Nomad evaluation exceeds the configured timeout."""

    pass
