class ElGamalClientError(Exception):
    """Base class for every recoverable protocol failure."""


class InvalidParameters(ElGamalClientError):
    def __init__(self, p: int):
        super().__init__(f"Invalid p={p}")
        self.p = p


class ServiceUnavailable(ElGamalClientError):
    def __init__(self, service: str, timeout: float):
        super().__init__(f"Service {service} is not available yet (waited {timeout}s)")
        self.service = service
        self.timeout = timeout


class RequestFailed(ElGamalClientError):
    """The encrypt exchange errored, was rejected, or returned an unusable payload."""
