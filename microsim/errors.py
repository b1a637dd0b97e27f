"""Exceptions raised by the simulation core."""

from typing import Optional


class SimulationError(Exception):
    """Base class for every failure the engine reports to its callers."""
    pass


class EmptyInputError(SimulationError):
    """Raised when an action carries no text."""
    pass


class MissingCredentialError(SimulationError):
    """Raised when an outbound call is needed but no API key is configured."""
    pass


class InferenceError(SimulationError):
    """Raised when the inference endpoint could not produce a reply."""
    pass


class UpstreamError(InferenceError):
    """A non-success HTTP status from the upstream provider."""

    def __init__(self, status_code: int, body: str, provider: str = "OpenRouter"):
        self.status_code = status_code
        self.body = body
        super().__init__(f"{provider} {status_code}: {body}")


class InferenceTimeoutError(InferenceError):
    """The upstream provider did not answer within the configured timeout."""

    def __init__(self, timeout: Optional[float] = None):
        self.timeout = timeout
        message = "Inference request timed out"
        if timeout is not None:
            message += f" after {timeout:g}s"
        super().__init__(message)


class StoreUnavailableError(SimulationError):
    """The durable store could not be read or written."""
    pass
