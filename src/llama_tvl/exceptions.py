"""Error types raised by the fetch layer and the analysis engine."""


class LlamaTVLError(Exception):
    """Base class for all llama-tvl errors."""


class FetchError(LlamaTVLError):
    """A request to the DeFi Llama API failed."""

    def __init__(self, message: str, endpoint: str | None = None):
        super().__init__(message)
        self.endpoint = endpoint


class TransportError(FetchError):
    """The underlying network call raised before a response was received."""


class HttpStatusError(FetchError):
    """The API answered with a status outside the 2xx range."""

    def __init__(self, status_code: int, endpoint: str | None = None):
        super().__init__(f"HTTP error! status: {status_code}", endpoint=endpoint)
        self.status_code = status_code


class DecodeError(FetchError):
    """The response body was not valid JSON or did not match the expected shape."""


class AnalysisError(LlamaTVLError):
    """Raw TVL data could not be analyzed."""


class InvalidShapeError(AnalysisError):
    """The selected TVL field is not a sequence."""


class EmptySeriesError(AnalysisError):
    """No valid TVL points survived filtering."""
