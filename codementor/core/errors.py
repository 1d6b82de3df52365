"""
CodeMentor - Error Types
Failures raised by the analysis gateway and the preference storage.
"""


class AnalysisError(Exception):
    """An analysis request could not produce a result."""

    kind = "analysis"


class ConfigurationError(AnalysisError):
    """The backend credential is missing; no request was sent."""

    kind = "configuration"


class TransportError(AnalysisError):
    """The backend could not be reached or rejected the request."""

    kind = "transport"

    def __init__(self, provider: str, message: str):
        self.provider = provider
        super().__init__(f"{provider} request failed: {message}")


class EmptyResponseError(AnalysisError):
    """The backend answered without a payload."""

    kind = "empty_response"

    def __init__(self, mode: str):
        self.mode = mode
        super().__init__(f"No response from AI for '{mode}'")


class MalformedResponseError(AnalysisError):
    """The payload does not match the schema for its mode."""

    kind = "malformed_response"

    def __init__(self, mode: str, detail: str):
        self.mode = mode
        self.detail = detail
        super().__init__(f"Malformed AI response for '{mode}': {detail}")


class StorageError(Exception):
    """A preference write failed."""


class StorageQuotaExceeded(StorageError):
    """The storage backend is out of capacity."""

    def __init__(self, limit: int, requested: int):
        self.limit = limit
        self.requested = requested
        super().__init__(f"Storage quota exceeded ({requested} > {limit} bytes)")
