from typing import ClassVar


class BlastPipelineError(Exception):
    """Base exception for all search pipeline errors."""

    kind: ClassVar[str] = "pipeline"


class BlastServiceError(BlastPipelineError):
    """Raised by client adapters when the remote service call fails (HTTP or transport)."""

    kind: ClassVar[str] = "service"


class SubmissionError(BlastPipelineError):
    """Raised when a search request is rejected or yields no request id."""

    kind: ClassVar[str] = "submission"


class PollingError(BlastPipelineError):
    """Raised when the remote service reports a failed search or cannot be polled."""

    kind: ClassVar[str] = "polling"

    def __init__(self, message: str, status: object | None = None) -> None:
        super().__init__(message)
        self.status = status


class SearchTimeoutError(PollingError):
    """Raised when the polling attempt budget runs out before a terminal status."""

    kind: ClassVar[str] = "timeout"


class SearchCanceledError(BlastPipelineError):
    """Raised when a run is canceled by its caller."""

    kind: ClassVar[str] = "canceled"


class FetchError(BlastPipelineError):
    """Raised when the result payload of a finished search cannot be retrieved."""

    kind: ClassVar[str] = "fetch"


class ParseError(BlastPipelineError):
    """Raised when the result payload is not a well-formed BLAST XML report."""

    kind: ClassVar[str] = "parse"


class EncodingError(BlastPipelineError):
    """Raised when collated records produce no output document."""

    kind: ClassVar[str] = "encoding"
