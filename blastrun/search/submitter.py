from blastrun.logging.logger import Log
from blastrun.search.client_base import BaseBlastClient
from blastrun.search.exceptions import BlastServiceError, SubmissionError
from blastrun.search.models import JobHandle, SearchRequest


class JobSubmitter:
    """Submits one search request. Failures are reported immediately, never retried."""

    def __init__(self, client: BaseBlastClient) -> None:
        self._client = client

    def submit(self, request: SearchRequest) -> JobHandle:
        """Send the request to the service and return its handle.

        Raises:
            SubmissionError: if the request has no sequences, the service rejects
                it or cannot be reached, or no request id comes back.
        """
        if not request.sequences:
            raise SubmissionError("Search request contains no sequences")
        try:
            handle = self._client.submit(request)
        except BlastServiceError as exc:
            raise SubmissionError(str(exc)) from exc
        if not handle.request_id:
            raise SubmissionError("BLAST service returned no request id")
        Log.info(
            f"Submitted {len(request.sequences)} sequence(s) to "
            f"{request.parameters.program}/{request.parameters.database}: "
            f"request {handle.request_id} (estimated {handle.estimated_seconds}s)"
        )
        return handle
