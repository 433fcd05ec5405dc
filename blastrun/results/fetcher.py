from blastrun.logging.logger import Log
from blastrun.search.client_base import BaseBlastClient
from blastrun.search.exceptions import BlastServiceError, FetchError
from blastrun.search.models import JobHandle, SearchParameters


class ResultFetcher:
    """Retrieves the raw report of a finished search."""

    def __init__(self, client: BaseBlastClient) -> None:
        self._client = client

    def fetch(self, handle: JobHandle, parameters: SearchParameters) -> str:
        """Return the raw payload for a READY search.

        Raises:
            FetchError: if the service cannot deliver the payload.
        """
        try:
            payload = self._client.get_result(handle, parameters)
        except BlastServiceError as exc:
            raise FetchError(f"Failed to fetch results for request {handle}: {exc}") from exc
        Log.info(f"Fetched {len(payload)} chars of results for request {handle}")
        return payload
