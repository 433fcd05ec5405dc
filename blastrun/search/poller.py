from blastrun.logging.logger import Log
from blastrun.search.cancellation import CancellationToken
from blastrun.search.client_base import BaseBlastClient
from blastrun.search.exceptions import (
    BlastServiceError,
    PollingError,
    SearchCanceledError,
    SearchTimeoutError,
)
from blastrun.search.models import JobHandle, StatusInfo


class StatusPoller:
    """Polls a submitted search until it is ready, failed, or out of attempts.

    The wait after attempt n is n * backoff_seconds, so the first status
    query happens immediately and the delay grows linearly.
    """

    def __init__(self, client: BaseBlastClient, backoff_seconds: float = 1.0) -> None:
        self._client = client
        self._backoff_seconds = backoff_seconds

    def poll_until_terminal(
        self,
        handle: JobHandle,
        max_attempts: int,
        token: CancellationToken | None = None,
    ) -> StatusInfo:
        """Return the READY status of the search.

        Raises:
            PollingError: if the service reports ERROR/CANCELED or cannot be reached.
            SearchTimeoutError: if max_attempts queries never reach a terminal status.
            SearchCanceledError: if the token is canceled before or while waiting.
        """
        token = token or CancellationToken()
        last: StatusInfo | None = None
        for attempt in range(max_attempts):
            if token.is_canceled:
                raise SearchCanceledError(f"Search {handle} canceled while polling")
            info = self._query(handle)
            Log.debug(f"Request {handle} attempt {attempt + 1}/{max_attempts}: {info.status.value}")
            if info.is_failure:
                raise PollingError(
                    f"Failed to call service - status returned was "
                    f"{info.status.value}, {info.message}",
                    status=info.status,
                )
            if info.is_terminal:
                Log.info(f"Request {handle} ready after {attempt + 1} status queries")
                return info
            last = info
            if attempt == max_attempts - 1:
                break
            delay = attempt * self._backoff_seconds
            if delay > 0 and token.wait(delay):
                raise SearchCanceledError(f"Search {handle} canceled while polling")
        raise SearchTimeoutError(
            f"Search {handle} not ready after {max_attempts} status queries",
            status=last.status if last else None,
        )

    def _query(self, handle: JobHandle) -> StatusInfo:
        try:
            return self._client.get_status(handle)
        except BlastServiceError as exc:
            raise PollingError(f"Failed to query status of request {handle}: {exc}") from exc
