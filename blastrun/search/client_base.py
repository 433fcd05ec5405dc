from abc import ABC, abstractmethod

from blastrun.search.models import JobHandle, SearchParameters, SearchRequest, StatusInfo


class BaseBlastClient(ABC):
    """Contract for remote BLAST search service adapters."""

    @abstractmethod
    def submit(self, request: SearchRequest) -> JobHandle:
        """Submit a search and return the service-assigned handle.

        Raises:
            BlastServiceError: if the service cannot be reached or rejects the call.
        """

    @abstractmethod
    def get_status(self, handle: JobHandle) -> StatusInfo:
        """Return the current status of a submitted search.

        Raises:
            BlastServiceError: if the service cannot be reached.
        """

    @abstractmethod
    def get_result(self, handle: JobHandle, parameters: SearchParameters) -> str:
        """Return the raw BLAST XML payload of a finished search.

        Raises:
            BlastServiceError: if the service cannot be reached.
        """

    def close(self) -> None:
        """Release transport resources. No-op by default."""
