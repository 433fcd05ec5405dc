from blastrun.search.client_base import BaseBlastClient
from blastrun.search.factory import BlastClientFactory
from blastrun.search.models import (
    JobHandle,
    SearchParameters,
    SearchRequest,
    ServiceRequestStatus,
    StatusInfo,
)

__all__ = [
    "BaseBlastClient",
    "BlastClientFactory",
    "JobHandle",
    "SearchParameters",
    "SearchRequest",
    "ServiceRequestStatus",
    "StatusInfo",
]
