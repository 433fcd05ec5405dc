from collections.abc import Sequence

import pytest

from blastrun.config.settings import Settings
from blastrun.search.client_base import BaseBlastClient
from blastrun.search.models import (
    JobHandle,
    SearchParameters,
    SearchRequest,
    ServiceRequestStatus,
    StatusInfo,
)


class ScriptedBlastClient(BaseBlastClient):
    """Answers status queries from a fixed script and records every call."""

    def __init__(self, statuses: Sequence[ServiceRequestStatus], payload: str = "") -> None:
        self._statuses = list(statuses)
        self._payload = payload
        self.submitted: list[SearchRequest] = []
        self.status_calls = 0
        self.result_calls = 0

    def submit(self, request: SearchRequest) -> JobHandle:
        self.submitted.append(request)
        return JobHandle("RID-SCRIPTED", estimated_seconds=1)

    def get_status(self, handle: JobHandle) -> StatusInfo:
        index = min(self.status_calls, len(self._statuses) - 1)
        self.status_calls += 1
        return StatusInfo(self._statuses[index])

    def get_result(self, handle: JobHandle, parameters: SearchParameters) -> str:
        self.result_calls += 1
        return self._payload


@pytest.fixture()
def test_settings() -> Settings:
    return Settings(_env_file=None, poll_backoff_seconds=0.01, max_poll_attempts=5)


@pytest.fixture()
def scripted_client() -> type[ScriptedBlastClient]:
    return ScriptedBlastClient
