from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar

from blastrun.results.models import BlastResult, CollatorRecord
from blastrun.search.cancellation import CancellationToken
from blastrun.search.models import JobHandle, SearchRequest, StatusInfo


class PipelineState(Enum):
    SUBMITTED = "submitted"
    POLLING = "polling"
    FETCHING = "fetching"
    FLATTENING = "flattening"
    ENCODING = "encoding"
    COMPLETED = "completed"
    FAILED = "failed"


# Forward-only order of the non-failure states
STATE_ORDER: tuple[PipelineState, ...] = (
    PipelineState.SUBMITTED,
    PipelineState.POLLING,
    PipelineState.FETCHING,
    PipelineState.FLATTENING,
    PipelineState.ENCODING,
    PipelineState.COMPLETED,
)


@dataclass(slots=True)
class PipelineContext:
    request: SearchRequest
    max_poll_attempts: int
    token: CancellationToken = field(default_factory=CancellationToken)
    state: PipelineState = PipelineState.SUBMITTED
    handle: JobHandle | None = None
    status: StatusInfo | None = None
    raw_payload: str = ""
    results: list[BlastResult] = field(default_factory=list)
    records: list[CollatorRecord] = field(default_factory=list)
    document: str = ""
    error_message: str = ""

    @property
    def request_id(self) -> str:
        return self.handle.request_id if self.handle else ""


class PipelineStep(ABC):
    state: ClassVar[PipelineState]

    @abstractmethod
    def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError
