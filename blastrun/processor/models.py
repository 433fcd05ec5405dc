from dataclasses import dataclass

from blastrun.processor.pipeline import PipelineState


@dataclass(frozen=True)
class SearchOutcome:
    """Final, caller-visible result of one search run: Completed or Failed."""

    state: PipelineState
    document: str = ""
    error_kind: str = ""
    message: str = ""
    request_id: str = ""

    @classmethod
    def completed(cls, document: str, request_id: str = "") -> "SearchOutcome":
        return cls(state=PipelineState.COMPLETED, document=document, request_id=request_id)

    @classmethod
    def failed(cls, error_kind: str, message: str, request_id: str = "") -> "SearchOutcome":
        return cls(
            state=PipelineState.FAILED,
            error_kind=error_kind,
            message=message,
            request_id=request_id,
        )

    @property
    def succeeded(self) -> bool:
        return self.state is PipelineState.COMPLETED
