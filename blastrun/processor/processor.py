from collections.abc import Sequence

from blastrun.config.settings import Settings
from blastrun.logging.logger import Log
from blastrun.processor.pipeline import (
    STATE_ORDER,
    PipelineContext,
    PipelineState,
    PipelineStep,
)
from blastrun.processor.steps import (
    EncodeStep,
    FetchStep,
    FlattenStep,
    MarkFailedStep,
    ParseStep,
    PollStep,
    SubmitStep,
)
from blastrun.results.fetcher import ResultFetcher
from blastrun.results.parser import BlastXmlParser
from blastrun.results.serializer import BlastXmlSerializer
from blastrun.search.client_base import BaseBlastClient
from blastrun.search.exceptions import SearchCanceledError
from blastrun.search.poller import StatusPoller
from blastrun.search.submitter import JobSubmitter


class Processor:
    """Runs the search pipeline steps in order and tracks the run state.

    Pipeline: submit -> poll -> fetch -> parse -> flatten -> encode.
    States only move forward; any exception moves the run to FAILED, runs
    the failed step and propagates. Cancellation is checked between steps,
    so a step that has started always finishes before the run is abandoned.
    """

    def __init__(
        self,
        steps: Sequence[PipelineStep],
        failed_step: PipelineStep | None = None,
    ) -> None:
        self._steps = list(steps)
        self._failed_step = failed_step

    def process(self, context: PipelineContext) -> str:
        """Run all steps and return the encoded document."""
        try:
            for step in self._steps:
                self._ensure_not_canceled(context)
                self._advance(context, step.state)
                step.run(context)
            self._ensure_not_canceled(context)
            self._advance(context, PipelineState.COMPLETED)
        except Exception as exc:
            context.error_message = str(exc)
            context.state = PipelineState.FAILED
            if self._failed_step is not None:
                self._failed_step.run(context)
            raise
        return context.document

    @staticmethod
    def _ensure_not_canceled(context: PipelineContext) -> None:
        if context.token.is_canceled:
            raise SearchCanceledError(
                f"Search {context.request_id or '(not submitted)'} canceled "
                f"during {context.state.value}"
            )

    @staticmethod
    def _advance(context: PipelineContext, state: PipelineState) -> None:
        if (
            context.state not in STATE_ORDER
            or STATE_ORDER.index(state) < STATE_ORDER.index(context.state)
        ):
            raise RuntimeError(
                f"Illegal transition {context.state.value} -> {state.value}"
            )
        if state is not context.state:
            Log.debug(
                f"Search {context.request_id or '(not submitted)'}: "
                f"{context.state.value} -> {state.value}"
            )
        context.state = state


def build_processor(settings: Settings, client: BaseBlastClient) -> Processor:
    """Build a Processor wired to the given BLAST client."""
    steps: list[PipelineStep] = [
        SubmitStep(JobSubmitter(client)),
        PollStep(StatusPoller(client, backoff_seconds=settings.poll_backoff_seconds)),
        FetchStep(ResultFetcher(client)),
        ParseStep(BlastXmlParser()),
        FlattenStep(),
        EncodeStep(BlastXmlSerializer()),
    ]
    return Processor(steps=steps, failed_step=MarkFailedStep())
