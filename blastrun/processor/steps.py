from blastrun.logging.logger import Log
from blastrun.processor.pipeline import PipelineContext, PipelineState, PipelineStep
from blastrun.results.collator import flatten
from blastrun.results.fetcher import ResultFetcher
from blastrun.results.parser import BlastXmlParser
from blastrun.results.serializer import BlastXmlSerializer, extract_document_fragment
from blastrun.search.exceptions import EncodingError
from blastrun.search.poller import StatusPoller
from blastrun.search.submitter import JobSubmitter


class SubmitStep(PipelineStep):
    state = PipelineState.SUBMITTED

    def __init__(self, submitter: JobSubmitter) -> None:
        self._submitter = submitter

    def run(self, context: PipelineContext) -> PipelineContext:
        context.handle = self._submitter.submit(context.request)
        return context


class PollStep(PipelineStep):
    state = PipelineState.POLLING

    def __init__(self, poller: StatusPoller) -> None:
        self._poller = poller

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.handle is None:
            raise ValueError("PipelineContext.handle must be set before polling")
        context.status = self._poller.poll_until_terminal(
            context.handle,
            context.max_poll_attempts,
            token=context.token,
        )
        return context


class FetchStep(PipelineStep):
    state = PipelineState.FETCHING

    def __init__(self, fetcher: ResultFetcher) -> None:
        self._fetcher = fetcher

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.handle is None:
            raise ValueError("PipelineContext.handle must be set before fetching")
        context.raw_payload = self._fetcher.fetch(context.handle, context.request.parameters)
        return context


class ParseStep(PipelineStep):
    state = PipelineState.FETCHING

    def __init__(self, parser: BlastXmlParser) -> None:
        self._parser = parser

    def run(self, context: PipelineContext) -> PipelineContext:
        context.results = self._parser.parse(context.raw_payload)
        return context


class FlattenStep(PipelineStep):
    state = PipelineState.FLATTENING

    def run(self, context: PipelineContext) -> PipelineContext:
        context.records = flatten(context.results)
        Log.info(f"Collated {len(context.records)} alignment(s) for request {context.request_id}")
        return context


class EncodeStep(PipelineStep):
    state = PipelineState.ENCODING

    def __init__(self, serializer: BlastXmlSerializer) -> None:
        self._serializer = serializer

    def run(self, context: PipelineContext) -> PipelineContext:
        document = extract_document_fragment(self._serializer.encode(context.records))
        if not document:
            raise EncodingError(
                f"Could not encode {len(context.records)} record(s) for request {context.request_id}"
            )
        context.document = document
        Log.info(f"Encoded {len(document)} chars for request {context.request_id}")
        return context


class MarkFailedStep(PipelineStep):
    state = PipelineState.FAILED

    def run(self, context: PipelineContext) -> PipelineContext:
        Log.error(
            f"Search {context.request_id or '(not submitted)'} failed: {context.error_message}"
        )
        return context
