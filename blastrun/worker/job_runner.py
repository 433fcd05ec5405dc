from blastrun.logging.logger import Log
from blastrun.processor.models import SearchOutcome
from blastrun.processor.pipeline import PipelineContext
from blastrun.processor.processor import Processor
from blastrun.search.exceptions import BlastPipelineError


class JobRunner:
    """Run one search pipeline and turn its result or exception into a SearchOutcome.

    Nothing is retried here: a failed run must be resubmitted in full.
    """

    def __init__(self, processor: Processor) -> None:
        self._processor = processor

    def run(self, context: PipelineContext) -> SearchOutcome:
        """Execute a single search with error handling."""
        Log.info(
            f"Running search of {len(context.request.sequences)} sequence(s) "
            f"against {context.request.parameters.database}"
        )
        try:
            document = self._processor.process(context)
        except BlastPipelineError as exc:
            return SearchOutcome.failed(exc.kind, str(exc), context.request_id)
        except Exception as exc:
            Log.exception(f"Unexpected error in search {context.request_id or '(not submitted)'}")
            return SearchOutcome.failed("internal", str(exc), context.request_id)
        Log.info(f"Search {context.request_id} completed successfully")
        return SearchOutcome.completed(document, context.request_id)
