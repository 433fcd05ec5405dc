"""Asynchronous, cancellable entry point for remote BLAST searches.

Each call to BlastSearchRunner.run() schedules one pipeline on a worker
thread and returns a SearchRun. The caller learns the outcome exactly once,
through a done callback or result(); intermediate pipeline states are not
observable.
"""

from collections.abc import Callable, Iterable, Mapping
from concurrent.futures import CancelledError, Executor, Future, ThreadPoolExecutor

from Bio.SeqRecord import SeqRecord

from blastrun.config.settings import Settings
from blastrun.logging.logger import Log
from blastrun.processor.models import SearchOutcome
from blastrun.processor.pipeline import PipelineContext
from blastrun.processor.processor import build_processor
from blastrun.search.cancellation import CancellationToken
from blastrun.search.client_base import BaseBlastClient
from blastrun.search.factory import BlastClientFactory
from blastrun.search.models import SearchParameters, SearchRequest
from blastrun.worker.job_runner import JobRunner

_CORE_OPTION_KEYS = ("program", "database", "expect")


class SearchRun:
    """Handle on one scheduled search."""

    def __init__(
        self,
        future: "Future[SearchOutcome]",
        token: CancellationToken,
        context: PipelineContext,
    ) -> None:
        self._future = future
        self._token = token
        self._context = context

    @property
    def request_id(self) -> str:
        """Service request id, empty until the search has been submitted."""
        return self._context.request_id

    def cancel(self) -> None:
        """Request cancellation; the outcome becomes a 'canceled' failure."""
        self._token.cancel()
        self._future.cancel()

    def done(self) -> bool:
        return self._future.done()

    def result(self, timeout: float | None = None) -> SearchOutcome:
        """Block until the run finishes and return its outcome.

        Raises:
            TimeoutError: if the run is still going after `timeout` seconds.
        """
        try:
            return self._future.result(timeout)
        except CancelledError:
            return self._canceled_outcome()

    def add_done_callback(self, callback: Callable[[SearchOutcome], None]) -> None:
        """Call `callback` once with the outcome; immediately if already done."""
        self._future.add_done_callback(lambda future: callback(self._outcome_of(future)))

    def _outcome_of(self, future: "Future[SearchOutcome]") -> SearchOutcome:
        if future.cancelled():
            return self._canceled_outcome()
        return future.result()

    def _canceled_outcome(self) -> SearchOutcome:
        return SearchOutcome.failed("canceled", "Search canceled before it started", self.request_id)


class BlastSearchRunner:
    """Schedules search pipelines on a thread pool. One pipeline occupies one worker."""

    def __init__(
        self,
        job_runner: JobRunner,
        settings: Settings,
        executor: Executor | None = None,
        client: BaseBlastClient | None = None,
    ) -> None:
        self._job_runner = job_runner
        self._settings = settings
        self._executor = executor or ThreadPoolExecutor(
            max_workers=settings.max_concurrent_searches,
            thread_name_prefix="blast-search",
        )
        self._client = client

    def run(
        self,
        sequences: Iterable[SeqRecord],
        program: str | None = None,
        database: str | None = None,
        options: Mapping[str, str] | None = None,
    ) -> SearchRun:
        """Schedule a search and return its handle without blocking."""
        token = CancellationToken()
        context = PipelineContext(
            request=SearchRequest(
                sequences=tuple(sequences),
                parameters=self._build_parameters(program, database, options),
            ),
            max_poll_attempts=self._settings.max_poll_attempts,
            token=token,
        )
        future = self._executor.submit(self._job_runner.run, context)
        return SearchRun(future, token, context)

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting searches and release the executor and client."""
        self._executor.shutdown(wait=wait)
        if self._client is not None:
            self._client.close()

    def __enter__(self) -> "BlastSearchRunner":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()

    def _build_parameters(
        self,
        program: str | None,
        database: str | None,
        options: Mapping[str, str] | None,
    ) -> SearchParameters:
        extra = dict(options or {})
        core = {
            key.lower(): extra.pop(key)
            for key in list(extra)
            if key.lower() in _CORE_OPTION_KEYS
        }
        return SearchParameters(
            program=program or core.get("program") or self._settings.blast_program,
            database=database or core.get("database") or self._settings.blast_database,
            expect=core.get("expect") or self._settings.blast_expect,
            extra=extra,
        )


def build_search_runner(settings: Settings) -> BlastSearchRunner:
    """Build a runner with the configured client adapter."""
    client = BlastClientFactory.create(settings)
    job_runner = JobRunner(build_processor(settings, client))
    Log.debug(f"Search runner using provider '{settings.blast_provider}'")
    return BlastSearchRunner(job_runner, settings, client=client)
