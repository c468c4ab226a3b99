"""Background coordination of analysis requests.

Only the most recent request may update state: each request is stamped with a
generation number, and a completion whose generation is no longer the latest
is dropped. In-flight work is never cancelled.
"""

import logging
import threading
from collections.abc import Callable, Sequence
from concurrent.futures import Executor, Future, ThreadPoolExecutor

from budgetlens.domain.analysis import AnalysisOutcome
from budgetlens.domain.transactions import Transaction

logger = logging.getLogger(__name__)

AnalysisRunner = Callable[[Sequence[Transaction], float], AnalysisOutcome]


class AnalysisCoordinator:
    """Runs analyses off the calling thread with last-caller-wins semantics."""

    def __init__(
        self,
        run: AnalysisRunner,
        on_result: Callable[[AnalysisOutcome], None] | None = None,
        executor: Executor | None = None,
    ) -> None:
        self._run = run
        self._on_result = on_result
        self._owns_executor = executor is None
        self._executor = executor if executor is not None else ThreadPoolExecutor(max_workers=2)
        self._lock = threading.Lock()
        self._generation = 0
        self._latest: AnalysisOutcome | None = None

    @property
    def latest(self) -> AnalysisOutcome | None:
        """Most recently applied outcome."""
        with self._lock:
            return self._latest

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    def request(self, transactions: Sequence[Transaction], budget: float) -> Future:
        """Start an analysis of a snapshot of the given state.

        Returns:
            Future resolving to the outcome, whether or not it was applied.
        """
        with self._lock:
            self._generation += 1
            generation = self._generation

        snapshot = list(transactions)
        future = self._executor.submit(self._run, snapshot, budget)
        future.add_done_callback(lambda f: self._complete(generation, f))
        return future

    def _complete(self, generation: int, future: Future) -> None:
        error = future.exception()
        if error is not None:
            logger.error("Analysis request %d failed: %s", generation, error)
            return

        with self._lock:
            if generation != self._generation:
                logger.debug("Dropping stale analysis %d (latest is %d)", generation, self._generation)
                return
            outcome = future.result()
            self._latest = outcome

        # Runs unlocked: the callback may read latest or issue a new request
        if self._on_result is not None:
            self._on_result(outcome)

    def close(self) -> None:
        """Wait for in-flight work and release the worker threads."""
        if self._owns_executor:
            self._executor.shutdown(wait=True)

    def __enter__(self) -> "AnalysisCoordinator":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
