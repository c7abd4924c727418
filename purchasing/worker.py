"""
Runs reconciliation off the caller's thread as a single-shot request/response.

Only the most recent request counts: when a newer request is submitted before
an older one finishes, the older result is discarded instead of applied.
"""
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Optional

from .reconciler import reconcile
from .schemas import ReconcileRequest, ReconcileResponse, ReferenceData

logger = logging.getLogger(__name__)

ResultCallback = Callable[[ReconcileResponse], None]


def handle_request(
    request: ReconcileRequest, reference: Optional[ReferenceData] = None
) -> ReconcileResponse:
    """Reconciles one request. Any exception becomes a single error response."""
    try:
        payload = reconcile(
            request.lot_data, request.items_data, request.usage_data, reference
        )
    except Exception as e:
        logger.exception("Reconciliation failed.")
        return ReconcileResponse(status="error", message=str(e) or type(e).__name__)
    return ReconcileResponse(status="success", payload=payload)


class ReconciliationWorker:
    def __init__(
        self,
        reference: Optional[ReferenceData] = None,
        on_result: Optional[ResultCallback] = None,
    ):
        self.reference = reference
        self.on_result = on_result
        self.latest: Optional[ReconcileResponse] = None
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="reconcile")
        self._lock = threading.RLock()
        self._generation = 0
        self._pending: Optional[Future] = None

    @property
    def generation(self) -> int:
        return self._generation

    def is_current(self, generation: int) -> bool:
        with self._lock:
            return generation == self._generation

    def invalidate(self) -> int:
        """Supersedes whatever is in flight without starting a new request."""
        with self._lock:
            self._generation += 1
            if self._pending is not None:
                self._pending.cancel()
                self._pending = None
            return self._generation

    def submit(self, request: ReconcileRequest) -> Future:
        """
        Queues a reconciliation. The returned future resolves to the response,
        but only a response that is still current is stored in `latest` and
        handed to `on_result`.
        """
        generation = self.invalidate()
        future = self._executor.submit(self._run, generation, request)
        with self._lock:
            if generation == self._generation:
                self._pending = future
        return future

    def _run(self, generation: int, request: ReconcileRequest) -> ReconcileResponse:
        response = handle_request(request, self.reference)
        # Check and apply under one lock so invalidate() cannot slip in between.
        with self._lock:
            if generation != self._generation:
                logger.info(f"Discarding stale reconciliation result (request {generation}).")
                return response

            self.latest = response
            if self.on_result is not None:
                self.on_result(response)
        return response

    def shutdown(self, wait: bool = True):
        self._executor.shutdown(wait=wait)
