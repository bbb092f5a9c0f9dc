"""Backend Calls - runs repository calls off the GUI thread for coordinators."""

import logging
from typing import Any, Callable, Dict, Optional

from PySide6.QtCore import QObject, QThreadPool, Slot

from chinese_learn.services.api_workers import ApiCallWorker

logger = logging.getLogger(__name__)


class _BackendRequest(QObject):
    """Helper class to hold one call's callbacks and deliver its outcome on the GUI thread."""

    def __init__(
        self,
        runner: "BackendCalls",
        request_id: int,
        channel: str,
        on_result: Callable[[Any], None],
        on_error: Callable[[str], None],
        on_finished: Optional[Callable[[], None]],
    ):
        super().__init__()
        self.runner = runner
        self.request_id = request_id
        self.channel = channel
        self.on_result = on_result
        self.on_error = on_error
        self.on_finished = on_finished

    @Slot(object)
    def handle_result(self, result):
        if self.runner.is_current(self.channel, self.request_id):
            self.on_result(result)
        else:
            logger.debug("Ignoring stale %s result (request %d)", self.channel, self.request_id)

    @Slot(str)
    def handle_error(self, message: str):
        if self.runner.is_current(self.channel, self.request_id):
            self.on_error(message)

    @Slot()
    def handle_finished(self):
        self.runner._release(self)
        if self.on_finished is not None:
            self.on_finished()


class BackendCalls(QObject):
    """
    Starts ApiCallWorkers on a thread pool.

    Calls are grouped by ``channel``: starting a call supersedes any call
    still running on the same channel, and only the newest call's outcome
    is delivered. ``on_finished`` runs once the worker is done, even when
    its outcome was dropped, so it is the place to re-enable controls.
    Callbacks always run on the GUI thread.
    """

    def __init__(self, thread_pool: Optional[QThreadPool] = None):
        super().__init__()
        self.thread_pool = thread_pool or QThreadPool.globalInstance()
        self._counter = 0
        self._latest: Dict[str, int] = {}
        # Keep request helpers referenced until their worker finishes
        self._pending: Dict[int, _BackendRequest] = {}

    def start(
        self,
        channel: str,
        call: Callable[[], Any],
        on_result: Callable[[Any], None],
        on_error: Callable[[str], None],
        on_finished: Optional[Callable[[], None]] = None,
    ) -> int:
        """Run ``call`` in the background and return its request id."""
        self._counter += 1
        request_id = self._counter
        self._latest[channel] = request_id

        request = _BackendRequest(self, request_id, channel, on_result, on_error, on_finished)
        self._pending[request_id] = request

        worker = ApiCallWorker(call, description=channel)
        worker.signals.call_result.connect(request.handle_result)
        worker.signals.error.connect(request.handle_error)
        worker.signals.finished.connect(request.handle_finished)
        self.thread_pool.start(worker)
        return request_id

    def is_current(self, channel: str, request_id: int) -> bool:
        return self._latest.get(channel) == request_id

    def is_busy(self, channel: str) -> bool:
        return any(r.channel == channel for r in self._pending.values())

    def discard(self, channel: str) -> None:
        """Drop the outcome of whatever is still running on ``channel``."""
        self._latest.pop(channel, None)

    def _release(self, request: _BackendRequest) -> None:
        self._pending.pop(request.request_id, None)
        if self._latest.get(request.channel) == request.request_id:
            del self._latest[request.channel]
