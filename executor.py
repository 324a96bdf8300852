"""Runs recognition calls off the UI thread."""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Optional

from interfaces import Recognizer
from models import RecognitionRequest, RecognitionResult

logger = logging.getLogger(__name__)

ResultCallback = Callable[[RecognitionRequest, Optional[RecognitionResult]], None]
Dispatch = Callable[[Callable[[], None]], None]


class RecognitionExecutor:
    """Submits one recognizer call per request to a single worker thread.

    The worker never reports back directly: the finished result is handed to
    ``dispatch``, which is responsible for running the callback in the owning
    (UI) context. Any exception from the recognizer is delivered as ``None``.
    """

    def __init__(self, recognizer: Recognizer, dispatch: Dispatch) -> None:
        self._recognizer = recognizer
        self._dispatch = dispatch
        self._pool = ThreadPoolExecutor(max_workers=1, thread_name_prefix="recognition")

    def replace_recognizer(self, recognizer: Recognizer) -> None:
        self._recognizer = recognizer

    def execute(self, request: RecognitionRequest, on_result: ResultCallback) -> Future:
        recognizer = self._recognizer
        future = self._pool.submit(recognizer.recognize, request.image)
        future.add_done_callback(lambda done: self._deliver(done, request, on_result))
        return future

    def shutdown(self) -> None:
        self._pool.shutdown(wait=False)

    def _deliver(self, future: Future, request: RecognitionRequest, on_result: ResultCallback) -> None:
        result: Optional[RecognitionResult]
        try:
            result = future.result()
        except Exception:
            logger.exception("Recognition call failed")
            result = None
        self._dispatch(lambda: on_result(request, result))
