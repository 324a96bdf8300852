"""Trigger handling and result presentation for clipboard recognition."""

from __future__ import annotations

import logging
from typing import Optional

from classifier import classify
from errors import NO_IMAGE_FOUND_IN_THE_CLIPBOARD_ERROR
from executor import RecognitionExecutor
from formatter import (
    CANDIDATE_COUNT,
    build_candidates,
    collapse_candidates,
    confidence_band,
    extra_actions,
    normalize_confidence,
)
from gates import DebounceGate, SingleFlightGuard
from interfaces import Clipboard, PreferencesOpener, PresentationSink, Recognizer, Renderer
from latex_format import is_fully_delimited_math
from models import Outcome, RecognitionRequest, RecognitionResult, TriggerKind

logger = logging.getLogger(__name__)


class RequestController:
    """Owns the per-session trigger state and drives the recognition pipeline.

    Every public method must be called from the UI thread; results from the
    executor come back through its dispatch hook onto the same thread.
    """

    def __init__(
        self,
        clipboard: Clipboard,
        executor: RecognitionExecutor,
        sink: PresentationSink,
        renderer: Renderer,
        preferences: PreferencesOpener,
        gate: Optional[DebounceGate] = None,
        guard: Optional[SingleFlightGuard] = None,
    ) -> None:
        self._clipboard = clipboard
        self._executor = executor
        self._sink = sink
        self._renderer = renderer
        self._preferences = preferences
        self._gate = gate or DebounceGate()
        self._guard = guard or SingleFlightGuard()
        self._image: Optional[bytes] = None
        self._pending: Optional[RecognitionRequest] = None

    @property
    def gate(self) -> DebounceGate:
        return self._gate

    @property
    def guard(self) -> SingleFlightGuard:
        return self._guard

    @property
    def pending(self) -> Optional[RecognitionRequest]:
        return self._pending

    def handle_trigger(self, kind: TriggerKind) -> None:
        if kind is TriggerKind.REFRESH:
            self.refresh()
        else:
            self.submit()

    def replace_recognizer(self, recognizer: Recognizer) -> None:
        self._executor.replace_recognizer(recognizer)

    def show_clipboard_image(self) -> Optional[bytes]:
        self._image = self._clipboard.read_image()
        self._sink.show_source_image(self._image)
        return self._image

    def refresh(self) -> None:
        self._guard.reset()
        if not self._gate.should_proceed(TriggerKind.REFRESH):
            return
        self.show_clipboard_image()
        self._gate.mark_completed(TriggerKind.REFRESH)

    def submit(self) -> None:
        if not self._gate.should_proceed(TriggerKind.SUBMIT):
            return
        if not self._guard.try_acquire():
            return

        image = self.show_clipboard_image()
        if image is not None:
            self._dispatch(image)
        else:
            self._sink.show_error(NO_IMAGE_FOUND_IN_THE_CLIPBOARD_ERROR)
        self._gate.mark_completed(TriggerKind.SUBMIT)

    def _dispatch(self, image: bytes) -> None:
        for index in range(CANDIDATE_COUNT):
            self._sink.set_candidate(index, "", True)
        self._sink.show_rendered_image(None)
        self._sink.set_copied_marker(False)
        self._sink.set_extra_actions(None, None)
        self._sink.set_waiting(True)

        request = RecognitionRequest(image=image, submitted_at=self._gate.now())
        self._pending = request
        logger.info("Sending recognition request (%d bytes)", len(image))
        self._executor.execute(request, self._on_result)

    def _on_result(self, request: RecognitionRequest, result: Optional[RecognitionResult]) -> None:
        try:
            outcome = classify(result)
            logger.info("Recognition finished: %s", outcome.category.value if outcome.category else "success")
            if outcome.is_success and outcome.result is not None:
                self._present(outcome.result)
            else:
                self._report(outcome)
        finally:
            if self._pending is request:
                self._pending = None
            self._sink.set_waiting(False)

    def _report(self, outcome: Outcome) -> None:
        self._sink.show_error(outcome.message)
        if outcome.settings_section is not None:
            self._preferences.show_section(outcome.settings_section)
        if outcome.clears_results:
            self._clear_results()

    def _clear_results(self) -> None:
        # keep the failing image from being picked up again on the next refresh
        self._clipboard.write_text("")
        self._image = None
        self._sink.show_source_image(None)
        self._sink.show_rendered_image(None)
        for index in range(CANDIDATE_COUNT):
            self._sink.set_candidate(index, "", True)
        self._sink.set_confidence(0.0, confidence_band(0.0))

    def _present(self, result: RecognitionResult) -> None:
        text = result.text

        self._clipboard.write_text(text)
        self._sink.set_copied_marker(True)

        mathml, tsv = extra_actions(result)
        self._sink.set_extra_actions(mathml, tsv)

        self._sink.show_rendered_image(self._render(text))

        for index, slot in enumerate(collapse_candidates(build_candidates(text))):
            self._sink.set_candidate(index, slot.text, slot.enabled)

        confidence = normalize_confidence(result.confidence)
        self._sink.set_confidence(confidence, confidence_band(confidence))

    def _render(self, text: str) -> bytes:
        if not is_fully_delimited_math(text):
            return self._renderer.placeholder
        image = self._renderer.render(text)
        return image if image is not None else self._renderer.placeholder
