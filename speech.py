"""Speech input and output collaborators for the speaking surface.

The recognizer and synthesizer themselves are platform services; this module
defines the interfaces the engine expects from them and the glue that turns a
finished capture into a speaking practice turn.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Callable

from errors import CaptureUnavailable
from exercises.conversation import SpeakingPractice

logger = logging.getLogger(__name__)

UNSUPPORTED_MESSAGE = (
    "Speech recognition is not supported on this device. "
    "Please use a device with a microphone and speech recognition."
)
DENIED_MESSAGE = (
    "Microphone access was denied. Please allow microphone access in your "
    "settings to use this feature."
)
DENIED_REASONS = {"not-allowed", "service-not-allowed"}


class CapturePermission(str, Enum):
    PROMPT = "prompt"
    GRANTED = "granted"
    DENIED = "denied"


class SpeechCapture(ABC):
    """Abstract interface for a speech-to-text recognizer."""

    @property
    @abstractmethod
    def is_supported(self) -> bool:
        ...

    @abstractmethod
    def start(
        self,
        on_partial: Callable[[str], None],
        on_final: Callable[[str], None],
        on_end: Callable[[], None],
        on_error: Callable[[str], None],
    ) -> None:
        """Begin capturing.

        Args:
            on_partial: Called with interim text while the learner speaks.
            on_final: Called with each finalized segment.
            on_end: Called once when capture stops for any reason.
            on_error: Called with a reason code such as ``not-allowed``.
        """
        ...

    @abstractmethod
    def stop(self) -> None:
        ...


class SpeechOutput(ABC):
    """Abstract interface for a text-to-speech engine.

    Starting a new utterance always cancels the one in progress.
    """

    def speak(self, text: str) -> None:
        self.cancel()
        self._utter(text)

    @abstractmethod
    def cancel(self) -> None:
        ...

    @abstractmethod
    def _utter(self, text: str) -> None:
        ...


class VoiceInput:
    """Connect a SpeechCapture to a SpeakingPractice surface.

    When capture ends with a non-blank transcript, the transcript becomes the
    learner's next turn. If a loop is given, recognizer callbacks may arrive
    on any thread: every state change they make is handed to the loop, and
    the turn is submitted there as soon as capture ends. Without a loop the
    callbacks apply directly and ``process_pending`` submits the turn.
    """

    def __init__(
        self,
        capture: SpeechCapture,
        practice: SpeakingPractice,
        loop: asyncio.AbstractEventLoop | None = None,
    ):
        self.capture = capture
        self.practice = practice
        self.loop = loop
        self.permission = CapturePermission.PROMPT
        self.recording = False
        self.interim = ""
        self.transcript = ""
        self.pending: str | None = None
        self.submission: asyncio.Task | None = None

    def toggle(self) -> None:
        """Start capturing, or stop if already capturing.

        Raises:
            CaptureUnavailable: If capture is unsupported or was denied.
        """
        if self.recording:
            self.capture.stop()
            return
        if not self.capture.is_supported:
            raise CaptureUnavailable(UNSUPPORTED_MESSAGE)
        if self.permission == CapturePermission.DENIED:
            raise CaptureUnavailable(DENIED_MESSAGE)

        self.interim = ""
        self.transcript = ""
        self.practice.state.error = ""
        self.capture.start(
            on_partial=self._on_loop(self._on_partial),
            on_final=self._on_loop(self._on_final),
            on_end=self._on_loop(self._on_end),
            on_error=self._on_loop(self._on_error),
        )
        self.recording = True

    async def process_pending(self) -> None:
        """Submit the transcript of the last finished capture, if any."""
        text, self.pending = self.pending, None
        if text:
            await self.practice.submit(text)

    def _on_loop(self, callback: Callable[..., None]) -> Callable[..., None]:
        if self.loop is None:
            return callback
        loop = self.loop

        def dispatch(*args) -> None:
            loop.call_soon_threadsafe(callback, *args)

        return dispatch

    def _on_partial(self, text: str) -> None:
        self.interim = text

    def _on_final(self, text: str) -> None:
        self.permission = CapturePermission.GRANTED
        self.transcript = f"{self.transcript} {text}".strip()
        self.interim = ""

    def _on_end(self) -> None:
        self.recording = False
        text = self.transcript.strip()
        if not text:
            return
        self.pending = text
        if self.loop is not None:
            self.submission = self.loop.create_task(self.process_pending())
            self.submission.add_done_callback(_log_failure)

    def _on_error(self, reason: str) -> None:
        logger.warning("Speech recognition error: %s", reason)
        if reason in DENIED_REASONS:
            self.permission = CapturePermission.DENIED
            message = DENIED_MESSAGE
        else:
            message = f"An error occurred during speech recognition: {reason}."
        self.practice.state.error = message
        self.recording = False


def _log_failure(task: asyncio.Task) -> None:
    if not task.cancelled() and task.exception() is not None:
        logger.error("Could not submit spoken turn", exc_info=task.exception())
