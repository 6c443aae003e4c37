"""Shared lifecycle for generate-then-answer exercise surfaces.

Every surface moves through the same phases::

    idle -> generating -> ready -> submitted -> feedback
              |                       |
              +-> idle (failure)      +-> ready (grading failure)

Each surface owns one SurfaceState inside the session record. The machine
reads that state through the session on every access, so a response that
lands after the learner moved to another surface still updates the right
(now background) state.
"""

import logging
from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from errors import GenerationError, SurfaceBusyError, ValidationInputRejected
from exercises.validators import Candidate, TaskValidator, reject_blank
from models import Answer, ExercisePhase, Settings, SurfaceKind, SurfaceState, Task
from session import SessionContext

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Task)
V = TypeVar("V")


class ExerciseStateMachine(ABC, Generic[T, V]):
    """Abstract base class for exercise surfaces.

    Subclasses provide the surface kind, the state object, how a task is
    produced and which validator checks answers.
    """

    kind: SurfaceKind
    generation_error = "Could not generate a new task. Please try again."
    grading_error = "Could not check your answer. Please try again."

    def __init__(self, context: SessionContext):
        self.context = context

    @property
    @abstractmethod
    def state(self) -> SurfaceState:
        """This surface's state inside the session record."""
        ...

    @property
    @abstractmethod
    def validator(self) -> TaskValidator[T, V]:
        ...

    @abstractmethod
    async def _produce_task(self) -> T:
        """Create the next task.

        Raises:
            GenerationError: If the task could not be generated.
        """
        ...

    @property
    def settings(self) -> Settings:
        return self.context.settings

    @property
    def phase(self) -> ExercisePhase:
        return self.state.phase

    @property
    def task(self) -> T | None:
        return self.state.task

    @property
    def verdict(self) -> V | None:
        return self.state.verdict

    @property
    def error(self) -> str:
        return self.state.error

    # ========================================================================
    # Transitions
    # ========================================================================

    async def enter(self) -> None:
        """Activate the surface, generating a first task only if none exists."""
        self.context.activate(self.kind)
        if self.state.task is None and not self.state.busy:
            await self._generate()

    async def regenerate(self) -> None:
        """Discard the current task, answer and verdict and fetch a new task."""
        await self._generate()

    async def submit(self, candidate: Candidate) -> V | None:
        """Check an answer for the current task.

        Once a verdict exists the answer is locked: submitting again returns
        the existing verdict unchanged.

        Args:
            candidate: The learner's answer text or token sequence.

        Returns:
            The verdict, or None if grading failed (the surface is back in
            ready with an error message).

        Raises:
            SurfaceBusyError: If a request is already in flight.
            ValidationInputRejected: If the answer is blank or there is no
                task to answer.
        """
        state = self.state
        self._check_not_busy("submit")
        if state.phase == ExercisePhase.FEEDBACK:
            return state.verdict
        if state.phase != ExercisePhase.READY or state.task is None:
            raise ValidationInputRejected("There is no task to answer yet.")
        reject_blank(candidate)

        task = state.task
        state.answer = Answer(task_id=task.id, value=self._answer_text(candidate))
        state.phase = ExercisePhase.SUBMITTED
        state.error = ""
        logger.debug("%s: submitted answer for task %s", self.kind.value, task.id)

        try:
            verdict = await self.validator.validate(task, candidate)
        except GenerationError as e:
            logger.warning("%s: grading failed: %s", self.kind.value, e)
            state.phase = ExercisePhase.READY
            state.error = self.grading_error
            self.context.persist()
            return None

        state.verdict = verdict
        state.phase = ExercisePhase.FEEDBACK
        self.context.persist()
        return verdict

    # ========================================================================
    # Helpers
    # ========================================================================

    async def _generate(self) -> None:
        self._check_not_busy("generate")
        state = self.state
        self._clear()
        state.phase = ExercisePhase.GENERATING
        state.error = ""
        logger.debug("%s: generating task", self.kind.value)

        try:
            task = await self._produce_task()
        except GenerationError as e:
            logger.warning("%s: task generation failed: %s", self.kind.value, e)
            state.phase = ExercisePhase.IDLE
            state.error = self.generation_error
        else:
            self._install(task)
            state.phase = ExercisePhase.READY
        self.context.persist()

    def _clear(self) -> None:
        """Drop the task and everything that refers to it."""
        state = self.state
        state.task = None
        state.answer = None
        state.verdict = None

    def _install(self, task: T) -> None:
        self.state.task = task

    def _answer_text(self, candidate: Candidate) -> str:
        return candidate if isinstance(candidate, str) else " ".join(candidate)

    def _check_not_busy(self, action: str) -> None:
        if self.state.busy:
            raise SurfaceBusyError(
                f"Cannot {action} while {self.kind.value} is {self.state.phase.value}"
            )


def parse_letter_input(user_input: str, max_options: int = 4) -> int | None:
    """Parse letter (A-F) or number (1-6) input to 0-based index.

    Args:
        user_input: Raw user input string.
        max_options: Maximum number of valid options.

    Returns:
        0-based index or None if input is invalid or out of bounds.
    """
    user_input = user_input.strip().upper()
    letter_map = {"A": 0, "B": 1, "C": 2, "D": 3, "E": 4, "F": 5}

    if user_input in letter_map:
        index = letter_map[user_input]
    elif user_input.isdigit():
        index = int(user_input) - 1
    else:
        return None

    if index < 0 or index >= max_options:
        return None

    return index
