"""Answer checking strategies.

Each strategy takes a task and the learner's candidate answer and produces a
verdict. Blank candidates are rejected before any strategy runs, so a remote
grader is never asked to grade an empty answer.
"""

import re
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any, Callable, Generic, TypeVar

from google.genai import types

from content import ContentGenerator
from errors import ValidationInputRejected
from models import Task, Verdict

T = TypeVar("T", bound=Task)
V = TypeVar("V")

Candidate = str | Sequence[str]

_STRIPPED_CHARS = re.compile(r"['\".,]")


def normalize_answer(text: str) -> str:
    """Normalise a sentence for lenient comparison.

    Surrounding whitespace, case, quotes, full stops and commas are ignored.
    """
    return _STRIPPED_CHARS.sub("", text.lower()).strip()


def is_blank(candidate: Candidate) -> bool:
    if isinstance(candidate, str):
        return not candidate.strip()
    return not any(token.strip() for token in candidate)


def reject_blank(candidate: Candidate) -> None:
    """Raise ValidationInputRejected for an empty answer."""
    if is_blank(candidate):
        raise ValidationInputRejected("Please enter an answer first.")


class TaskValidator(ABC, Generic[T, V]):
    """Abstract base class for answer checking strategies."""

    async def validate(self, task: T, candidate: Candidate) -> V:
        """Check a candidate answer against a task.

        Args:
            task: The task being answered.
            candidate: Text, or a token sequence for ordering tasks.

        Returns:
            The verdict.

        Raises:
            ValidationInputRejected: If the candidate is blank.
            GenerationError: If a remote grader could not produce a verdict.
        """
        reject_blank(candidate)
        return await self._check(task, candidate)

    @abstractmethod
    async def _check(self, task: T, candidate: Candidate) -> V:
        ...


class LocalExactValidator(TaskValidator[T, Verdict]):
    """Compare against the expected answer locally.

    Args:
        expected: Pulls the expected answer out of the task.
        feedback: Builds the verdict message from the task and correctness.
        normalize: Compare normalised text instead of exact strings.
    """

    def __init__(
        self,
        expected: Callable[[T], str],
        feedback: Callable[[T, bool], str],
        normalize: bool = True,
    ):
        self.expected = expected
        self.feedback = feedback
        self.normalize = normalize

    async def _check(self, task: T, candidate: Candidate) -> Verdict:
        expected = self.expected(task)
        if self.normalize:
            correct = normalize_answer(candidate) == normalize_answer(expected)
        else:
            correct = candidate == expected
        return Verdict(correct=correct, message=self.feedback(task, correct))


class OrderedSequenceValidator(TaskValidator[T, Verdict]):
    """Correct iff the tokens match the expected sequence exactly, in order."""

    def __init__(
        self,
        expected: Callable[[T], list[str]],
        feedback: Callable[[T, bool], str],
    ):
        self.expected = expected
        self.feedback = feedback

    async def _check(self, task: T, candidate: Candidate) -> Verdict:
        tokens = [candidate] if isinstance(candidate, str) else list(candidate)
        correct = tokens == self.expected(task)
        return Verdict(correct=correct, message=self.feedback(task, correct))


class RemoteGradedValidator(TaskValidator[T, V]):
    """Ask the model to grade the answer.

    Args:
        generator: The content generator.
        prompt: Builds the grading prompt from the task and answer text.
        schema: Response schema for the verdict.
        decode: Turns the parsed response into a verdict.
        system_instruction: Supplies the persona instruction at call time,
            so setting changes apply to the next grading.
    """

    def __init__(
        self,
        generator: ContentGenerator,
        prompt: Callable[[T, str], str],
        schema: types.Schema,
        decode: Callable[[Any], V],
        system_instruction: Callable[[], str | None] = lambda: None,
    ):
        self.generator = generator
        self.prompt = prompt
        self.schema = schema
        self.decode = decode
        self.system_instruction = system_instruction

    async def _check(self, task: T, candidate: Candidate) -> V:
        answer = candidate if isinstance(candidate, str) else " ".join(candidate)
        generation = await self.generator.generate(
            self.prompt(task, answer.strip()),
            schema=self.schema,
            system_instruction=self.system_instruction(),
        )
        return self.decode(generation.unwrap())
