"""Sentence Builder: rebuild a sentence from its shuffled words."""

import random

from content import prompts
from errors import GenerationDecodeError
from exercises.base import ExerciseStateMachine
from exercises.validators import OrderedSequenceValidator
from models import SentenceSurface, SentenceTask, SurfaceKind, Verdict
from session import SessionContext


def sentence_feedback(task: SentenceTask, correct: bool) -> str:
    if correct:
        return "Excellent! That's the correct sentence."
    return f'Not quite. The correct sentence was: "{task.original}"'


def scramble(words: list[str], rng: random.Random | None = None) -> list[str]:
    """Shuffle words, reversing the order if the shuffle changed nothing.

    A sentence whose reversal equals itself (one word, or a palindromic word
    sequence) still comes back in its original order.
    """
    shuffled = list(words)
    (rng or random).shuffle(shuffled)
    if shuffled == words:
        shuffled.reverse()
    return shuffled


def build_sentence_task(text: str, rng: random.Random | None = None) -> SentenceTask:
    """Make a task from generated text, dropping a trailing full stop."""
    original = " ".join(text.strip().split())
    if original.endswith("."):
        original = original[:-1].rstrip()
    if not original:
        raise GenerationDecodeError("malformed sentence: empty")
    words = original.split(" ")
    return SentenceTask(original=original, scrambled=scramble(words, rng))


class SentenceBuilder(ExerciseStateMachine[SentenceTask, Verdict]):
    """Word bank exercise.

    Words move between the bank and the answer line with ``pick`` and
    ``unpick``; ``reset`` puts everything back in the bank. All three stop
    working once a verdict exists.
    """

    kind = SurfaceKind.SENTENCE_BUILDER
    generation_error = "Could not generate a sentence. Please try again."

    def __init__(self, context: SessionContext, rng: random.Random | None = None):
        super().__init__(context)
        self.rng = rng
        self._validator = OrderedSequenceValidator(
            expected=lambda task: task.tokens,
            feedback=sentence_feedback,
        )

    @property
    def state(self) -> SentenceSurface:
        return self.context.record.sentence_builder

    @property
    def validator(self) -> OrderedSequenceValidator:
        return self._validator

    @property
    def locked(self) -> bool:
        return self.state.verdict is not None or self.state.task is None or self.state.busy

    async def _produce_task(self) -> SentenceTask:
        generation = await self.context.generator.generate(
            prompts.sentence_prompt(self.settings)
        )
        return build_sentence_task(generation.unwrap(), self.rng)

    def _clear(self) -> None:
        super()._clear()
        self.state.bank = []
        self.state.answer_tokens = []

    def _install(self, task: SentenceTask) -> None:
        super()._install(task)
        self.state.bank = list(task.scrambled)
        self.state.answer_tokens = []

    def pick(self, index: int) -> None:
        """Move a word from the bank to the end of the answer."""
        if self.locked:
            return
        word = self.state.bank.pop(index)
        self.state.answer_tokens.append(word)
        self.context.persist()

    def unpick(self, index: int) -> None:
        """Move a word from the answer back to the end of the bank."""
        if self.locked:
            return
        word = self.state.answer_tokens.pop(index)
        self.state.bank.append(word)
        self.context.persist()

    def reset(self) -> None:
        """Return every picked word to the bank."""
        if self.locked:
            return
        state = self.state
        state.bank = state.answer_tokens + state.bank
        state.answer_tokens = []
        self.context.persist()

    async def check(self) -> Verdict | None:
        """Submit the words picked so far."""
        return await self.submit(list(self.state.answer_tokens))
