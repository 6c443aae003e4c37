"""Grammar Gauntlet: correct a sentence containing one grammatical error."""

from content import prompts, schemas
from content.decoding import decode_grammar_task
from exercises.base import ExerciseStateMachine
from exercises.validators import LocalExactValidator
from models import GrammarSurface, GrammarTask, SurfaceKind, Verdict
from session import SessionContext


def grammar_feedback(task: GrammarTask, correct: bool) -> str:
    if correct:
        return f"Correct! {task.explanation}"
    return f'Not quite. The correct sentence is: "{task.correct}". \n\n{task.explanation}'


class GrammarGauntlet(ExerciseStateMachine[GrammarTask, Verdict]):
    kind = SurfaceKind.GRAMMAR
    generation_error = "Could not generate a grammar challenge. Please try again."

    def __init__(self, context: SessionContext):
        super().__init__(context)
        self._validator = LocalExactValidator(
            expected=lambda task: task.correct,
            feedback=grammar_feedback,
        )

    @property
    def state(self) -> GrammarSurface:
        return self.context.record.grammar

    @property
    def validator(self) -> LocalExactValidator:
        return self._validator

    async def _produce_task(self) -> GrammarTask:
        generation = await self.context.generator.generate(
            prompts.grammar_prompt(self.settings), schema=schemas.GRAMMAR_TASK
        )
        return decode_grammar_task(generation.unwrap())
