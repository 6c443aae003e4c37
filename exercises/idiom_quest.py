"""Idiom Quest: pick the meaning of the idiom that fills a blank."""

from content import prompts, schemas
from content.decoding import decode_idiom_task
from errors import ValidationInputRejected
from exercises.base import ExerciseStateMachine
from exercises.validators import LocalExactValidator
from models import IdiomSurface, IdiomTask, SurfaceKind, Verdict
from session import SessionContext


def idiom_feedback(task: IdiomTask, correct: bool) -> str:
    headline = "Excellent!" if correct else "Not quite!"
    return f'{headline} The idiom is "{task.correct_idiom}". {task.explanation}'


class IdiomQuest(ExerciseStateMachine[IdiomTask, Verdict]):
    kind = SurfaceKind.IDIOM
    generation_error = "Could not generate an idiom quest. Please try again."

    def __init__(self, context: SessionContext):
        super().__init__(context)
        self._validator = LocalExactValidator(
            expected=lambda task: task.correct_meaning,
            feedback=idiom_feedback,
            normalize=False,
        )

    @property
    def state(self) -> IdiomSurface:
        return self.context.record.idiom

    @property
    def validator(self) -> LocalExactValidator:
        return self._validator

    async def _produce_task(self) -> IdiomTask:
        generation = await self.context.generator.generate(
            prompts.idiom_prompt(self.settings), schema=schemas.IDIOM_TASK
        )
        return decode_idiom_task(generation.unwrap())

    async def choose(self, option: str) -> Verdict | None:
        """Select one of the four meanings.

        Only the first selection counts; later selections return the verdict
        already recorded.
        """
        task = self.state.task
        if self.state.verdict is None and task is not None and option not in task.options:
            raise ValidationInputRejected(f"Not one of the options: {option!r}")
        return await self.submit(option)
