"""Writing Analysis: structured critique of a learner's own text."""

from content import prompts, schemas
from content.decoding import decode_writing_feedback
from exercises.base import ExerciseStateMachine
from exercises.validators import RemoteGradedValidator
from models import SurfaceKind, WritingFeedback, WritingSurface, WritingTask
from session import SessionContext


class WritingAnalysis(ExerciseStateMachine[WritingTask, WritingFeedback]):
    """Free writing surface.

    There is nothing to generate: the task is a blank page created locally,
    and entering the surface always starts from an empty page.
    """

    kind = SurfaceKind.WRITING
    grading_error = "Could not analyze your writing. Please try again."

    def __init__(self, context: SessionContext):
        super().__init__(context)
        self._validator = RemoteGradedValidator(
            context.generator,
            prompt=lambda task, text: prompts.writing_analysis_prompt(self.settings, text),
            schema=schemas.WRITING_FEEDBACK,
            decode=decode_writing_feedback,
            system_instruction=lambda: prompts.persona_instruction(self.settings),
        )

    @property
    def state(self) -> WritingSurface:
        return self.context.record.writing

    @property
    def validator(self) -> RemoteGradedValidator:
        return self._validator

    async def enter(self) -> None:
        self.context.activate(self.kind)
        if not self.state.busy:
            await self._generate()

    async def _produce_task(self) -> WritingTask:
        return WritingTask()
