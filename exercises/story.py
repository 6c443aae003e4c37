"""Story Practice: read a short story and answer a comprehension question."""

from content import prompts, schemas
from content.decoding import decode_grade, decode_story
from exercises.base import ExerciseStateMachine
from exercises.validators import RemoteGradedValidator
from models import StorySurface, StoryTask, SurfaceKind, Verdict
from session import SessionContext


class StoryPractice(ExerciseStateMachine[StoryTask, Verdict]):
    kind = SurfaceKind.STORY
    generation_error = "Could not generate a story. Please try again."

    def __init__(self, context: SessionContext):
        super().__init__(context)
        self._validator = RemoteGradedValidator(
            context.generator,
            prompt=lambda task, answer: prompts.story_grading_prompt(
                self.settings, task.text, task.question, answer
            ),
            schema=schemas.GRADE,
            decode=decode_grade,
            system_instruction=lambda: prompts.persona_instruction(self.settings),
        )

    @property
    def state(self) -> StorySurface:
        return self.context.record.story

    @property
    def validator(self) -> RemoteGradedValidator:
        return self._validator

    async def _produce_task(self) -> StoryTask:
        generation = await self.context.generator.generate(
            prompts.story_prompt(self.settings), schema=schemas.STORY
        )
        return decode_story(generation.unwrap())
