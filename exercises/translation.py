"""Translation Practice: translate an English sentence into the chosen language."""

from content import prompts, schemas
from content.decoding import decode_grade
from exercises.base import ExerciseStateMachine
from exercises.validators import RemoteGradedValidator
from models import SurfaceKind, TranslationSurface, TranslationTask, Verdict
from session import SessionContext


class TranslationPractice(ExerciseStateMachine[TranslationTask, Verdict]):
    kind = SurfaceKind.TRANSLATION
    generation_error = "Could not generate a sentence to translate. Please try again."

    def __init__(self, context: SessionContext):
        super().__init__(context)
        self._validator = RemoteGradedValidator(
            context.generator,
            prompt=lambda task, answer: prompts.translation_grading_prompt(
                self.settings.model_copy(update={"translation_language": task.target_language}),
                task.sentence,
                answer,
            ),
            schema=schemas.GRADE,
            decode=decode_grade,
            system_instruction=lambda: prompts.persona_instruction(self.settings),
        )

    @property
    def state(self) -> TranslationSurface:
        return self.context.record.translation

    @property
    def validator(self) -> RemoteGradedValidator:
        return self._validator

    async def _produce_task(self) -> TranslationTask:
        # The target language is fixed when the task is created; changing the
        # setting later only affects the next task.
        language = self.settings.translation_language
        generation = await self.context.generator.generate(
            prompts.translation_prompt(self.settings)
        )
        return TranslationTask(sentence=generation.unwrap(), target_language=language)
