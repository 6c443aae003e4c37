"""Multi-question exams graded in one batch.

Lifecycle: setup -> in_progress -> results. Answers are kept per question id;
moving between questions restores whatever was answered before. Submitting
past the last question grades all answers in a single request.
"""

import logging

from content import prompts, schemas
from content.decoding import decode_exam_questions, decode_exam_result
from errors import GenerationError, SurfaceBusyError, ValidationInputRejected
from models import (
    ExamAnswer,
    ExamPhase,
    ExamQuestion,
    ExamResult,
    ExamSurface,
    ExamType,
    QuestionFeedback,
    QuestionKind,
    SurfaceKind,
)
from session import SessionContext

logger = logging.getLogger(__name__)

QUESTION_COUNTS = (5, 10, 15)

CREATE_ERROR = "Failed to create the exam. Please try again."
GRADE_ERROR = "Failed to grade the exam. Please try again later."
MISSING_FEEDBACK = "No feedback was returned for this question."


def align_result(
    result: ExamResult, questions: list[ExamQuestion], answers: list[ExamAnswer]
) -> ExamResult:
    """Order per-question feedback by question order.

    The grader's list is matched by question id, not position. Questions the
    grader skipped get a placeholder marked incorrect; feedback for ids that
    are not in the exam is dropped.
    """
    by_id = {}
    for item in result.per_question_feedback:
        by_id.setdefault(item.question_id, item)
    answer_by_id = {a.question_id: a.value for a in answers}

    aligned = []
    for question in questions:
        item = by_id.get(question.id)
        if item is None:
            logger.warning("Grader returned no feedback for question %d", question.id)
            item = QuestionFeedback(
                question_id=question.id,
                question_text=question.text,
                user_answer=answer_by_id.get(question.id, ""),
                correct=False,
                feedback=MISSING_FEEDBACK,
            )
        aligned.append(item)
    return result.model_copy(update={"per_question_feedback": aligned})


class ExamOrchestrator:
    """Drives the exam surface of a session."""

    kind = SurfaceKind.EXAM

    def __init__(self, context: SessionContext):
        self.context = context

    @property
    def state(self) -> ExamSurface:
        return self.context.record.exam

    @property
    def current_question(self) -> ExamQuestion | None:
        state = self.state
        if state.phase != ExamPhase.IN_PROGRESS or not state.questions:
            return None
        return state.questions[state.current_index]

    @property
    def is_last_question(self) -> bool:
        state = self.state
        return state.current_index == len(state.questions) - 1

    @property
    def can_advance(self) -> bool:
        """Whether the current question has an answer to commit."""
        question = self.current_question
        if question is None or self.state.busy:
            return False
        answer = self.state.current_answer
        if question.kind == QuestionKind.MCQ:
            return answer in question.options
        return bool(answer.strip())

    async def enter(self) -> None:
        self.context.activate(self.kind)

    # ========================================================================
    # Setup
    # ========================================================================

    def configure(self, exam_type: ExamType, question_count: int) -> None:
        """Choose the exam type and length before starting.

        Raises:
            ValueError: If the count is not 5, 10 or 15.
            SurfaceBusyError: If an exam is already under way.
        """
        if question_count not in QUESTION_COUNTS:
            raise ValueError(f"question_count must be one of {QUESTION_COUNTS}")
        if self.state.phase != ExamPhase.SETUP or self.state.busy:
            raise SurfaceBusyError("Exam settings can only change during setup")
        self.state.exam_type = exam_type
        self.state.question_count = question_count
        self.context.persist()

    async def start(self) -> bool:
        """Generate the questions and begin the exam.

        Returns:
            True if the exam started. On failure the surface stays in setup
            with an error message.
        """
        state = self.state
        if state.busy:
            raise SurfaceBusyError("The exam is already being prepared")
        if state.phase != ExamPhase.SETUP:
            raise SurfaceBusyError("Finish or reset the current exam first")

        self._discard_exam()
        state.busy = True
        state.error = ""
        try:
            generation = await self.context.generator.generate(
                prompts.exam_prompt(self.context.settings, state.exam_type, state.question_count),
                schema=schemas.EXAM_QUESTIONS,
            )
            questions = decode_exam_questions(generation.unwrap())
        except GenerationError as e:
            logger.warning("Exam generation failed: %s", e)
            state.error = CREATE_ERROR
            return False
        finally:
            state.busy = False
            self.context.persist()

        if len(questions) != state.question_count:
            logger.warning(
                "Requested %d exam questions, received %d",
                state.question_count,
                len(questions),
            )
        state.questions = questions
        state.phase = ExamPhase.IN_PROGRESS
        self.context.persist()
        return True

    # ========================================================================
    # Answering
    # ========================================================================

    def set_answer(self, value: str) -> None:
        """Edit the answer to the current question."""
        if self.current_question is None or self.state.busy:
            return
        self.state.current_answer = value

    def select_option(self, index: int) -> None:
        """Choose a multiple-choice option by position."""
        question = self.current_question
        if question is None or question.kind != QuestionKind.MCQ:
            raise ValidationInputRejected("This question has no options")
        if not 0 <= index < len(question.options):
            raise ValidationInputRejected("Choose one of the listed options")
        self.set_answer(question.options[index])

    async def next(self) -> ExamResult | None:
        """Commit the current answer and move on.

        On the last question this grades the exam.

        Returns:
            The exam result once grading succeeds, otherwise None.

        Raises:
            ValidationInputRejected: If the current question is unanswered.
        """
        if self.state.busy:
            raise SurfaceBusyError("The exam is being graded")
        if not self.can_advance:
            raise ValidationInputRejected("Answer the question before continuing.")

        self._commit()
        if self.is_last_question:
            return await self._grade()

        self._move(self.state.current_index + 1)
        return None

    def back(self) -> None:
        """Return to the previous question, keeping a non-empty answer."""
        state = self.state
        if self.current_question is None or state.busy or state.current_index == 0:
            return
        if self.can_advance:
            self._commit()
        self._move(state.current_index - 1)

    def reset(self) -> None:
        """Leave the results (or an abandoned exam) and return to setup."""
        if self.state.busy:
            raise SurfaceBusyError("The exam is being graded")
        self._discard_exam()
        self.state.phase = ExamPhase.SETUP
        self.state.error = ""
        self.context.persist()

    # ========================================================================
    # Helpers
    # ========================================================================

    def _commit(self) -> None:
        state = self.state
        question_id = state.questions[state.current_index].id
        state.answers = [a for a in state.answers if a.question_id != question_id]
        state.answers.append(ExamAnswer(question_id=question_id, value=state.current_answer))
        self.context.persist()

    def _move(self, index: int) -> None:
        state = self.state
        state.current_index = index
        question_id = state.questions[index].id
        state.current_answer = next(
            (a.value for a in state.answers if a.question_id == question_id), ""
        )
        self.context.persist()

    async def _grade(self) -> ExamResult | None:
        state = self.state
        state.phase = ExamPhase.RESULTS
        state.busy = True
        state.error = ""
        self.context.persist()

        try:
            generation = await self.context.generator.generate(
                prompts.exam_grading_prompt(self.context.settings, state.questions, state.answers),
                schema=schemas.EXAM_RESULT,
                system_instruction=prompts.persona_instruction(self.context.settings),
            )
            result = decode_exam_result(generation.unwrap())
        except GenerationError as e:
            logger.warning("Exam grading failed: %s", e)
            state.busy = False
            self._discard_exam()
            state.phase = ExamPhase.SETUP
            state.error = GRADE_ERROR
            self.context.persist()
            return None

        state.result = align_result(result, state.questions, state.answers)
        state.busy = False
        self.context.persist()
        return state.result

    def _discard_exam(self) -> None:
        state = self.state
        state.questions = []
        state.answers = []
        state.current_index = 0
        state.current_answer = ""
        state.result = None
