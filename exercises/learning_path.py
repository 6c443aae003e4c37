"""Learning Path: a generated seven-day study plan with completion tracking."""

import logging

from content import prompts, schemas
from content.decoding import decode_learning_plan
from errors import GenerationError, SurfaceBusyError
from models import LearningPathSurface, LearningPlan, LearningTask, PlanFocus, SurfaceKind
from session import SessionContext

logger = logging.getLogger(__name__)

PLAN_ERROR = "Could not generate a learning plan. Please try again."


class LearningPath:
    """Drives the learning path surface of a session."""

    kind = SurfaceKind.LEARNING_PATH

    def __init__(self, context: SessionContext):
        self.context = context

    @property
    def state(self) -> LearningPathSurface:
        return self.context.record.learning_path

    @property
    def plan(self) -> LearningPlan | None:
        return self.state.plan

    async def enter(self) -> None:
        self.context.activate(self.kind)

    def set_focus(self, focus: PlanFocus) -> None:
        self.state.focus = focus
        self.context.persist()

    def toggle_activity(self, activity: SurfaceKind) -> None:
        """Add or remove a preferred activity for the next plan."""
        activities = self.state.activities
        if activity in activities:
            activities.remove(activity)
        else:
            activities.append(activity)
        self.context.persist()

    async def generate(self) -> LearningPlan | None:
        """Generate a new plan from the chosen focus and activities.

        Returns:
            The plan, or None if generation failed.
        """
        state = self.state
        if state.busy:
            raise SurfaceBusyError("A learning plan is already being generated")
        state.busy = True
        state.error = ""
        state.plan = None
        try:
            generation = await self.context.generator.generate(
                prompts.learning_plan_prompt(self.context.settings, state.focus, state.activities),
                schema=schemas.LEARNING_PLAN,
            )
            state.plan = decode_learning_plan(generation.unwrap())
        except GenerationError as e:
            logger.warning("Learning plan generation failed: %s", e)
            state.error = PLAN_ERROR
        finally:
            state.busy = False
            self.context.persist()
        return state.plan

    def toggle_task(self, day_index: int, task_id: str) -> LearningTask:
        """Flip the completed flag of one task.

        Raises:
            KeyError: If the plan has no such task on that day.
        """
        if self.state.plan is None:
            raise KeyError(task_id)
        day = self.state.plan.days[day_index]
        for task in day.tasks:
            if task.id == task_id:
                task.completed = not task.completed
                self.context.persist()
                return task
        raise KeyError(task_id)

    def clear(self) -> None:
        """Drop the current plan so a new one can be set up."""
        self.state.plan = None
        self.state.error = ""
        self.context.persist()

    def progress(self) -> tuple[int, int]:
        """Return (completed, total) task counts for the current plan."""
        if self.state.plan is None:
            return 0, 0
        tasks = [task for day in self.state.plan.days for task in day.tasks]
        return sum(task.completed for task in tasks), len(tasks)
