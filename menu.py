"""
Surface navigation menu.

Groups the tutor's surfaces the way the sidebar presents them and resolves a
numbered selection back to a surface. Each entry also carries a short status
taken from the session record, so the learner can see where work is pending.
"""

from content.prompts import SURFACE_NAMES
from models import ExamPhase, ExercisePhase, SessionRecord, SurfaceKind, TurnRole

MENU_GROUPS: list[tuple[str, list[SurfaceKind]]] = [
    ("Main", [SurfaceKind.DASHBOARD, SurfaceKind.LEARNING_PATH]),
    ("Practice", [SurfaceKind.STORY, SurfaceKind.SPEAKING, SurfaceKind.CHAT]),
    (
        "Activities",
        [SurfaceKind.SENTENCE_BUILDER, SurfaceKind.GRAMMAR, SurfaceKind.IDIOM],
    ),
    (
        "Review & Tools",
        [
            SurfaceKind.WRITING,
            SurfaceKind.TRANSLATION,
            SurfaceKind.LANGUAGE_TOOLS,
            SurfaceKind.EXAM,
        ],
    ),
]


class SurfaceMenu:
    """Numbered menu over every surface."""

    def __init__(self, record: SessionRecord):
        self.record = record

    def get_surfaces(self) -> list[SurfaceKind]:
        """All surfaces in display order."""
        return [kind for _, kinds in MENU_GROUPS for kind in kinds]

    def get_display_name(self, kind: SurfaceKind) -> str:
        return SURFACE_NAMES[kind]

    def get_status(self, kind: SurfaceKind) -> str:
        """Short description of what is waiting on a surface."""
        record = self.record
        exercise_states = {
            SurfaceKind.STORY: record.story,
            SurfaceKind.TRANSLATION: record.translation,
            SurfaceKind.SENTENCE_BUILDER: record.sentence_builder,
            SurfaceKind.GRAMMAR: record.grammar,
            SurfaceKind.IDIOM: record.idiom,
        }
        if kind in exercise_states:
            phase = exercise_states[kind].phase
            if phase == ExercisePhase.READY:
                return "task waiting"
            if phase == ExercisePhase.FEEDBACK:
                return "answered"
            return ""
        if kind == SurfaceKind.EXAM:
            exam = record.exam
            if exam.phase == ExamPhase.IN_PROGRESS:
                return f"question {exam.current_index + 1} of {len(exam.questions)}"
            if exam.phase == ExamPhase.RESULTS and exam.result is not None:
                return f"score {exam.result.overall_score:.0f}"
            return ""
        if kind in (SurfaceKind.SPEAKING, SurfaceKind.CHAT):
            conversation = record.speaking if kind == SurfaceKind.SPEAKING else record.chat
            count = sum(1 for turn in conversation.turns if turn.role == TurnRole.USER)
            return f"{count} turns" if count else ""
        if kind == SurfaceKind.LEARNING_PATH and record.learning_path.plan is not None:
            tasks = [t for day in record.learning_path.plan.days for t in day.tasks]
            done = sum(t.completed for t in tasks)
            return f"{done}/{len(tasks)} done"
        return ""

    def get_rows(self) -> list[tuple[int, str, str, str]]:
        """Rows of (number, group, display name, status) in display order."""
        rows = []
        number = 1
        for group, kinds in MENU_GROUPS:
            for kind in kinds:
                rows.append((number, group, self.get_display_name(kind), self.get_status(kind)))
                number += 1
        return rows

    def resolve(self, choice: str) -> SurfaceKind | None:
        """Map a typed selection (number or surface name) to a surface."""
        choice = choice.strip().lower()
        surfaces = self.get_surfaces()
        if choice.isdigit():
            index = int(choice) - 1
            return surfaces[index] if 0 <= index < len(surfaces) else None
        for kind in surfaces:
            if choice in (kind.value, self.get_display_name(kind).lower()):
                return kind
        return None
