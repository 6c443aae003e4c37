from rich.text import Text
from rich.panel import Panel
from rich.table import Table
from rich.style import Style
from rich.align import Align
from rich.columns import Columns
from rich import box

from models import (
    ConversationTurn,
    ExamResult,
    LearningPlan,
    TurnRole,
    WordOfTheDay,
    WritingFeedback,
)
from ui.styles import (
    BRAND_INDIGO,
    BRAND_TEAL,
    SUCCESS_GREEN,
    ERROR_RED,
    INFO_BLUE,
    MUTED_GRAY,
    TEXT_WHITE,
    create_verdict_header,
    get_score_style,
)


class TaskPanel:
    """A styled panel for displaying a task with optional choices."""

    def __init__(
        self,
        title: str,
        prompt_text: str,
        options: list[str] | None = None,
        body: str = "",
        subtitle: str = "",
        accent: str = BRAND_INDIGO,
        numbered: bool = False,
    ):
        self.title = title
        self.prompt_text = prompt_text
        self.options = options or []
        self.body = body
        self.subtitle = subtitle
        self.accent = accent
        self.numbered = numbered

    def render(self) -> Panel:
        content = Text()

        if self.body:
            content.append(self.body, Style(color=TEXT_WHITE))
            content.append("\n\n")

        content.append(self.prompt_text, Style(color=self.accent, bold=True))

        if self.options:
            content.append("\n\n")
        for i, option in enumerate(self.options):
            label = str(i + 1) if self.numbered else chr(65 + i)
            content.append(f"{label}. ", Style(color=BRAND_TEAL, bold=True))
            content.append(option, Style(color=TEXT_WHITE))
            content.append("\n")

        return Panel(
            Align.left(content),
            title=self.title,
            subtitle=self.subtitle or None,
            border_style=self.accent,
            box=box.HEAVY,
            padding=(1, 2),
        )

    def __rich__(self) -> Panel:
        return self.render()


class FeedbackPanel:
    """A styled panel for displaying a verdict."""

    def __init__(self, correct: bool, message: str, user_answer: str = ""):
        self.correct = correct
        self.message = message
        self.user_answer = user_answer

    def render(self) -> Panel:
        content = Text()
        content.append(create_verdict_header(self.correct))
        content.append("\n")
        if self.user_answer:
            content.append(f"You answered: {self.user_answer}\n", Style(color=MUTED_GRAY))
        content.append("\n")
        content.append(self.message, Style(color=TEXT_WHITE))

        return Panel(
            Align.left(content),
            title="Result",
            border_style=SUCCESS_GREEN if self.correct else ERROR_RED,
            box=box.HEAVY,
            padding=(1, 2),
        )

    def __rich__(self) -> Panel:
        return self.render()


class WritingFeedbackPanel:
    """Four-part critique of a piece of writing."""

    SECTIONS = [
        ("Overall", "overall"),
        ("Grammar", "grammar"),
        ("Style", "style"),
        ("Vocabulary", "vocabulary"),
    ]

    def __init__(self, feedback: WritingFeedback):
        self.feedback = feedback

    def render(self) -> Panel:
        content = Text()
        for i, (label, field) in enumerate(self.SECTIONS):
            if i:
                content.append("\n\n")
            content.append(f"{label}\n", Style(color=BRAND_TEAL, bold=True))
            content.append(getattr(self.feedback, field), Style(color=TEXT_WHITE))

        return Panel(
            Align.left(content),
            title="Writing Analysis",
            border_style=BRAND_TEAL,
            box=box.HEAVY,
            padding=(1, 2),
        )

    def __rich__(self) -> Panel:
        return self.render()


class TranscriptPanel:
    """A conversation transcript, with speaking feedback under learner turns."""

    def __init__(self, title: str, turns: list[ConversationTurn], pending: bool = False):
        self.title = title
        self.turns = turns
        self.pending = pending

    def render(self) -> Panel:
        content = Text()
        for turn in self.turns:
            if turn.role == TurnRole.ASSISTANT:
                content.append("Tutor: ", Style(color=BRAND_INDIGO, bold=True))
            else:
                content.append("You: ", Style(color=BRAND_TEAL, bold=True))
            content.append(turn.text, Style(color=TEXT_WHITE))
            content.append("\n")

            feedback = turn.feedback
            if feedback is not None:
                content.append(
                    f"  Accuracy {feedback.accuracy_score:.0f}/100\n",
                    get_score_style(feedback.accuracy_score),
                )
                for tip in feedback.pronunciation_tips:
                    content.append(f"  • {tip.word}: ", Style(color=INFO_BLUE, bold=True))
                    content.append(f"{tip.tip}\n", Style(color=MUTED_GRAY))
                content.append(f"  Fluency: {feedback.fluency_comment}\n", Style(color=MUTED_GRAY))
                content.append(f"  Grammar: {feedback.grammar_comment}\n", Style(color=MUTED_GRAY))
            content.append("\n")

        if self.pending:
            content.append("Tutor is typing…", Style(color=MUTED_GRAY, italic=True))

        return Panel(
            Align.left(content),
            title=self.title,
            subtitle="Type your reply, or 'q' to leave",
            border_style=BRAND_INDIGO,
            box=box.HEAVY,
            padding=(1, 2),
        )

    def __rich__(self) -> Panel:
        return self.render()


class ExamResultsTable:
    """Per-question exam feedback with the overall score."""

    def __init__(self, result: ExamResult):
        self.result = result

    def render(self) -> Panel:
        table = Table(
            show_header=True,
            header_style=Style(color=BRAND_INDIGO, bold=True),
            border_style=MUTED_GRAY,
            row_styles=[Style(), Style(dim=True)],
            box=box.HEAVY,
        )

        table.add_column("#", justify="right", style=Style(color=MUTED_GRAY))
        table.add_column("Question", style=Style(color=TEXT_WHITE))
        table.add_column("Your answer", style=Style(color=MUTED_GRAY))
        table.add_column("", justify="center")
        table.add_column("Feedback", style=Style(color=TEXT_WHITE))

        for item in self.result.per_question_feedback:
            mark = Text("✓", style=SUCCESS_GREEN) if item.correct else Text("✗", style=ERROR_RED)
            table.add_row(
                str(item.question_id),
                item.question_text,
                item.user_answer,
                mark,
                item.feedback,
            )

        score = Text()
        score.append("Overall score: ", Style(color=MUTED_GRAY))
        score.append(
            f"{self.result.overall_score:.0f}/100",
            get_score_style(self.result.overall_score),
        )
        score.append(f"\n\n{self.result.summary}", Style(color=TEXT_WHITE))

        return Panel(
            Columns([Align.left(score), Align.center(table)], padding=(1, 1)),
            title="Exam Results",
            border_style=BRAND_TEAL,
            box=box.HEAVY,
            padding=(1, 1),
        )

    def __rich__(self) -> Panel:
        return self.render()


class PlanTable:
    """A learning plan with completion marks."""

    def __init__(self, plan: LearningPlan):
        self.plan = plan

    def render(self) -> Panel:
        table = Table(
            show_header=True,
            header_style=Style(color=BRAND_INDIGO, bold=True),
            border_style=MUTED_GRAY,
            box=box.SIMPLE,
        )
        table.add_column("Day", style=Style(color=BRAND_TEAL, bold=True))
        table.add_column("#", justify="right", style=Style(color=MUTED_GRAY))
        table.add_column("", justify="center")
        table.add_column("Task", style=Style(color=TEXT_WHITE))
        table.add_column("Activity", style=Style(color=MUTED_GRAY))

        for day_index, day in enumerate(self.plan.days):
            for task_index, task in enumerate(day.tasks):
                table.add_row(
                    day.day if task_index == 0 else "",
                    f"{day_index + 1}.{task_index + 1}",
                    Text("■", style=SUCCESS_GREEN) if task.completed else Text("□"),
                    task.description,
                    task.kind.value,
                )

        return Panel(
            table,
            title=self.plan.objective,
            border_style=BRAND_INDIGO,
            box=box.HEAVY,
            padding=(1, 1),
        )

    def __rich__(self) -> Panel:
        return self.render()


class WelcomeScreen:
    """Welcome screen with banner and the word of the day."""

    def __init__(self, name: str, word: WordOfTheDay | None = None, accent: str = BRAND_INDIGO):
        self.name = name
        self.word = word
        self.accent = accent

    def render(self) -> Panel:
        banner = Text()
        banner.append("╔═════════════════════════════╗\n", Style(color=self.accent))
        banner.append("║         ", Style(color=self.accent))
        banner.append("LingoSphere", Style(color=BRAND_TEAL, bold=True))
        banner.append("         ║\n", Style(color=self.accent))
        banner.append("║    AI English Tutor         ║\n", Style(color=self.accent))
        banner.append("╚═════════════════════════════╝\n", Style(color=self.accent))
        banner.append("\n")
        banner.append(f"Welcome back, {self.name}!\n\n", Style(color=TEXT_WHITE))
        banner.append("Type 'q' at any time to go back.\n", Style(color=MUTED_GRAY))

        parts = [Align.center(banner)]
        if self.word is not None:
            word = Text()
            word.append("Word of the Day\n\n", Style(color=MUTED_GRAY))
            word.append(f"{self.word.word}\n", Style(color=BRAND_TEAL, bold=True))
            word.append(f"{self.word.definition}\n\n", Style(color=TEXT_WHITE))
            word.append(f"“{self.word.example}”", Style(color=MUTED_GRAY, italic=True))
            parts.append(Align.center(word))

        return Panel(
            Columns(parts, align="center", padding=(3, 3)),
            border_style=self.accent,
            box=box.HEAVY,
            padding=(2, 3),
        )

    def __rich__(self) -> Panel:
        return self.render()


class MenuTable:
    """Numbered navigation menu."""

    def __init__(self, rows: list[tuple[int, str, str, str]], active: str = ""):
        self.rows = rows
        self.active = active

    def render(self) -> Panel:
        table = Table(show_header=False, box=box.SIMPLE, border_style=MUTED_GRAY)
        table.add_column("#", justify="right", style=Style(color=BRAND_TEAL, bold=True))
        table.add_column("Surface")
        table.add_column("Status", style=Style(color=MUTED_GRAY))

        group = None
        for number, row_group, name, status in self.rows:
            if row_group != group:
                table.add_row("", Text(row_group.upper(), style=Style(color=MUTED_GRAY)), "")
                group = row_group
            style = Style(color=BRAND_INDIGO, bold=True) if name == self.active else Style()
            table.add_row(str(number), Text(name, style=style), status)

        return Panel(
            table,
            title="Menu",
            subtitle="Number to open · s settings · l logout · q quit",
            border_style=BRAND_INDIGO,
            box=box.HEAVY,
        )

    def __rich__(self) -> Panel:
        return self.render()
