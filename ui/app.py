from contextlib import contextmanager
from typing import Iterator

from rich.console import Console
from rich.text import Text
from rich.panel import Panel

from exercises.base import parse_letter_input
from models import ConversationTurn, ExamResult, LearningPlan, Verdict, WordOfTheDay, WritingFeedback
from ui.components import (
    ExamResultsTable,
    FeedbackPanel,
    MenuTable,
    PlanTable,
    TaskPanel,
    TranscriptPanel,
    WelcomeScreen,
    WritingFeedbackPanel,
)
from ui.styles import (
    BRAND_INDIGO,
    DEFAULT_THEME,
    SUCCESS_GREEN,
    ERROR_RED,
    INFO_BLUE,
    MUTED_GRAY,
)

QUIT = "q"


class TutorUI:
    """Terminal presentation for the LingoSphere client."""

    def __init__(self, console: Console | None = None, accent: str = BRAND_INDIGO):
        self.console = console or Console(theme=DEFAULT_THEME)
        self.accent = accent

    # ========================================================================
    # Screens
    # ========================================================================

    def show_welcome(self, name: str, word: WordOfTheDay | None) -> None:
        """Display the welcome screen."""
        self.console.print(WelcomeScreen(name, word, accent=self.accent))
        self.console.print()

    def show_menu(self, rows: list[tuple[int, str, str, str]], active: str = "") -> str:
        """Display the navigation menu and return the raw selection."""
        self.console.print(MenuTable(rows, active))
        return self.ask("Open")

    def show_task(
        self,
        title: str,
        prompt_text: str,
        options: list[str] | None = None,
        body: str = "",
        subtitle: str = "",
        numbered: bool = False,
    ) -> None:
        """Display a task panel."""
        self.console.print(
            TaskPanel(
                title=title,
                prompt_text=prompt_text,
                options=options,
                body=body,
                subtitle=subtitle,
                accent=self.accent,
                numbered=numbered,
            )
        )
        self.console.print()

    def show_feedback(self, verdict: Verdict, user_answer: str = "") -> None:
        """Display feedback for the user's answer."""
        self.console.print(FeedbackPanel(verdict.correct, verdict.message, user_answer))
        self.console.print()

    def show_writing_feedback(self, feedback: WritingFeedback) -> None:
        self.console.print(WritingFeedbackPanel(feedback))
        self.console.print()

    def show_transcript(self, title: str, turns: list[ConversationTurn]) -> None:
        self.console.print(TranscriptPanel(title, turns))

    def show_exam_results(self, result: ExamResult) -> None:
        self.console.print(ExamResultsTable(result))
        self.console.print()

    def show_plan(self, plan: LearningPlan) -> None:
        self.console.print(PlanTable(plan))
        self.console.print()

    # ========================================================================
    # Input
    # ========================================================================

    def ask(self, label: str = "Your answer") -> str:
        """Read one line of input."""
        return self.console.input(Text(f"{label}: ", style=f"bold {MUTED_GRAY}")).strip()

    def choose(self, options: list[str], label: str = "Your choice") -> int | None:
        """Read an A-D (or 1-4) choice.

        Returns:
            The 0-based index, or None if the user quits.
        """
        while True:
            user_input = self.ask(label)
            if user_input.lower() == QUIT:
                return None
            index = parse_letter_input(user_input, len(options))
            if index is not None:
                return index
            letters = ", ".join(chr(65 + i) for i in range(len(options)))
            self.console.print(Text(f"Please enter {letters} (or 'q' to quit)\n", style=ERROR_RED))

    @contextmanager
    def working(self, message: str) -> Iterator[None]:
        """Show a spinner while a request is in flight."""
        with self.console.status(Text(message, style=INFO_BLUE)):
            yield

    # ========================================================================
    # Messages
    # ========================================================================

    def show_error(self, message: str) -> None:
        """Display an error message."""
        self.console.print(
            Panel(
                Text(message, style=ERROR_RED),
                title="Error",
                border_style=ERROR_RED,
            )
        )

    def show_info(self, message: str) -> None:
        """Display an informational message."""
        self.console.print(Text(message, style=INFO_BLUE))

    def show_success(self, message: str) -> None:
        """Display a success message."""
        self.console.print(Text(message, style=SUCCESS_GREEN))

    def show_quit_message(self, saved: bool = True) -> None:
        """Display the quit message."""
        self.console.print()
        if saved:
            message = "👋 Goodbye! Your progress has been saved."
        else:
            message = "👋 Goodbye! Privacy mode was on, so nothing was saved."
        self.console.print(Text(message, style=MUTED_GRAY))

    def clear_screen(self) -> None:
        """Clear the terminal screen."""
        self.console.clear()
