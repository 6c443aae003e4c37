import argparse
import asyncio
import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from config import AppConfig, load_config
from content import ContentGenerator
from content.prompts import SURFACE_NAMES
from errors import LingoSphereError, ValidationInputRejected
from exercises import (
    ExamOrchestrator,
    GrammarGauntlet,
    IdiomQuest,
    LanguageTools,
    LearningPath,
    OpenChat,
    SentenceBuilder,
    SpeakingPractice,
    StoryPractice,
    TranslationPractice,
    WritingAnalysis,
    fetch_word_of_the_day,
    parse_letter_input,
)
from menu import SurfaceMenu
from models import (
    TRANSLATION_LANGUAGES,
    Difficulty,
    ExamPhase,
    ExamType,
    ExercisePhase,
    LanguageTool,
    Persona,
    PlanFocus,
    QuestionKind,
    SurfaceKind,
    Theme,
    User,
)
from session import SessionContext
from storage import get_session_store
from ui import TutorUI, get_accent
from ui.styles import DEFAULT_THEME

logger = logging.getLogger(__name__)

QUIT = "q"
NEW_TASK = "n"


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(description="LingoSphere English tutor")
    parser.add_argument("--email", help="Account email (prompted if omitted)")
    parser.add_argument("--name", help="Display name (prompted if omitted)")
    parser.add_argument("--db", help="Path to the SQLite database")
    parser.add_argument("--env-file", help="Path to a .env file")
    return parser


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


def build_surfaces(context: SessionContext) -> dict[SurfaceKind, object]:
    """One orchestrator per surface, all sharing the session context."""
    return {
        SurfaceKind.STORY: StoryPractice(context),
        SurfaceKind.TRANSLATION: TranslationPractice(context),
        SurfaceKind.WRITING: WritingAnalysis(context),
        SurfaceKind.SENTENCE_BUILDER: SentenceBuilder(context),
        SurfaceKind.GRAMMAR: GrammarGauntlet(context),
        SurfaceKind.IDIOM: IdiomQuest(context),
        SurfaceKind.EXAM: ExamOrchestrator(context),
        SurfaceKind.SPEAKING: SpeakingPractice(context),
        SurfaceKind.CHAT: OpenChat(context),
        SurfaceKind.LANGUAGE_TOOLS: LanguageTools(context),
        SurfaceKind.LEARNING_PATH: LearningPath(context),
    }


# ============================================================================
# Surface screens
# ============================================================================


def show_surface_error(ui: TutorUI, error: str) -> None:
    if error:
        ui.show_error(error)


async def run_answer_surface(ui: TutorUI, surface) -> None:
    """Story, translation, grammar: read a task, type an answer, get a verdict."""
    title = SURFACE_NAMES[surface.kind]
    with ui.working("Preparing your task..."):
        await surface.enter()

    while True:
        show_surface_error(ui, surface.error)
        task = surface.task
        if task is None:
            choice = ui.ask("Press Enter to try again, or 'q' to go back")
            if choice.lower() == QUIT:
                return
            with ui.working("Preparing your task..."):
                await surface.regenerate()
            continue

        if surface.kind == SurfaceKind.STORY:
            ui.show_task(title, task.question, body=task.text)
        elif surface.kind == SurfaceKind.TRANSLATION:
            ui.show_task(title, f"Translate into {task.target_language}:", body=task.sentence)
        else:
            ui.show_task(title, "Correct this sentence:", body=task.incorrect)

        if surface.phase == ExercisePhase.FEEDBACK:
            ui.show_feedback(surface.verdict, surface.state.answer.value)
            choice = ui.ask("'n' for a new task, 'q' to go back")
        else:
            choice = ui.ask("Your answer ('n' new task, 'q' back)")

        if choice.lower() == QUIT:
            return
        if choice.lower() == NEW_TASK:
            with ui.working("Preparing your task..."):
                await surface.regenerate()
            continue
        if surface.phase == ExercisePhase.FEEDBACK:
            continue

        try:
            with ui.working("Checking your answer..."):
                await surface.submit(choice)
        except ValidationInputRejected as e:
            ui.show_error(str(e))


async def run_writing(ui: TutorUI, surface: WritingAnalysis) -> None:
    await surface.enter()
    while True:
        ui.show_task(
            SURFACE_NAMES[surface.kind],
            "Write a few sentences in English and get structured feedback.",
        )
        text = ui.ask("Your text ('q' back)")
        if text.lower() == QUIT:
            return
        try:
            with ui.working("Analyzing your writing..."):
                feedback = await surface.submit(text)
        except ValidationInputRejected as e:
            ui.show_error(str(e))
            continue
        show_surface_error(ui, surface.error)
        if feedback is not None:
            ui.show_writing_feedback(feedback)
            await surface.regenerate()


async def run_sentence_builder(ui: TutorUI, surface: SentenceBuilder) -> None:
    with ui.working("Preparing your task..."):
        await surface.enter()
    while True:
        show_surface_error(ui, surface.error)
        if surface.task is None:
            if ui.ask("Press Enter to try again, or 'q' to go back").lower() == QUIT:
                return
            with ui.working("Preparing your task..."):
                await surface.regenerate()
            continue

        state = surface.state
        ui.show_task(
            SURFACE_NAMES[surface.kind],
            "Word bank:",
            options=state.bank,
            body="Your sentence: " + (" ".join(state.answer_tokens) or "…"),
            subtitle="Number to pick · u<number> to remove · r reset · c check · n new",
            numbered=True,
        )
        if state.verdict is not None:
            ui.show_feedback(state.verdict)

        choice = ui.ask("Action").lower()
        if choice == QUIT:
            return
        if choice == NEW_TASK:
            with ui.working("Preparing your task..."):
                await surface.regenerate()
        elif choice == "r":
            surface.reset()
        elif choice == "c":
            try:
                await surface.check()
            except ValidationInputRejected as e:
                ui.show_error(str(e))
        elif choice.startswith("u") and choice[1:].isdigit():
            index = int(choice[1:]) - 1
            if 0 <= index < len(state.answer_tokens):
                surface.unpick(index)
        elif choice.isdigit():
            index = int(choice) - 1
            if 0 <= index < len(state.bank):
                surface.pick(index)


async def run_idiom_quest(ui: TutorUI, surface: IdiomQuest) -> None:
    with ui.working("Preparing your task..."):
        await surface.enter()
    while True:
        show_surface_error(ui, surface.error)
        task = surface.task
        if task is None:
            if ui.ask("Press Enter to try again, or 'q' to go back").lower() == QUIT:
                return
            with ui.working("Preparing your task..."):
                await surface.regenerate()
            continue

        ui.show_task(
            SURFACE_NAMES[surface.kind],
            "What does the missing idiom mean?",
            options=task.options,
            body=task.context_sentence,
        )
        if surface.verdict is not None:
            ui.show_feedback(surface.verdict, surface.state.answer.value)
            if ui.ask("'n' for a new quest, 'q' to go back").lower() == QUIT:
                return
            with ui.working("Preparing your task..."):
                await surface.regenerate()
            continue

        index = ui.choose(task.options)
        if index is None:
            return
        await surface.choose(task.options[index])


async def run_conversation(ui: TutorUI, surface: SpeakingPractice | OpenChat) -> None:
    title = SURFACE_NAMES[surface.kind]
    with ui.working("Starting the conversation..."):
        await surface.enter()
    while True:
        ui.show_transcript(title, surface.turns)
        show_surface_error(ui, surface.state.error)
        text = ui.ask("You ('n' restart, 'q' back)")
        if text.lower() == QUIT:
            return
        if text.lower() == NEW_TASK:
            with ui.working("Starting the conversation..."):
                await surface.start()
            continue
        try:
            with ui.working("Tutor is typing..."):
                await surface.submit(text)
        except ValidationInputRejected as e:
            ui.show_error(str(e))


async def run_exam(ui: TutorUI, exam: ExamOrchestrator) -> None:
    await exam.enter()
    while True:
        state = exam.state
        show_surface_error(ui, state.error)

        if state.phase == ExamPhase.SETUP:
            types = list(ExamType)
            ui.show_task(
                "Exams",
                "Choose an exam type:",
                options=[t.value.replace("_", " ").title() for t in types],
            )
            index = ui.choose(types)
            if index is None:
                return
            count = ui.ask("Number of questions (5, 10 or 15)")
            try:
                exam.configure(types[index], int(count))
            except ValueError:
                ui.show_error("Please choose 5, 10 or 15 questions.")
                continue
            with ui.working("Creating your exam..."):
                await exam.start()

        elif state.phase == ExamPhase.IN_PROGRESS:
            question = exam.current_question
            ui.show_task(
                "Exams",
                question.text,
                options=question.options,
                subtitle=f"Question {state.current_index + 1} of {len(state.questions)}"
                " · 'b' back · 'q' leave",
            )
            if question.kind == QuestionKind.MCQ:
                answer = ui.ask("Your choice")
            else:
                if state.current_answer:
                    ui.show_info(f"Saved answer: {state.current_answer}")
                answer = ui.ask("Your answer")
            if answer.lower() == QUIT:
                return
            if answer.lower() == "b":
                exam.back()
                continue
            if question.kind == QuestionKind.MCQ:
                index = parse_letter_input(answer, len(question.options))
                if index is None:
                    ui.show_error("Please enter A, B, C or D.")
                    continue
                exam.select_option(index)
            else:
                exam.set_answer(answer)
            try:
                with ui.working("Grading your exam..." if exam.is_last_question else "Saving..."):
                    await exam.next()
            except ValidationInputRejected as e:
                ui.show_error(str(e))

        else:
            if state.result is not None:
                ui.show_exam_results(state.result)
            if ui.ask("Press Enter for a new exam, or 'q' to go back").lower() == QUIT:
                return
            exam.reset()


async def run_language_tools(ui: TutorUI, tools: LanguageTools) -> None:
    with ui.working("Loading vocabulary..."):
        await tools.enter()
    while True:
        state = tools.state
        show_surface_error(ui, state.error)
        if state.active_tool == LanguageTool.VOCABULARY:
            for entry in state.vocabulary:
                ui.show_task(entry.word, entry.definition, body=entry.example)
        elif state.active_tool == LanguageTool.DICTIONARY and state.dictionary_entry:
            entry = state.dictionary_entry
            ui.show_task(f"{entry.word} ({entry.part_of_speech})", entry.definition, body=entry.example)
        elif state.active_tool == LanguageTool.PHRASAL_VERBS and state.phrasal_verb:
            verb = state.phrasal_verb
            ui.show_task(verb.verb, verb.definition, body=verb.example)
        elif state.active_tool == LanguageTool.COMMON_PHRASES and state.common_phrase:
            phrase = state.common_phrase
            ui.show_task(phrase.phrase, phrase.meaning, body=phrase.example)

        choice = ui.ask("v vocabulary · d <word> dictionary · p phrasal verb · c phrase · q back")
        if choice.lower() == QUIT:
            return
        with ui.working("Loading..."):
            if choice == "v":
                tools.select_tool(LanguageTool.VOCABULARY)
                await tools.refresh_vocabulary()
            elif choice.startswith("d"):
                tools.select_tool(LanguageTool.DICTIONARY)
                try:
                    await tools.lookup(choice[1:])
                except ValidationInputRejected as e:
                    ui.show_error(str(e))
            elif choice == "p":
                tools.select_tool(LanguageTool.PHRASAL_VERBS)
                await tools.refresh_phrasal_verb()
            elif choice == "c":
                tools.select_tool(LanguageTool.COMMON_PHRASES)
                await tools.refresh_common_phrase()


async def run_learning_path(ui: TutorUI, path: LearningPath) -> None:
    await path.enter()
    while True:
        show_surface_error(ui, path.state.error)
        if path.plan is None:
            focuses = list(PlanFocus)
            ui.show_task(
                "Learning Path",
                "What would you like to focus on this week?",
                options=[f.value.title() for f in focuses],
            )
            index = ui.choose(focuses)
            if index is None:
                return
            path.set_focus(focuses[index])
            with ui.working("Building your plan..."):
                await path.generate()
            continue

        ui.show_plan(path.plan)
        done, total = path.progress()
        ui.show_info(f"{done} of {total} tasks completed")
        choice = ui.ask("<day>.<task> to toggle · n new plan · q back")
        if choice.lower() == QUIT:
            return
        if choice.lower() == NEW_TASK:
            path.clear()
            continue
        day, _, number = choice.partition(".")
        if day.isdigit() and number.isdigit():
            day_index, task_index = int(day) - 1, int(number) - 1
            days = path.plan.days
            if 0 <= day_index < len(days) and 0 <= task_index < len(days[day_index].tasks):
                path.toggle_task(day_index, days[day_index].tasks[task_index].id)


def run_settings(ui: TutorUI, context: SessionContext) -> None:
    settings = context.settings
    ui.show_task(
        "Settings",
        "Choose a setting to change:",
        options=[
            f"Difficulty: {settings.difficulty.value} ({settings.difficulty.label})",
            f"Persona: {settings.persona.value}",
            f"Translation language: {settings.translation_language}",
            f"Theme: {settings.theme.value}",
            f"Privacy mode: {'on' if settings.is_incognito else 'off'}",
        ],
    )
    index = ui.choose(["difficulty", "persona", "language", "theme", "privacy"])
    if index == 0:
        values = list(Difficulty)
        ui.show_task("Difficulty", "Choose a level:", options=[f"{d.value} {d.label}" for d in values])
        choice = ui.choose(values)
        if choice is not None:
            context.update_settings(difficulty=values[choice])
    elif index == 1:
        values = list(Persona)
        ui.show_task("Persona", "Choose a tutor persona:", options=[p.value.title() for p in values])
        choice = ui.choose(values)
        if choice is not None:
            context.update_settings(persona=values[choice])
    elif index == 2:
        ui.show_task("Translation", "Choose a language:", options=TRANSLATION_LANGUAGES, numbered=True)
        choice = ui.choose(TRANSLATION_LANGUAGES)
        if choice is not None:
            context.update_settings(translation_language=TRANSLATION_LANGUAGES[choice])
    elif index == 3:
        values = list(Theme)
        ui.show_task("Theme", "Choose a theme:", options=[t.value.title() for t in values])
        choice = ui.choose(values)
        if choice is not None:
            context.update_settings(theme=values[choice])
            ui.accent = get_accent(values[choice])
    elif index == 4:
        context.update_settings(is_incognito=not settings.is_incognito)
        state = "on" if context.settings.is_incognito else "off"
        ui.show_success(f"Privacy mode is {state}.")


# ============================================================================
# Session loop
# ============================================================================


def prompt_for_user(ui: TutorUI, email: str | None, name: str | None) -> User | None:
    while not email:
        email = ui.ask("Email ('q' to quit)")
        if email.lower() == QUIT:
            return None
    if not name:
        name = ui.ask("Name") or email.split("@")[0]
    return User(name=name, email=email.strip().lower())


async def run_session(ui: TutorUI, context: SessionContext) -> bool:
    """Drive one logged-in session. Returns True if the user logged out."""
    if context.is_new:
        with ui.working("Fetching your word of the day..."):
            await fetch_word_of_the_day(context)

    surfaces = build_surfaces(context)
    menu = SurfaceMenu(context.record)
    ui.accent = get_accent(context.settings.theme)
    ui.show_welcome(context.user.name, context.record.word_of_the_day)

    runners = {
        SurfaceKind.STORY: run_answer_surface,
        SurfaceKind.TRANSLATION: run_answer_surface,
        SurfaceKind.GRAMMAR: run_answer_surface,
        SurfaceKind.WRITING: run_writing,
        SurfaceKind.SENTENCE_BUILDER: run_sentence_builder,
        SurfaceKind.IDIOM: run_idiom_quest,
        SurfaceKind.SPEAKING: run_conversation,
        SurfaceKind.CHAT: run_conversation,
        SurfaceKind.EXAM: run_exam,
        SurfaceKind.LANGUAGE_TOOLS: run_language_tools,
        SurfaceKind.LEARNING_PATH: run_learning_path,
    }

    while True:
        menu.record = context.record
        choice = ui.show_menu(menu.get_rows(), SURFACE_NAMES[context.active_surface])
        if choice.lower() == QUIT:
            return False
        if choice.lower() == "l":
            return True
        if choice.lower() == "s":
            run_settings(ui, context)
            continue

        kind = menu.resolve(choice)
        if kind is None:
            ui.show_error(f"Unknown selection: {choice}")
            continue
        if kind == SurfaceKind.DASHBOARD:
            context.activate(kind)
            ui.show_welcome(context.user.name, context.record.word_of_the_day)
            continue

        try:
            await runners[kind](ui, surfaces[kind])
        except LingoSphereError as e:
            logger.error("Surface %s failed: %s", kind.value, e)
            ui.show_error(str(e))


async def run_interactive(config: AppConfig, ui: TutorUI, email: str | None, name: str | None) -> None:
    """Run the interactive tutor until the user quits."""
    store = get_session_store(config.db_path)
    generator = ContentGenerator(model=config.model, api_key=config.gemini_api_key)
    if not config.gemini_api_key:
        ui.show_error("GEMINI_API_KEY is not set. Content generation will fail.")

    while True:
        user = prompt_for_user(ui, email, name)
        if user is None:
            return
        context = SessionContext.open(user, store, generator, reply_delay=config.reply_delay_seconds)
        try:
            logged_out = await run_session(ui, context)
        finally:
            saved = not context.settings.is_incognito
            context.close()
        if not logged_out:
            ui.show_quit_message(saved)
            return
        email = name = None


def main():
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args()

    config = load_config(args.env_file)
    if args.db:
        config = config.model_copy(update={"db_path": Path(args.db)})
    configure_logging(config.log_level)

    ui = TutorUI(Console(theme=DEFAULT_THEME))
    ui.clear_screen()
    try:
        asyncio.run(run_interactive(config, ui, args.email, args.name))
    except KeyboardInterrupt:
        ui.show_quit_message()


if __name__ == "__main__":
    main()
