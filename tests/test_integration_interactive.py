"""Integration tests for run_interactive() in main.py.

These tests simulate user input through stdin by mocking Console.input().
"""

import asyncio
import io
from typing import Any

import pytest
from rich.console import Console

import main
from config import AppConfig
from storage import get_session_store
from ui import TutorUI

from conftest import ScriptedGenerator

WORD = {"word": "serene", "definition": "Calm and peaceful.", "example": "A serene lake."}


class InputSequence:
    """Callable providing sequential inputs for mocked Console.input().

    Tracks all prompts received for debugging failed tests.
    """

    def __init__(self, inputs: list[str]):
        self.inputs = inputs
        self.index = 0
        self.call_history: list[tuple[int, Any]] = []

    def __call__(self, prompt: Any = "") -> str:
        """Return next input in sequence, tracking prompts received."""
        self.call_history.append((self.index, prompt))
        if self.index >= len(self.inputs):
            history = "\n".join(f"  {i}: {p}" for i, p in self.call_history)
            raise AssertionError(
                f"Ran out of inputs at call {self.index}.\n"
                f"Prompt: {prompt}\n"
                f"History:\n{history}"
            )
        result = self.inputs[self.index]
        self.index += 1
        return result

    @property
    def remaining(self) -> int:
        """Number of unused inputs remaining."""
        return len(self.inputs) - self.index


@pytest.fixture
def interactive_runner(tmp_path, monkeypatch):
    """Fixture providing a patched run_interactive runner.

    Patches:
    - main.ContentGenerator to return a ScriptedGenerator
    - Console.input to use the provided InputSequence
    - Console.clear to no-op (avoid terminal issues)

    Returns a callable taking an InputSequence and the scripted responses.
    """
    db_path = tmp_path / "lingosphere.db"
    config = AppConfig(gemini_api_key="test-key", db_path=db_path, reply_delay_seconds=0)
    generator = ScriptedGenerator()
    monkeypatch.setattr(main, "ContentGenerator", lambda **kwargs: generator)
    monkeypatch.setattr(Console, "clear", lambda self: None)

    def runner(input_sequence: InputSequence, *responses, email="ana@example.com"):
        generator.queue(*responses)
        monkeypatch.setattr(Console, "input", input_sequence)
        ui = TutorUI(Console(file=io.StringIO(), width=120))
        asyncio.run(main.run_interactive(config, ui, email, "Ana"))
        return get_session_store(db_path), generator

    return runner


class TestInteractiveBasicFlow:
    """Tests for basic interactive session flow."""

    def test_quit_from_menu_saves_session(self, interactive_runner):
        """Should fetch the word of the day for a new user and save on quit."""
        inputs = InputSequence(["q"])
        store, _ = interactive_runner(inputs, WORD)

        record = store.load("ana@example.com")
        assert record.word_of_the_day.word == "serene"
        assert inputs.remaining == 0

    def test_grammar_round(self, interactive_runner, grammar_response):
        """Should generate a challenge, check the answer locally and keep the verdict."""
        inputs = InputSequence(
            [
                "grammar gauntlet",
                "She goes to school every day.",
                "q",  # leave the surface
                "q",  # quit
            ]
        )
        store, generator = interactive_runner(inputs, WORD, grammar_response)

        record = store.load("ana@example.com")
        assert record.active_surface.value == "grammar"
        assert record.grammar.verdict.correct is True
        assert len(generator.calls) == 2

    def test_returning_user_skips_word_of_the_day(self, interactive_runner):
        """Should not regenerate the word of the day for a saved session."""
        interactive_runner(InputSequence(["q"]), WORD)
        _, generator = interactive_runner(InputSequence(["q"]))
        assert len(generator.calls) == 1

    def test_logout_then_quit_at_login(self, interactive_runner):
        """Should return to the login prompt after logging out."""
        inputs = InputSequence(["l", "q"])
        store, _ = interactive_runner(inputs, WORD)
        assert store.load("ana@example.com") is not None
        assert inputs.remaining == 0

    def test_privacy_mode_leaves_nothing(self, interactive_runner):
        """Should not keep any record after a privacy mode session."""
        inputs = InputSequence(["s", "E", "q"])
        store, _ = interactive_runner(inputs, WORD)
        assert store.load("ana@example.com") is None


class TestCreateParser:
    """Tests for command line parsing."""

    def test_parses_login_options(self):
        """Should accept email, name and database path."""
        args = main.create_parser().parse_args(
            ["--email", "ana@example.com", "--name", "Ana", "--db", "/tmp/x.db"]
        )
        assert args.email == "ana@example.com"
        assert args.name == "Ana"
        assert args.db == "/tmp/x.db"
