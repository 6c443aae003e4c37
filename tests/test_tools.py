"""Tests for language tools, the word of the day and learning paths."""

import asyncio

import pytest

from errors import ValidationInputRejected
from exercises import LanguageTools, LearningPath, fetch_word_of_the_day
from exercises.language_tools import FETCH_ERROR
from exercises.learning_path import PLAN_ERROR
from models import LanguageTool, PlanFocus, SurfaceKind, WordOfTheDay


def vocabulary(*words: str) -> list[dict]:
    return [{"word": w, "definition": f"meaning of {w}", "example": f"Use {w}."} for w in words]


def plan_response() -> dict:
    return {
        "objective": "Build speaking confidence",
        "plan": [
            {
                "day": "Monday",
                "tasks": [
                    {"id": "mon-1", "description": "Order a coffee", "type": "speaking"},
                    {"id": "mon-2", "description": "Chat about hobbies", "type": "chat"},
                ],
            },
            {
                "day": "Tuesday",
                "tasks": [{"id": "tue-1", "description": "Read a story", "type": "story"}],
            },
        ],
    }


class TestLanguageTools:
    """Tests for the language tools surface."""

    def test_enter_loads_vocabulary_once(self, context, generator):
        """Should fetch vocabulary on first entry only."""
        generator.queue(vocabulary("brisk", "candid"))
        tools = LanguageTools(context)

        asyncio.run(tools.enter())
        asyncio.run(tools.enter())

        assert [e.word for e in tools.state.vocabulary] == ["brisk", "candid"]
        assert len(generator.calls) == 1
        assert context.active_surface == SurfaceKind.LANGUAGE_TOOLS

    def test_lookup(self, context, generator):
        """Should store the dictionary entry for the query."""
        generator.queue(
            {
                "word": "resilient",
                "partOfSpeech": "adjective",
                "definition": "Able to recover quickly.",
                "example": "Children are often resilient.",
            }
        )
        tools = LanguageTools(context)
        tools.select_tool(LanguageTool.DICTIONARY)

        entry = asyncio.run(tools.lookup("  resilient "))

        assert entry.part_of_speech == "adjective"
        assert tools.state.dictionary_query == "resilient"
        assert "resilient" in generator.calls[0]["contents"]

    def test_blank_lookup_rejected(self, context, generator):
        """Should not call the model for a blank word."""
        with pytest.raises(ValidationInputRejected):
            asyncio.run(LanguageTools(context).lookup("   "))
        assert generator.calls == []

    def test_failure_leaves_tool_empty_with_error(self, context, generator):
        """Should clear the old content and show an error on failure."""
        generator.queue(
            {"verb": "give up", "definition": "Stop trying.", "example": "Never give up."},
            ConnectionError("offline"),
        )
        tools = LanguageTools(context)
        asyncio.run(tools.refresh_phrasal_verb())

        result = asyncio.run(tools.refresh_phrasal_verb())

        assert result is None
        assert tools.state.phrasal_verb is None
        assert tools.state.error == FETCH_ERROR
        assert tools.state.busy is False

    def test_common_phrase(self, context, generator):
        """Should fetch a common phrase."""
        generator.queue(
            {"phrase": "Break a leg", "meaning": "Good luck", "example": "Break a leg tonight!"}
        )
        phrase = asyncio.run(LanguageTools(context).refresh_common_phrase())
        assert phrase.meaning == "Good luck"


class TestWordOfTheDay:
    """Tests for fetch_word_of_the_day."""

    def test_stores_word(self, context, generator):
        """Should put the word on the dashboard record."""
        generator.queue({"word": "serene", "definition": "Calm.", "example": "A serene lake."})
        word = asyncio.run(fetch_word_of_the_day(context))
        assert context.record.word_of_the_day == word

    def test_failure_keeps_previous_word(self, context, generator):
        """Should keep the old word when the fetch fails."""
        previous = WordOfTheDay(word="brisk", definition="Quick.", example="A brisk walk.")
        context.record.word_of_the_day = previous
        generator.queue("garbage")

        assert asyncio.run(fetch_word_of_the_day(context)) is None
        assert context.record.word_of_the_day == previous


class TestLearningPath:
    """Tests for the learning path surface."""

    def test_generate_plan(self, context, generator):
        """Should decode a plan with every task incomplete."""
        generator.queue(plan_response())
        path = LearningPath(context)
        path.set_focus(PlanFocus.SPEAKING)
        path.toggle_activity(SurfaceKind.SPEAKING)

        plan = asyncio.run(path.generate())

        assert plan.objective == "Build speaking confidence"
        assert path.progress() == (0, 3)
        prompt = generator.calls[0]["contents"]
        assert "Speaking Practice" in prompt

    def test_toggle_activity_twice_removes_it(self, context):
        """Should add then remove a preferred activity."""
        path = LearningPath(context)
        path.toggle_activity(SurfaceKind.IDIOM)
        path.toggle_activity(SurfaceKind.IDIOM)
        assert path.state.activities == []

    def test_toggle_task(self, context, generator):
        """Should flip one task's completed flag."""
        generator.queue(plan_response())
        path = LearningPath(context)
        asyncio.run(path.generate())

        task = path.toggle_task(0, "mon-2")

        assert task.completed is True
        assert path.progress() == (1, 3)
        path.toggle_task(0, "mon-2")
        assert path.progress() == (0, 3)

    def test_toggle_unknown_task(self, context, generator):
        """Should raise KeyError for a task not on that day."""
        generator.queue(plan_response())
        path = LearningPath(context)
        asyncio.run(path.generate())
        with pytest.raises(KeyError):
            path.toggle_task(1, "mon-1")

    def test_generation_failure(self, context, generator):
        """Should leave no plan and show an error."""
        generator.queue({"objective": "x"})
        path = LearningPath(context)

        assert asyncio.run(path.generate()) is None
        assert path.state.error == PLAN_ERROR
        assert path.progress() == (0, 0)
