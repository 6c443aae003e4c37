"""Tests for the generate-then-answer exercise surfaces."""

import asyncio
import random
import sqlite3

import pytest

from errors import GenerationDecodeError, SurfaceBusyError, ValidationInputRejected
from exercises import (
    GrammarGauntlet,
    IdiomQuest,
    SentenceBuilder,
    StoryPractice,
    TranslationPractice,
    WritingAnalysis,
)
from exercises.sentence_builder import build_sentence_task, scramble
from models import ExercisePhase, SurfaceKind


class TestStoryPractice:
    """Tests for the story surface lifecycle."""

    def test_enter_generates_first_task(self, context, generator, story_response):
        """Should activate the surface and move from idle to ready."""
        generator.queue(story_response)
        story = StoryPractice(context)

        asyncio.run(story.enter())

        assert context.active_surface == SurfaceKind.STORY
        assert story.phase == ExercisePhase.READY
        assert story.task.question == "What colour is Tom's bike?"
        assert story.error == ""

    def test_enter_keeps_existing_task(self, context, generator, story_response):
        """Should not regenerate when a task already exists."""
        generator.queue(story_response)
        story = StoryPractice(context)
        asyncio.run(story.enter())
        task_id = story.task.id

        asyncio.run(story.enter())

        assert story.task.id == task_id
        assert len(generator.calls) == 1

    def test_generation_failure_returns_to_idle(self, context, generator):
        """Should go back to idle with an error message when generation fails."""
        generator.queue(ConnectionError("offline"))
        story = StoryPractice(context)

        asyncio.run(story.enter())

        assert story.phase == ExercisePhase.IDLE
        assert story.task is None
        assert story.error == StoryPractice.generation_error

    def test_submit_records_verdict(self, context, generator, story_response):
        """Should grade the answer and reach feedback."""
        generator.queue(story_response, {"isCorrect": True, "feedback": "Yes, it is red."})
        story = StoryPractice(context)
        asyncio.run(story.enter())

        verdict = asyncio.run(story.submit("It is red"))

        assert verdict.correct is True
        assert story.phase == ExercisePhase.FEEDBACK
        assert story.state.answer.task_id == story.task.id
        assert story.state.answer.value == "It is red"

    def test_verdict_is_locked(self, context, generator, story_response):
        """Should return the first verdict for later submissions without grading again."""
        generator.queue(story_response, {"isCorrect": False, "feedback": "No."})
        story = StoryPractice(context)
        asyncio.run(story.enter())
        first = asyncio.run(story.submit("blue"))

        second = asyncio.run(story.submit("red"))

        assert second == first
        assert story.state.answer.value == "blue"
        assert len(generator.calls) == 2

    def test_grading_failure_returns_to_ready(self, context, generator, story_response):
        """Should keep the task and answer and show an error when grading fails."""
        generator.queue(story_response, TimeoutError())
        story = StoryPractice(context)
        asyncio.run(story.enter())

        verdict = asyncio.run(story.submit("red"))

        assert verdict is None
        assert story.phase == ExercisePhase.READY
        assert story.verdict is None
        assert story.state.answer.value == "red"
        assert story.error == StoryPractice.grading_error

    def test_blank_answer_rejected(self, context, generator, story_response):
        """Should reject a blank answer and stay ready."""
        generator.queue(story_response)
        story = StoryPractice(context)
        asyncio.run(story.enter())

        with pytest.raises(ValidationInputRejected):
            asyncio.run(story.submit("   "))
        assert story.phase == ExercisePhase.READY
        assert len(generator.calls) == 1

    def test_submit_without_task_rejected(self, context):
        """Should reject an answer while there is no task."""
        with pytest.raises(ValidationInputRejected):
            asyncio.run(StoryPractice(context).submit("red"))

    def test_regenerate_clears_answer_and_verdict(self, context, generator, story_response):
        """Should discard the old task, answer and verdict together."""
        generator.queue(
            story_response,
            {"isCorrect": True, "feedback": "Good."},
            {"story": "Sam likes tea.", "question": "What does Sam like?"},
        )
        story = StoryPractice(context)
        asyncio.run(story.enter())
        asyncio.run(story.submit("red"))

        asyncio.run(story.regenerate())

        assert story.task.question == "What does Sam like?"
        assert story.state.answer is None
        assert story.verdict is None
        assert story.phase == ExercisePhase.READY

    def test_regenerate_twice_keeps_only_latest(self, context, generator, story_response):
        """Should leave nothing from earlier tasks after two regenerations."""
        generator.queue(
            story_response,
            {"isCorrect": False, "feedback": "The car was blue."},
            {"story": "Sam likes tea.", "question": "What does Sam like?"},
            {"story": "Lee walks home.", "question": "How does Lee get home?"},
        )
        story = StoryPractice(context)
        asyncio.run(story.enter())
        asyncio.run(story.submit("red"))

        asyncio.run(story.regenerate())
        asyncio.run(story.regenerate())

        assert story.task.question == "How does Lee get home?"
        assert story.state.answer is None
        assert story.verdict is None
        assert len(generator.calls) == 4

    def test_submit_while_generating_is_busy(self, context, generator, story_response):
        """Should refuse to submit while a task is being generated."""
        story = StoryPractice(context)

        async def scenario():
            generator.gate = asyncio.Event()
            generator.queue(story_response)
            pending = asyncio.create_task(story.enter())
            await asyncio.sleep(0)
            assert story.phase == ExercisePhase.GENERATING
            with pytest.raises(SurfaceBusyError):
                await story.submit("anything")
            generator.gate.set()
            await pending

        asyncio.run(scenario())
        assert story.phase == ExercisePhase.READY

    def test_second_submit_while_grading_is_busy(self, context, generator, story_response):
        """Should refuse a second answer while the first is being graded."""
        generator.queue(story_response)
        story = StoryPractice(context)
        asyncio.run(story.enter())

        async def scenario():
            generator.gate = asyncio.Event()
            generator.queue({"isCorrect": True, "feedback": "Yes."})
            pending = asyncio.create_task(story.submit("red"))
            await asyncio.sleep(0)
            assert story.phase == ExercisePhase.SUBMITTED
            with pytest.raises(SurfaceBusyError):
                await story.submit("blue")
            generator.gate.set()
            await pending

        asyncio.run(scenario())
        assert story.state.answer.value == "red"
        assert story.phase == ExercisePhase.FEEDBACK

    def test_background_response_updates_its_own_surface(self, context, generator, story_response):
        """Should apply a late response to the surface that requested it."""
        story = StoryPractice(context)

        async def scenario():
            generator.gate = asyncio.Event()
            generator.queue(story_response)
            pending = asyncio.create_task(story.enter())
            await asyncio.sleep(0)
            context.activate(SurfaceKind.GRAMMAR)
            generator.gate.set()
            await pending

        asyncio.run(scenario())
        assert context.active_surface == SurfaceKind.GRAMMAR
        assert context.record.story.phase == ExercisePhase.READY
        assert context.record.grammar.task is None


class TestTranslationPractice:
    """Tests for the translation surface."""

    def test_target_language_fixed_at_creation(self, context, generator):
        """Should keep the language the task was created with after a settings change."""
        generator.queue("Good morning, how are you?", {"isCorrect": True, "feedback": "Bien."})
        translation = TranslationPractice(context)
        asyncio.run(translation.enter())

        context.update_settings(translation_language="French")
        asyncio.run(translation.submit("Buenos días, ¿cómo estás?"))

        assert translation.task.target_language == "Spanish"
        assert "Spanish" in generator.calls[1]["contents"]


class TestWritingAnalysis:
    """Tests for the writing surface."""

    def test_feedback_has_four_parts(self, context, generator):
        """Should decode all four critique sections."""
        generator.queue(
            {
                "overall": "Clear and friendly.",
                "grammar": "One tense slip.",
                "style": "Vary sentence length.",
                "vocabulary": "Good range.",
            }
        )
        writing = WritingAnalysis(context)
        asyncio.run(writing.enter())

        feedback = asyncio.run(writing.submit("Yesterday I go to the park with my friends."))

        assert feedback.grammar == "One tense slip."
        assert writing.phase == ExercisePhase.FEEDBACK

    def test_enter_starts_a_blank_page(self, context, generator):
        """Should drop previous feedback on re-entry."""
        generator.queue(
            {"overall": "a", "grammar": "b", "style": "c", "vocabulary": "d"},
        )
        writing = WritingAnalysis(context)
        asyncio.run(writing.enter())
        asyncio.run(writing.submit("Some text."))

        asyncio.run(writing.enter())

        assert writing.verdict is None
        assert writing.phase == ExercisePhase.READY


class TestGrammarGauntlet:
    """Tests for locally checked grammar corrections."""

    def test_correct_ignoring_case_and_full_stop(self, context, generator, grammar_response):
        """Should accept the correction without the full stop and in lower case."""
        generator.queue(grammar_response)
        grammar = GrammarGauntlet(context)
        asyncio.run(grammar.enter())

        verdict = asyncio.run(grammar.submit("she goes to school every day"))

        assert verdict.correct is True
        assert verdict.message.startswith("Correct!")
        assert len(generator.calls) == 1

    def test_incorrect_reveals_correction(self, context, generator, grammar_response):
        """Should show the correct sentence and explanation."""
        generator.queue(grammar_response)
        grammar = GrammarGauntlet(context)
        asyncio.run(grammar.enter())

        verdict = asyncio.run(grammar.submit("She going to school every day."))

        assert verdict.correct is False
        assert "She goes to school every day." in verdict.message
        assert "Third person singular" in verdict.message

    def test_space_before_full_stop_accepted(self, context, generator, grammar_response):
        """Should accept a correction with a space before the full stop."""
        generator.queue(grammar_response)
        grammar = GrammarGauntlet(context)
        asyncio.run(grammar.enter())

        verdict = asyncio.run(grammar.submit("She goes to school every day ."))

        assert verdict.correct is True

    def test_save_failure_keeps_verdict(self, context, generator, grammar_response, kv_store, monkeypatch):
        """Should keep going with the verdict when the record cannot be saved."""
        generator.queue(grammar_response)
        grammar = GrammarGauntlet(context)
        asyncio.run(grammar.enter())

        def locked(key, value):
            raise sqlite3.OperationalError("database is locked")

        monkeypatch.setattr(kv_store, "set", locked)
        verdict = asyncio.run(grammar.submit("She goes to school every day."))

        assert verdict.correct is True
        assert grammar.phase == ExercisePhase.FEEDBACK


class TestIdiomQuest:
    """Tests for idiom multiple choice."""

    def test_choose_correct_meaning(self, context, generator, idiom_response):
        """Should mark the matching option correct."""
        generator.queue(idiom_response)
        quest = IdiomQuest(context)
        asyncio.run(quest.enter())

        verdict = asyncio.run(quest.choose("Feeling ill"))

        assert verdict.correct is True
        assert verdict.message.startswith("Excellent!")

    def test_only_first_choice_counts(self, context, generator, idiom_response):
        """Should ignore later choices once a verdict exists."""
        generator.queue(idiom_response)
        quest = IdiomQuest(context)
        asyncio.run(quest.enter())

        first = asyncio.run(quest.choose("Very rich"))
        second = asyncio.run(quest.choose("Feeling ill"))

        assert first.correct is False
        assert second == first

    def test_unknown_option_rejected(self, context, generator, idiom_response):
        """Should reject a choice that is not one of the options."""
        generator.queue(idiom_response)
        quest = IdiomQuest(context)
        asyncio.run(quest.enter())

        with pytest.raises(ValidationInputRejected):
            asyncio.run(quest.choose("Something else"))
        assert quest.verdict is None


class TestScramble:
    """Tests for sentence scrambling."""

    def test_scramble_is_permutation(self):
        """Should return the same words in some order."""
        words = "The quick brown fox jumps".split()
        result = scramble(words, random.Random(3))
        assert sorted(result) == sorted(words)

    def test_never_returns_original_order_for_distinct_words(self):
        """Should differ from the original order for multi-word sentences."""
        words = ["I", "am", "happy"]
        for seed in range(50):
            assert scramble(words, random.Random(seed)) != words

    def test_single_word_unchanged(self):
        """Should return a one-word sentence as is."""
        assert scramble(["Hello"], random.Random(0)) == ["Hello"]

    def test_trailing_full_stop_removed(self):
        """Should drop one trailing full stop and collapse whitespace."""
        task = build_sentence_task("  I   like tea. ", random.Random(0))
        assert task.original == "I like tea"
        assert sorted(task.scrambled) == ["I", "like", "tea"]

    def test_empty_sentence_is_decode_error(self):
        """Should reject generated text that is only a full stop."""
        with pytest.raises(GenerationDecodeError):
            build_sentence_task(" . ")


class TestSentenceBuilder:
    """Tests for the word bank exercise."""

    @pytest.fixture
    def builder(self, context, generator) -> SentenceBuilder:
        generator.queue("She reads books every night.")
        builder = SentenceBuilder(context, rng=random.Random(1))
        asyncio.run(builder.enter())
        return builder

    def build(self, builder: SentenceBuilder, words: list[str]) -> None:
        for word in words:
            builder.pick(builder.state.bank.index(word))

    def test_bank_starts_scrambled(self, builder):
        """Should put all words in the bank and none in the answer."""
        state = builder.state
        assert sorted(state.bank) == sorted(["She", "reads", "books", "every", "night"])
        assert state.answer_tokens == []

    def test_correct_order(self, builder):
        """Should accept the original order."""
        self.build(builder, ["She", "reads", "books", "every", "night"])
        verdict = asyncio.run(builder.check())
        assert verdict.correct is True

    def test_wrong_order_shows_original(self, builder):
        """Should reveal the original sentence on a wrong order."""
        self.build(builder, ["She", "reads", "every", "night", "books"])
        verdict = asyncio.run(builder.check())
        assert verdict.correct is False
        assert "She reads books every night" in verdict.message

    def test_unpick_returns_word_to_bank(self, builder):
        """Should move a word from the answer to the end of the bank."""
        self.build(builder, ["She"])
        builder.unpick(0)
        assert builder.state.answer_tokens == []
        assert builder.state.bank[-1] == "She"

    def test_reset_returns_all_words(self, builder):
        """Should move every picked word back to the bank."""
        self.build(builder, ["She", "reads"])
        builder.reset()
        assert builder.state.answer_tokens == []
        assert len(builder.state.bank) == 5

    def test_check_with_nothing_picked_rejected(self, builder):
        """Should reject checking an empty answer."""
        with pytest.raises(ValidationInputRejected):
            asyncio.run(builder.check())

    def test_locked_after_verdict(self, builder):
        """Should ignore word moves once checked."""
        self.build(builder, ["She", "reads", "books", "every", "night"])
        asyncio.run(builder.check())

        builder.unpick(0)
        builder.reset()

        assert builder.state.answer_tokens == ["She", "reads", "books", "every", "night"]
