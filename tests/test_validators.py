"""Unit tests for answer checking strategies."""

import asyncio
import pytest

from content import schemas
from content.decoding import decode_grade
from errors import GenerationDecodeError, GenerationTransportError, ValidationInputRejected
from exercises.validators import (
    LocalExactValidator,
    OrderedSequenceValidator,
    RemoteGradedValidator,
    is_blank,
    normalize_answer,
)
from models import GrammarTask, SentenceTask, StoryTask

from conftest import ScriptedGenerator


@pytest.fixture
def grammar_task() -> GrammarTask:
    return GrammarTask(
        incorrect="He don't like apples.",
        correct="He doesn't like apples.",
        explanation="Use 'doesn't' with he/she/it.",
    )


def exact_validator(normalize: bool = True) -> LocalExactValidator:
    return LocalExactValidator(
        expected=lambda task: task.correct,
        feedback=lambda task, correct: "yes" if correct else "no",
        normalize=normalize,
    )


class TestNormalizeAnswer:
    """Tests for lenient answer normalisation."""

    def test_ignores_case_whitespace_and_punctuation(self):
        """Should drop case, surrounding whitespace, quotes, full stops and commas."""
        assert normalize_answer('  He said, "Hello."  ') == "he said hello"

    def test_space_left_by_removed_punctuation(self):
        """Should drop whitespace left behind by a removed full stop."""
        assert normalize_answer("She doesn't like coffee .") == "she doesnt like coffee"

    def test_keeps_other_punctuation(self):
        """Should only strip quotes, full stops and commas."""
        assert normalize_answer("Why?") == "why?"
        assert normalize_answer("doesn't") == "doesnt"

    def test_blank_detection(self):
        """Should treat whitespace and empty token lists as blank."""
        assert is_blank("   ")
        assert is_blank([])
        assert is_blank(["", " "])
        assert not is_blank(["word"])


class TestLocalExactValidator:
    """Tests for LocalExactValidator."""

    def test_accepts_answer_differing_only_in_case_and_punctuation(self, grammar_task):
        """Should mark a normalised match correct."""
        verdict = asyncio.run(exact_validator().validate(grammar_task, "he doesn't like apples"))
        assert verdict.correct is True
        assert verdict.message == "yes"

    def test_rejects_different_wording(self, grammar_task):
        """Should mark a different sentence incorrect."""
        verdict = asyncio.run(exact_validator().validate(grammar_task, "He does not like apples."))
        assert verdict.correct is False
        assert verdict.message == "no"

    def test_exact_mode_is_case_sensitive(self, grammar_task):
        """Should compare raw strings when normalisation is off."""
        verdict = asyncio.run(
            exact_validator(normalize=False).validate(grammar_task, "he doesn't like apples.")
        )
        assert verdict.correct is False

    def test_blank_answer_rejected(self, grammar_task):
        """Should raise ValidationInputRejected for a blank answer."""
        with pytest.raises(ValidationInputRejected):
            asyncio.run(exact_validator().validate(grammar_task, "   "))


class TestOrderedSequenceValidator:
    """Tests for OrderedSequenceValidator."""

    @pytest.fixture
    def task(self) -> SentenceTask:
        return SentenceTask(
            original="I like green tea",
            scrambled=["tea", "green", "like", "I"],
        )

    @pytest.fixture
    def validator(self) -> OrderedSequenceValidator:
        return OrderedSequenceValidator(
            expected=lambda task: task.tokens,
            feedback=lambda task, correct: task.original,
        )

    def test_exact_order_is_correct(self, task, validator):
        """Should accept the tokens in the original order."""
        verdict = asyncio.run(validator.validate(task, ["I", "like", "green", "tea"]))
        assert verdict.correct is True

    def test_wrong_order_is_incorrect(self, task, validator):
        """Should reject the right words in the wrong order."""
        verdict = asyncio.run(validator.validate(task, ["I", "like", "tea", "green"]))
        assert verdict.correct is False

    def test_missing_word_is_incorrect(self, task, validator):
        """Should reject a partial sentence."""
        verdict = asyncio.run(validator.validate(task, ["I", "like", "green"]))
        assert verdict.correct is False

    def test_empty_sequence_rejected(self, task, validator):
        """Should reject an empty token sequence before comparing."""
        with pytest.raises(ValidationInputRejected):
            asyncio.run(validator.validate(task, []))


class TestRemoteGradedValidator:
    """Tests for RemoteGradedValidator."""

    @pytest.fixture
    def task(self) -> StoryTask:
        return StoryTask(text="The cat sat on the mat.", question="Where did the cat sit?")

    def make_validator(self, generator):
        return RemoteGradedValidator(
            generator,
            prompt=lambda task, answer: f"{task.question} -> {answer}",
            schema=schemas.GRADE,
            decode=decode_grade,
            system_instruction=lambda: "Be kind.",
        )

    def test_returns_model_verdict(self, task):
        """Should decode the model's grade into a verdict."""
        generator = ScriptedGenerator({"isCorrect": True, "feedback": "Well done!"})
        verdict = asyncio.run(self.make_validator(generator).validate(task, "  on the mat "))

        assert verdict.correct is True
        assert verdict.message == "Well done!"
        call = generator.calls[0]
        assert call["contents"] == "Where did the cat sit? -> on the mat"
        assert call["schema"] is schemas.GRADE
        assert call["system_instruction"] == "Be kind."

    def test_blank_answer_never_reaches_model(self, task):
        """Should reject blank input without calling the generator."""
        generator = ScriptedGenerator()
        with pytest.raises(ValidationInputRejected):
            asyncio.run(self.make_validator(generator).validate(task, ""))
        assert generator.calls == []

    def test_transport_failure_raises(self, task):
        """Should surface a transport failure as GenerationTransportError."""
        generator = ScriptedGenerator(ConnectionError("offline"))
        with pytest.raises(GenerationTransportError):
            asyncio.run(self.make_validator(generator).validate(task, "on the mat"))

    def test_malformed_grade_raises_decode_error(self, task):
        """Should raise GenerationDecodeError when the grade lacks fields."""
        generator = ScriptedGenerator({"feedback": "Nice"})
        with pytest.raises(GenerationDecodeError):
            asyncio.run(self.make_validator(generator).validate(task, "on the mat"))
