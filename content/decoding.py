"""Turn parsed model output into domain models.

Every decoder raises ``GenerationDecodeError`` when the data does not have
the expected shape; nothing is silently defaulted.
"""

from contextlib import contextmanager
from typing import Any, Iterator

from pydantic import ValidationError

from errors import GenerationDecodeError
from models import (
    CommonPhrase,
    DictionaryEntry,
    ExamQuestion,
    ExamResult,
    GrammarTask,
    IdiomTask,
    LearningDay,
    LearningPlan,
    LearningTask,
    PhrasalVerb,
    PronunciationTip,
    QuestionFeedback,
    SpeakingFeedback,
    StoryTask,
    Verdict,
    VocabularyEntry,
    WordOfTheDay,
    WritingFeedback,
)


@contextmanager
def _decoding(what: str) -> Iterator[None]:
    try:
        yield
    except (ValidationError, TypeError, ValueError) as e:
        raise GenerationDecodeError(f"malformed {what}: {e}") from e


def _object(data: Any, what: str, *keys: str) -> dict:
    if not isinstance(data, dict):
        raise GenerationDecodeError(
            f"malformed {what}: expected an object, got {type(data).__name__}"
        )
    missing = [key for key in keys if key not in data]
    if missing:
        raise GenerationDecodeError(f"malformed {what}: missing {', '.join(missing)}")
    return data


def _array(data: Any, what: str) -> list:
    if not isinstance(data, list):
        raise GenerationDecodeError(
            f"malformed {what}: expected an array, got {type(data).__name__}"
        )
    return data


def _text(value: Any, what: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise GenerationDecodeError(f"malformed {what}: expected non-empty text")
    return value.strip()


def decode_word_of_the_day(data: Any) -> WordOfTheDay:
    obj = _object(data, "word of the day", "word", "definition", "example")
    with _decoding("word of the day"):
        return WordOfTheDay(**obj)


def decode_story(data: Any) -> StoryTask:
    obj = _object(data, "story", "story", "question")
    return StoryTask(
        text=_text(obj["story"], "story"),
        question=_text(obj["question"], "story question"),
    )


def decode_grade(data: Any) -> Verdict:
    obj = _object(data, "grade", "isCorrect", "feedback")
    with _decoding("grade"):
        return Verdict(correct=obj["isCorrect"], message=_text(obj["feedback"], "grade"))


def decode_writing_feedback(data: Any) -> WritingFeedback:
    obj = _object(data, "writing feedback", "overall", "grammar", "style", "vocabulary")
    with _decoding("writing feedback"):
        return WritingFeedback(**obj)


def decode_grammar_task(data: Any) -> GrammarTask:
    obj = _object(
        data, "grammar task", "incorrectSentence", "correctSentence", "explanation"
    )
    with _decoding("grammar task"):
        return GrammarTask(
            incorrect=_text(obj["incorrectSentence"], "incorrect sentence"),
            correct=_text(obj["correctSentence"], "correct sentence"),
            explanation=obj["explanation"],
        )


def decode_idiom_task(data: Any) -> IdiomTask:
    obj = _object(
        data,
        "idiom task",
        "contextSentence",
        "correctIdiom",
        "options",
        "correctMeaning",
        "explanation",
    )
    with _decoding("idiom task"):
        return IdiomTask(
            context_sentence=obj["contextSentence"],
            correct_idiom=obj["correctIdiom"],
            options=obj["options"],
            correct_meaning=obj["correctMeaning"],
            explanation=obj["explanation"],
        )


def decode_speaking_feedback(data: Any) -> tuple[SpeakingFeedback, str]:
    """Decode speaking feedback and the assistant's next line."""
    obj = _object(
        data,
        "speaking feedback",
        "accuracyScore",
        "pronunciationTips",
        "fluencyComment",
        "grammarComment",
        "aiResponse",
    )
    with _decoding("speaking feedback"):
        tips = [
            PronunciationTip(**_object(tip, "pronunciation tip", "word", "tip"))
            for tip in _array(obj["pronunciationTips"], "pronunciation tips")
        ]
        feedback = SpeakingFeedback(
            accuracy_score=obj["accuracyScore"],
            pronunciation_tips=tips,
            fluency_comment=obj["fluencyComment"],
            grammar_comment=obj["grammarComment"],
        )
    return feedback, _text(obj["aiResponse"], "assistant reply")


def decode_vocabulary_list(data: Any) -> list[VocabularyEntry]:
    with _decoding("vocabulary list"):
        return [
            VocabularyEntry(**_object(item, "vocabulary entry", "word", "definition", "example"))
            for item in _array(data, "vocabulary list")
        ]


def decode_dictionary_entry(data: Any) -> DictionaryEntry:
    obj = _object(data, "dictionary entry", "word", "partOfSpeech", "definition", "example")
    with _decoding("dictionary entry"):
        return DictionaryEntry(
            word=obj["word"],
            part_of_speech=obj["partOfSpeech"],
            definition=obj["definition"],
            example=obj["example"],
        )


def decode_phrasal_verb(data: Any) -> PhrasalVerb:
    obj = _object(data, "phrasal verb", "verb", "definition", "example")
    with _decoding("phrasal verb"):
        return PhrasalVerb(**obj)


def decode_common_phrase(data: Any) -> CommonPhrase:
    obj = _object(data, "common phrase", "phrase", "meaning", "example")
    with _decoding("common phrase"):
        return CommonPhrase(**obj)


def decode_exam_questions(data: Any) -> list[ExamQuestion]:
    """Decode the question list of a new exam.

    IDs are taken as given, but must be unique since answers are keyed by them.
    """
    items = _array(data, "exam questions")
    if not items:
        raise GenerationDecodeError("malformed exam questions: no questions")
    with _decoding("exam questions"):
        questions = [
            ExamQuestion(
                id=obj["id"],
                kind=obj["type"],
                text=obj["text"],
                options=obj.get("options") or None,
            )
            for obj in (_object(item, "exam question", "id", "type", "text") for item in items)
        ]
    ids = [q.id for q in questions]
    if len(set(ids)) != len(ids):
        raise GenerationDecodeError(f"malformed exam questions: duplicate ids {ids}")
    return questions


def decode_exam_result(data: Any) -> ExamResult:
    obj = _object(data, "exam result", "overallScore", "summary", "feedback")
    with _decoding("exam result"):
        feedback = [
            QuestionFeedback(
                question_id=item["questionId"],
                question_text=item["questionText"],
                user_answer=item["userAnswer"],
                correct=item["isCorrect"],
                feedback=item["feedback"],
            )
            for item in (
                _object(
                    entry,
                    "question feedback",
                    "questionId",
                    "questionText",
                    "userAnswer",
                    "isCorrect",
                    "feedback",
                )
                for entry in _array(obj["feedback"], "question feedback")
            )
        ]
        return ExamResult(
            overall_score=obj["overallScore"],
            summary=obj["summary"],
            per_question_feedback=feedback,
        )


def decode_learning_plan(data: Any) -> LearningPlan:
    """Decode a generated plan. Every task starts out not completed."""
    obj = _object(data, "learning plan", "objective", "plan")
    with _decoding("learning plan"):
        days = []
        for day in _array(obj["plan"], "learning plan days"):
            day = _object(day, "learning plan day", "day", "tasks")
            tasks = [
                LearningTask(
                    id=task["id"],
                    description=task["description"],
                    kind=task["type"],
                    completed=False,
                )
                for task in (
                    _object(t, "learning task", "id", "description", "type")
                    for t in _array(day["tasks"], "learning tasks")
                )
            ]
            days.append(LearningDay(day=day["day"], tasks=tasks))
        return LearningPlan(objective=obj["objective"], days=days)
