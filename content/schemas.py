"""Response schemas sent with structured generation requests.

Field names follow what the model is asked to return; ``content.decoding``
maps them onto the pydantic models.
"""

from google.genai import types

from models import SurfaceKind

STRING = types.Schema(type=types.Type.STRING)


def _string(description: str | None = None) -> types.Schema:
    if description is None:
        return STRING
    return types.Schema(type=types.Type.STRING, description=description)


def _object(properties: dict[str, types.Schema], required: list[str] | None = None,
            description: str | None = None) -> types.Schema:
    return types.Schema(
        type=types.Type.OBJECT,
        properties=properties,
        required=required if required is not None else list(properties),
        description=description,
    )


def _array(items: types.Schema, description: str | None = None) -> types.Schema:
    return types.Schema(type=types.Type.ARRAY, items=items, description=description)


WORD_OF_THE_DAY = _object({"word": STRING, "definition": STRING, "example": STRING})

STORY = _object({"story": STRING, "question": STRING})

GRADE = _object({
    "isCorrect": types.Schema(
        type=types.Type.BOOLEAN,
        description="Whether the learner's answer is acceptable.",
    ),
    "feedback": _string("Feedback for the learner on their answer."),
})

WRITING_FEEDBACK = _object({
    "overall": _string("Overall feedback on the text."),
    "grammar": _string("Specific feedback on grammar and correctness."),
    "style": _string("Feedback on writing style, tone, and flow."),
    "vocabulary": _string("Feedback on word choice and vocabulary usage."),
})

GRAMMAR_TASK = _object({
    "incorrectSentence": _string(
        "A single English sentence with one common grammatical mistake."
    ),
    "correctSentence": _string("The corrected version of the sentence."),
    "explanation": _string(
        "A simple, one-sentence explanation of the error and the correction."
    ),
})

IDIOM_TASK = _object({
    "contextSentence": _string(
        "A sentence with a placeholder like '___' where the idiom should go."
    ),
    "correctIdiom": _string("The idiom that fits in the sentence."),
    "options": _array(
        STRING,
        description=(
            "An array of 4 strings. One is the correct meaning of the idiom, "
            "and three are plausible distractors. The array should be shuffled."
        ),
    ),
    "correctMeaning": _string("The correct meaning of the idiom."),
    "explanation": _string("A simple explanation of what the idiom means."),
})

SPEAKING_FEEDBACK = _object({
    "accuracyScore": types.Schema(
        type=types.Type.NUMBER,
        description=(
            "A score from 0-100 on how well the user's response fits the "
            "context and is grammatically correct."
        ),
    ),
    "pronunciationTips": _array(
        _object({"word": STRING, "tip": STRING}),
        description=(
            "Tips for 1-3 specific words the user might have struggled with "
            "based on common pronunciation errors for their likely accent. "
            "Identify the word and provide a simple tip."
        ),
    ),
    "fluencyComment": _string(
        "A brief, encouraging comment on the user's conversational fluency."
    ),
    "grammarComment": _string("A brief, encouraging comment on the user's grammar."),
    "aiResponse": _string(
        "Your next line in the conversation to continue the role-play. "
        "Keep it natural and engaging."
    ),
})

VOCABULARY_LIST = _array(_object({"word": STRING, "definition": STRING, "example": STRING}))

DICTIONARY_ENTRY = _object({
    "word": STRING,
    "partOfSpeech": STRING,
    "definition": STRING,
    "example": STRING,
})

PHRASAL_VERB = _object({"verb": STRING, "definition": STRING, "example": STRING})

COMMON_PHRASE = _object({"phrase": STRING, "meaning": STRING, "example": STRING})

EXAM_QUESTIONS = _array(
    _object(
        {
            "id": types.Schema(type=types.Type.NUMBER),
            "type": types.Schema(
                type=types.Type.STRING,
                enum=["mcq", "writing", "speaking", "listening"],
            ),
            "text": STRING,
            "options": _array(STRING),
        },
        required=["id", "type", "text"],
    )
)

EXAM_RESULT = _object({
    "overallScore": types.Schema(type=types.Type.NUMBER),
    "summary": STRING,
    "feedback": _array(
        _object({
            "questionId": types.Schema(type=types.Type.NUMBER),
            "questionText": STRING,
            "userAnswer": STRING,
            "isCorrect": types.Schema(type=types.Type.BOOLEAN),
            "feedback": STRING,
        })
    ),
})

PLAN_ACTIVITIES = [kind.value for kind in SurfaceKind if kind != SurfaceKind.DASHBOARD]

LEARNING_PLAN = _object({
    "objective": _string(
        "A brief, encouraging overall goal for the week for the user based on "
        "their chosen focus."
    ),
    "plan": _array(
        _object({
            "day": _string("The day of the week (e.g., 'Monday')."),
            "tasks": _array(
                _object({
                    "id": _string(
                        "A unique ID for the task, e.g., 'monday-task-1'."
                    ),
                    "description": _string("A user-facing description of the task."),
                    "type": types.Schema(
                        type=types.Type.STRING,
                        enum=PLAN_ACTIVITIES,
                        description="The corresponding activity type in the app.",
                    ),
                }),
                description="A list of 2-3 tasks for the day.",
            ),
        }),
        description="A 7-day plan, one entry per day, from Monday to Sunday.",
    ),
})
