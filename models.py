from enum import Enum
from typing import Literal
from uuid import uuid4

from pydantic import BaseModel, Field, model_validator


def _new_task_id() -> str:
    return uuid4().hex


# ============================================================================
# Settings and identity
# ============================================================================


class Difficulty(str, Enum):
    """CEFR band the generated content is pitched at."""

    A1 = "A1"
    B1 = "B1"
    C1 = "C1"

    @property
    def label(self) -> str:
        return {
            Difficulty.A1: "Beginner",
            Difficulty.B1: "Intermediate",
            Difficulty.C1: "Advanced",
        }[self]


class Persona(str, Enum):
    FRIENDLY = "friendly"
    FORMAL = "formal"


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"
    OCEAN = "ocean"
    FOREST = "forest"


class FontSize(str, Enum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


TRANSLATION_LANGUAGES = ["Spanish", "French", "German", "Mandarin", "Japanese", "Hindi"]


class Settings(BaseModel):
    """Learner preferences. Changing them never touches in-flight tasks."""

    difficulty: Difficulty = Difficulty.A1
    theme: Theme = Theme.LIGHT
    persona: Persona = Persona.FRIENDLY
    translation_language: str = "Spanish"
    font_size: FontSize = FontSize.MEDIUM
    is_incognito: bool = False


class SurfaceKind(str, Enum):
    """Top-level screens of the tutor. Exactly one is active at a time."""

    DASHBOARD = "dashboard"
    STORY = "story"
    SPEAKING = "speaking"
    CHAT = "chat"
    WRITING = "writing"
    TRANSLATION = "translation"
    LANGUAGE_TOOLS = "language_tools"
    SENTENCE_BUILDER = "sentence_builder"
    GRAMMAR = "grammar"
    IDIOM = "idiom"
    EXAM = "exam"
    LEARNING_PATH = "learning_path"


class User(BaseModel):
    """Local account identity. The email namespaces all persisted state."""

    name: str
    email: str


# ============================================================================
# Tasks
# ============================================================================


class Task(BaseModel):
    """Base for every generated exercise prompt.

    The id is assigned once at construction and stays stable for the
    lifetime of the task; answers and verdicts refer back to it.
    """

    id: str = Field(default_factory=_new_task_id)


class StoryTask(Task):
    text: str
    question: str


class TranslationTask(Task):
    sentence: str
    target_language: str


class WritingTask(Task):
    """Free writing; the learner supplies the whole text."""


class SentenceTask(Task):
    """A sentence with its words presented out of order."""

    original: str
    scrambled: list[str]

    @property
    def tokens(self) -> list[str]:
        return self.original.split(" ")

    @model_validator(mode="after")
    def _check_same_words(self) -> "SentenceTask":
        if sorted(self.scrambled) != sorted(self.tokens):
            raise ValueError("scrambled words must be a permutation of the sentence")
        return self


class GrammarTask(Task):
    incorrect: str
    correct: str
    explanation: str


class IdiomTask(Task):
    context_sentence: str
    correct_idiom: str
    options: list[str]
    correct_meaning: str
    explanation: str

    @model_validator(mode="after")
    def _check_options(self) -> "IdiomTask":
        if len(self.options) != 4:
            raise ValueError(f"expected 4 options, got {len(self.options)}")
        if self.options.count(self.correct_meaning) != 1:
            raise ValueError("exactly one option must equal the correct meaning")
        return self


class QuestionKind(str, Enum):
    MCQ = "mcq"
    WRITING = "writing"
    SPEAKING = "speaking"
    LISTENING = "listening"


class ExamQuestion(BaseModel):
    """A single exam question. Options exist only for multiple choice."""

    id: int = Field(gt=0)
    kind: QuestionKind
    text: str
    options: list[str] | None = None

    @model_validator(mode="after")
    def _check_options(self) -> "ExamQuestion":
        if self.kind == QuestionKind.MCQ:
            if not self.options or len(self.options) != 4:
                raise ValueError(f"question {self.id}: multiple choice needs 4 options")
        elif self.options:
            raise ValueError(f"question {self.id}: only multiple choice takes options")
        else:
            self.options = None
        return self


# ============================================================================
# Answers and verdicts
# ============================================================================


class Answer(BaseModel):
    task_id: str
    value: str


class ExamAnswer(BaseModel):
    question_id: int
    value: str


class Verdict(BaseModel):
    correct: bool
    message: str


class WritingFeedback(BaseModel):
    """Structured critique returned by Writing Analysis."""

    overall: str
    grammar: str
    style: str
    vocabulary: str


class QuestionFeedback(BaseModel):
    question_id: int
    question_text: str
    user_answer: str
    correct: bool
    feedback: str


class ExamResult(BaseModel):
    overall_score: float = Field(ge=0, le=100)
    summary: str
    per_question_feedback: list[QuestionFeedback]


# ============================================================================
# Conversation
# ============================================================================


class PronunciationTip(BaseModel):
    word: str
    tip: str


class SpeakingFeedback(BaseModel):
    accuracy_score: float = Field(ge=0, le=100)
    pronunciation_tips: list[PronunciationTip] = Field(default_factory=list, max_length=3)
    fluency_comment: str
    grammar_comment: str


class TurnRole(str, Enum):
    ASSISTANT = "assistant"
    USER = "user"


class ConversationTurn(BaseModel):
    role: TurnRole
    text: str
    feedback: SpeakingFeedback | None = None

    @model_validator(mode="after")
    def _feedback_only_on_user_turns(self) -> "ConversationTurn":
        if self.feedback is not None and self.role != TurnRole.USER:
            raise ValueError("feedback can only be attached to user turns")
        return self


# ============================================================================
# Language tools and learning path content
# ============================================================================


class WordOfTheDay(BaseModel):
    word: str
    definition: str
    example: str


class VocabularyEntry(BaseModel):
    word: str
    definition: str
    example: str


class DictionaryEntry(BaseModel):
    word: str
    part_of_speech: str
    definition: str
    example: str


class PhrasalVerb(BaseModel):
    verb: str
    definition: str
    example: str


class CommonPhrase(BaseModel):
    phrase: str
    meaning: str
    example: str


class PlanFocus(str, Enum):
    INTEGRAL = "integral"
    SPEAKING = "speaking"
    WRITING = "writing"
    VOCABULARY = "vocabulary"
    EXAM = "exam"


class LearningTask(BaseModel):
    id: str
    description: str
    kind: SurfaceKind
    completed: bool = False


class LearningDay(BaseModel):
    day: str
    tasks: list[LearningTask]


class LearningPlan(BaseModel):
    """A week of tasks. Completion is tracked by the learner, not the model."""

    objective: str
    days: list[LearningDay]


# ============================================================================
# Surface states
# ============================================================================


class ExercisePhase(str, Enum):
    IDLE = "idle"
    GENERATING = "generating"
    READY = "ready"
    SUBMITTED = "submitted"
    FEEDBACK = "feedback"


class SurfaceState(BaseModel):
    """Fields shared by every exercise surface.

    At most one error message is held; a new error replaces the old one.
    """

    phase: ExercisePhase = ExercisePhase.IDLE
    error: str = ""

    @property
    def busy(self) -> bool:
        return self.phase in (ExercisePhase.GENERATING, ExercisePhase.SUBMITTED)


class StorySurface(SurfaceState):
    task: StoryTask | None = None
    answer: Answer | None = None
    verdict: Verdict | None = None


class TranslationSurface(SurfaceState):
    task: TranslationTask | None = None
    answer: Answer | None = None
    verdict: Verdict | None = None


class WritingSurface(SurfaceState):
    task: WritingTask | None = None
    answer: Answer | None = None
    verdict: WritingFeedback | None = None


class SentenceSurface(SurfaceState):
    task: SentenceTask | None = None
    bank: list[str] = Field(default_factory=list)
    answer_tokens: list[str] = Field(default_factory=list)
    answer: Answer | None = None
    verdict: Verdict | None = None


class GrammarSurface(SurfaceState):
    task: GrammarTask | None = None
    answer: Answer | None = None
    verdict: Verdict | None = None


class IdiomSurface(SurfaceState):
    task: IdiomTask | None = None
    answer: Answer | None = None
    verdict: Verdict | None = None


class ExamPhase(str, Enum):
    SETUP = "setup"
    IN_PROGRESS = "in_progress"
    RESULTS = "results"


class ExamType(str, Enum):
    COMPREHENSIVE = "comprehensive"
    READING_VOCAB = "reading_vocab"
    WRITING_GRAMMAR = "writing_grammar"
    LISTENING_SPEAKING = "listening_speaking"


class ExamSurface(BaseModel):
    phase: ExamPhase = ExamPhase.SETUP
    exam_type: ExamType = ExamType.COMPREHENSIVE
    question_count: Literal[5, 10, 15] = 5
    questions: list[ExamQuestion] = Field(default_factory=list)
    current_index: int = 0
    current_answer: str = ""
    answers: list[ExamAnswer] = Field(default_factory=list)
    result: ExamResult | None = None
    busy: bool = False
    error: str = ""


class ConversationSurface(BaseModel):
    turns: list[ConversationTurn] = Field(default_factory=list)
    busy: bool = False
    error: str = ""


class LanguageTool(str, Enum):
    VOCABULARY = "vocabulary"
    DICTIONARY = "dictionary"
    PHRASAL_VERBS = "phrasal_verbs"
    COMMON_PHRASES = "common_phrases"


class LanguageToolsSurface(BaseModel):
    active_tool: LanguageTool = LanguageTool.VOCABULARY
    vocabulary: list[VocabularyEntry] = Field(default_factory=list)
    dictionary_query: str = ""
    dictionary_entry: DictionaryEntry | None = None
    phrasal_verb: PhrasalVerb | None = None
    common_phrase: CommonPhrase | None = None
    busy: bool = False
    error: str = ""


class LearningPathSurface(BaseModel):
    focus: PlanFocus = PlanFocus.INTEGRAL
    activities: list[SurfaceKind] = Field(default_factory=list)
    plan: LearningPlan | None = None
    busy: bool = False
    error: str = ""


# ============================================================================
# Persisted session record
# ============================================================================

CURRENT_SCHEMA_VERSION = 2


class SessionRecord(BaseModel):
    """Everything persisted for one user.

    Fields added after a record was written fall back to their defaults on
    load, so older records keep loading.
    """

    schema_version: int = CURRENT_SCHEMA_VERSION
    settings: Settings = Field(default_factory=Settings)
    active_surface: SurfaceKind = SurfaceKind.DASHBOARD
    word_of_the_day: WordOfTheDay | None = None
    story: StorySurface = Field(default_factory=StorySurface)
    translation: TranslationSurface = Field(default_factory=TranslationSurface)
    writing: WritingSurface = Field(default_factory=WritingSurface)
    sentence_builder: SentenceSurface = Field(default_factory=SentenceSurface)
    grammar: GrammarSurface = Field(default_factory=GrammarSurface)
    idiom: IdiomSurface = Field(default_factory=IdiomSurface)
    exam: ExamSurface = Field(default_factory=ExamSurface)
    speaking: ConversationSurface = Field(default_factory=ConversationSurface)
    chat: ConversationSurface = Field(default_factory=ConversationSurface)
    language_tools: LanguageToolsSurface = Field(default_factory=LanguageToolsSurface)
    learning_path: LearningPathSurface = Field(default_factory=LearningPathSurface)
