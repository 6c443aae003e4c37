"""Exercise surfaces for the LingoSphere tutor.

Generate-then-answer surfaces share ExerciseStateMachine:
- StoryPractice: comprehension question, graded by the model
- TranslationPractice: translation into the chosen language, graded by the model
- WritingAnalysis: structured critique of free writing
- SentenceBuilder: reorder shuffled words, checked locally
- GrammarGauntlet: correct a sentence, checked locally
- IdiomQuest: pick an idiom's meaning, checked locally

Orchestrated surfaces:
- ExamOrchestrator: multi-question exams with batch grading
- SpeakingPractice, OpenChat: turn-based conversations
- LanguageTools: vocabulary, dictionary, phrasal verbs, common phrases
- LearningPath: seven-day study plans

Validators:
- LocalExactValidator, OrderedSequenceValidator, RemoteGradedValidator
"""

from exercises.base import ExerciseStateMachine, parse_letter_input
from exercises.conversation import ConversationOrchestrator, OpenChat, SpeakingPractice
from exercises.exam import ExamOrchestrator
from exercises.grammar_gauntlet import GrammarGauntlet
from exercises.idiom_quest import IdiomQuest
from exercises.language_tools import LanguageTools, fetch_word_of_the_day
from exercises.learning_path import LearningPath
from exercises.sentence_builder import SentenceBuilder
from exercises.story import StoryPractice
from exercises.translation import TranslationPractice
from exercises.validators import (
    LocalExactValidator,
    OrderedSequenceValidator,
    RemoteGradedValidator,
    TaskValidator,
)
from exercises.writing import WritingAnalysis

__all__ = [
    # State machine
    "ExerciseStateMachine",
    "parse_letter_input",
    # Validators
    "TaskValidator",
    "LocalExactValidator",
    "OrderedSequenceValidator",
    "RemoteGradedValidator",
    # Exercise surfaces
    "StoryPractice",
    "TranslationPractice",
    "WritingAnalysis",
    "SentenceBuilder",
    "GrammarGauntlet",
    "IdiomQuest",
    # Orchestrators
    "ExamOrchestrator",
    "ConversationOrchestrator",
    "SpeakingPractice",
    "OpenChat",
    "LanguageTools",
    "fetch_word_of_the_day",
    "LearningPath",
]
