"""LingoSphere UI Module - terminal interface built on rich."""

from ui.app import TutorUI
from ui.components import (
    TaskPanel,
    FeedbackPanel,
    WritingFeedbackPanel,
    TranscriptPanel,
    ExamResultsTable,
    PlanTable,
    WelcomeScreen,
    MenuTable,
)
from ui.styles import (
    BRAND_INDIGO,
    BRAND_TEAL,
    SUCCESS_GREEN,
    ERROR_RED,
    INFO_BLUE,
    MUTED_GRAY,
    get_accent,
)

__all__ = [
    "TutorUI",
    "TaskPanel",
    "FeedbackPanel",
    "WritingFeedbackPanel",
    "TranscriptPanel",
    "ExamResultsTable",
    "PlanTable",
    "WelcomeScreen",
    "MenuTable",
    "BRAND_INDIGO",
    "BRAND_TEAL",
    "SUCCESS_GREEN",
    "ERROR_RED",
    "INFO_BLUE",
    "MUTED_GRAY",
    "get_accent",
]
