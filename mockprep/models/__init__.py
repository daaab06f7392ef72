"""
Data models and schemas for MockPrep

Contains Pydantic models for:
- Questions, answers and transcripts
- Per-answer and session feedback
- Legacy feedback records
- User analytics
"""

from mockprep.models.analytics import UserAnalytics
from mockprep.models.feedback import (
    AnswerFeedback,
    CategoryPerformance,
    FeedbackMetrics,
    LegacyAnswerEntry,
    QuestionFeedback,
    ScoredAnswer,
    SessionFeedback,
)
from mockprep.models.question import Answer, Question, QuestionDifficulty
from mockprep.models.records import LegacyFeedbackRecord
from mockprep.models.user import CurrentUser

__all__ = [
    # Questions
    "Question",
    "QuestionDifficulty",
    "Answer",
    # Feedback
    "AnswerFeedback",
    "QuestionFeedback",
    "LegacyAnswerEntry",
    "ScoredAnswer",
    "CategoryPerformance",
    "FeedbackMetrics",
    "SessionFeedback",
    "LegacyFeedbackRecord",
    # Users
    "CurrentUser",
    "UserAnalytics",
]
