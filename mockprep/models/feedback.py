"""
Feedback models for MockPrep

Defines the per-answer feedback produced by the model, the per-question
entries stored on a session, and the session-level (v2) feedback record.
"""

from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import Field, field_validator

from mockprep.models.base import CamelModel
from mockprep.models.question import Transcript


class AnswerFeedback(CamelModel):
    """Normalized model feedback for a single answer."""

    score: int = Field(..., ge=0, le=100)
    assessment: str = ""
    strengths: list[str] = Field(default_factory=list)
    improvements: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)
    keywords_covered: list[str] = Field(default_factory=list)
    missed_opportunities: list[str] = Field(default_factory=list)

    # Optional sub-scores (0-100)
    communication_score: int | None = None
    technical_score: int | None = None
    completeness: int | None = None
    clarity: int | None = None

    response_type: Literal["skipped", "code", "audio"] = "audio"
    answered: bool = True
    is_fallback: bool = False


class QuestionFeedback(CamelModel):
    """Feedback for one question of a session (v2 shape)."""

    question_id: str
    question_text: str = ""
    question_type: str = "general"
    difficulty: str = "medium"
    coding: bool = False

    score: int = Field(..., ge=0, le=100)
    was_answered: bool

    # Voice answers
    has_transcript: bool = False
    transcription: Transcript = None
    transcript_word_count: int = 0

    # Coding answers
    has_code: bool = False
    code: str | None = None
    code_length: int = 0

    detailed_feedback: str = ""
    strengths: list[str] = Field(default_factory=list)
    improvements: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)
    keywords_covered: list[str] = Field(default_factory=list)
    missed_opportunities: list[str] = Field(default_factory=list)

    communication_score: int | None = None
    technical_score: int | None = None
    completeness: int | None = None
    clarity: int | None = None


class LegacyAnswerEntry(CamelModel):
    """Flat per-question entry of the v1 record shape."""

    question_id: str = ""
    question_text: str = ""
    user_answer: str = ""
    score: int | None = None
    feedback: str = ""
    strengths: list[str] = Field(default_factory=list)
    improvements: list[str] = Field(default_factory=list)

    @field_validator("question_id", "question_text", "user_answer", "feedback", mode="before")
    @classmethod
    def _null_text(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("strengths", "improvements", mode="before")
    @classmethod
    def _null_list(cls, value: Any) -> Any:
        return [] if value is None else value


class ScoredAnswer(CamelModel):
    """Output of scoring one answer: the v2 entry plus its v1 twin."""

    feedback: QuestionFeedback
    legacy: LegacyAnswerEntry


class CategoryPerformance(CamelModel):
    """Roll-up of one question type."""

    total_questions: int = 0
    questions_answered: int = 0
    scores: list[int] = Field(default_factory=list)
    average_score: int = 0
    completion_rate: int = 0
    transcript_available: int = 0
    total_words_spoken: int = 0
    average_words_spoken: int = 0
    code_submissions: int = 0
    total_code_length: int = 0
    average_code_length: int = 0


class FeedbackMetrics(CamelModel):
    """Headline metrics of a session."""

    questions_answered: int = 0
    total_questions: int = 0
    average_communication_score: int | None = None
    average_technical_score: int | None = None
    total_words_spoken: int = 0
    average_words_per_response: int = 0
    questions_with_transcripts: int = 0
    coding_questions_attempted: int = 0
    total_code_length: int = 0


class CommunicationAnalysis(CamelModel):
    """Communication summary over voice answers."""

    total_words_spoken: int = 0
    average_words_per_response: int = 0
    communication_patterns: dict[str, str] = Field(default_factory=dict)


class SessionFeedback(CamelModel):
    """Aggregate feedback for one interview session (v2 record shape)."""

    # Ownership
    user_id: str | None = None
    session_id: str

    # Interview context
    role: str = "Not specified"
    company: str = "Not specified"
    interview_type: str = "technical"
    difficulty: str = "medium"
    language: str = "javascript"

    # Scores
    overall_score: int = Field(..., ge=0, le=100)
    overall_grade: str | None = None
    completion_rate: int = Field(default=0, ge=0, le=100)

    # Counts
    total_questions: int = 0
    answered_questions: int = 0
    skipped_questions: int = 0
    coding_questions: int = 0
    average_time_per_question: float = 0
    total_interview_time: float = 0

    strong_areas: list[str] = Field(default_factory=list)
    weak_areas: list[str] = Field(default_factory=list)
    resume_processed: bool = False

    metrics: FeedbackMetrics = Field(default_factory=FeedbackMetrics)

    overall_strengths: list[str] = Field(default_factory=list)
    overall_improvements: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    next_steps: list[str] = Field(default_factory=list)

    question_feedbacks: list[QuestionFeedback] = Field(default_factory=list)
    category_performance: dict[str, CategoryPerformance] = Field(default_factory=dict)
    communication_analysis: CommunicationAnalysis | None = None

    interview_metadata: dict[str, Any] = Field(default_factory=dict)
    generated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    feedback_version: Literal["v1", "v2"] = "v2"

    @field_validator("user_id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> Any:
        return str(value) if value is not None else None
