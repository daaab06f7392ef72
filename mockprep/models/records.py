"""
Stored record shapes that predate the v2 feedback schema.
"""

from datetime import datetime
from typing import Any

from pydantic import Field, field_validator

from mockprep.models.base import CamelModel
from mockprep.models.feedback import LegacyAnswerEntry


class LegacyFeedbackRecord(CamelModel):
    """v1 feedback record: flat strengths/improvements and ``detailedFeedback``."""

    user_id: str | None = None
    session_id: str
    role: str = "Not specified"
    company: str | None = None
    interview_type: str = "technical"
    difficulty: str = "medium"
    language: str = "javascript"

    overall_score: int = 0
    overall_grade: str | None = None
    completion_rate: int | None = None

    total_questions: int = 0
    answered_questions: int = 0
    skipped_questions: int = 0
    coding_questions: int = 0
    average_time_per_question: float = 0
    total_interview_time: float = 0

    strengths: list[str] = Field(default_factory=list)
    improvements: list[str] = Field(default_factory=list)
    strong_areas: list[str] = Field(default_factory=list)
    weak_areas: list[str] = Field(default_factory=list)
    score_distribution: dict[str, Any] = Field(default_factory=dict)
    detailed_feedback: list[LegacyAnswerEntry] = Field(default_factory=list)

    recommendations: list[str] | None = None
    next_steps: list[str] | None = None

    resume_processed: bool = False
    generated_at: datetime | None = None

    @field_validator("overall_score", mode="before")
    @classmethod
    def _missing_score(cls, value: Any) -> Any:
        return 0 if value is None else value

    @field_validator("user_id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> Any:
        return str(value) if value is not None else None
