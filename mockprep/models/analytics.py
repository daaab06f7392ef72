"""
Analytics models for MockPrep

Cross-session progress view of a single user.
"""

from datetime import datetime

from pydantic import Field

from mockprep.models.base import CamelModel


class ScorePoint(CamelModel):
    date: datetime | None = None
    score: int = 0


class RollingAveragePoint(CamelModel):
    date: datetime | None = None
    rolling_avg: int = 0


class LastInterview(CamelModel):
    score: int = 0
    grade: str = "N/A"
    strengths: list[str] = Field(default_factory=list)
    improvements: list[str] = Field(default_factory=list)


class UserAnalytics(CamelModel):
    """Aggregated history of a user's feedback records."""

    total_interviews: int = 0
    avg_score: int = 0
    best_score: int = 0
    worst_score: int = 0
    avg_completion_rate: int = 0
    grade_distribution: dict[str, int] = Field(default_factory=dict)
    most_common_strengths: list[str] = Field(default_factory=list)
    most_common_improvements: list[str] = Field(default_factory=list)
    score_trend: list[ScorePoint] = Field(default_factory=list)
    rolling_avg_trend: list[RollingAveragePoint] = Field(default_factory=list)
    last_interview: LastInterview | None = None
    progress: int = 0
