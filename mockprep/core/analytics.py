"""
Analytics Aggregator for MockPrep

Summarizes a user's feedback history (oldest first) into progress metrics.
"""

from collections import Counter

from mockprep.core.scoring import mean_rounded, percentage, round_half_up
from mockprep.models.analytics import (
    LastInterview,
    RollingAveragePoint,
    ScorePoint,
    UserAnalytics,
)
from mockprep.models.feedback import SessionFeedback

ROLLING_WINDOW = 3
TOP_ITEMS = 5


def _completion_rate(feedback: SessionFeedback) -> int:
    return feedback.completion_rate or percentage(feedback.answered_questions, feedback.total_questions)


def _most_common(pools: list[list[str]]) -> list[str]:
    # Counter.most_common keeps first-seen order among equal counts
    counts = Counter(item for pool in pools for item in pool)
    return [item for item, _ in counts.most_common(TOP_ITEMS)]


def rolling_averages(scores: list[int], window: int = ROLLING_WINDOW) -> list[int]:
    """Rounded mean over ``[max(0, i - window + 1), i]`` for every index."""
    return [
        mean_rounded(scores[max(0, index - window + 1):index + 1])
        for index in range(len(scores))
    ]


def compute_user_analytics(feedbacks: list[SessionFeedback]) -> UserAnalytics:
    """
    Build the analytics view of one user.

    Args:
        feedbacks: The user's feedback records, oldest to newest

    Returns:
        UserAnalytics; a zeroed object when the history is empty
    """
    if not feedbacks:
        return UserAnalytics()

    all_scores = [fb.overall_score for fb in feedbacks]
    scored = [s for s in all_scores if s > 0]
    rates = [r for r in (_completion_rate(fb) for fb in feedbacks) if r > 0]

    grade_distribution = Counter(fb.overall_grade or "N/A" for fb in feedbacks)

    first, last = feedbacks[0], feedbacks[-1]
    progress = 0
    if first.overall_score > 0:
        progress = round_half_up(
            (last.overall_score - first.overall_score) / first.overall_score * 100
        )

    return UserAnalytics(
        total_interviews=len(feedbacks),
        avg_score=mean_rounded(scored),
        best_score=max(scored) if scored else 0,
        worst_score=min(scored) if scored else 0,
        avg_completion_rate=mean_rounded(rates),
        grade_distribution=dict(grade_distribution),
        most_common_strengths=_most_common([fb.overall_strengths for fb in feedbacks]),
        most_common_improvements=_most_common([fb.overall_improvements for fb in feedbacks]),
        score_trend=[
            ScorePoint(date=fb.generated_at, score=fb.overall_score)
            for fb in feedbacks
        ],
        rolling_avg_trend=[
            RollingAveragePoint(date=fb.generated_at, rolling_avg=avg)
            for fb, avg in zip(feedbacks, rolling_averages(all_scores))
        ],
        last_interview=LastInterview(
            score=last.overall_score,
            grade=last.overall_grade or "N/A",
            strengths=last.overall_strengths,
            improvements=last.overall_improvements,
        ),
        progress=progress,
    )
