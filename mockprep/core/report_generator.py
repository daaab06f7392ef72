"""
Report Generator for MockPrep

Aggregates scored answers into a session-level feedback report with:
- Overall score, grade and completion rate
- Strengths, improvements and strong/weak areas
- Per-category performance
- Communication and coding metrics
- Recommendations and next steps
"""

import logging
from typing import Any

from mockprep.core.scoring import calculate_grade, mean_rounded, percentage, round_half_up
from mockprep.models.feedback import (
    CategoryPerformance,
    CommunicationAnalysis,
    FeedbackMetrics,
    QuestionFeedback,
    ScoredAnswer,
    SessionFeedback,
)
from mockprep.models.question import Question

logger = logging.getLogger(__name__)

STRENGTH_THRESHOLD = 80
IMPROVEMENT_THRESHOLD = 65
MAX_POOL_ITEMS = 5
MAX_RECOMMENDATIONS = 5
MAX_NEXT_STEPS = 4

DEFAULT_STRENGTHS = [
    "Completed the interview process",
    "Demonstrated engagement with the questions",
]
DEFAULT_IMPROVEMENTS = [
    "Focus on providing more detailed responses",
    "Practice explaining technical concepts clearly",
]

RECOMMENDATION_TIERS: list[tuple[int | None, list[str]]] = [
    (60, [
        "Focus on understanding fundamental concepts before moving to advanced topics",
        "Practice explaining your thought process step by step",
        "Take time to think through questions before responding",
    ]),
    (75, [
        "Work on providing more comprehensive answers with examples",
        "Practice technical interview questions regularly",
        "Focus on explaining the reasoning behind your solutions",
    ]),
    (85, [
        "Continue practicing advanced scenarios and edge cases",
        "Work on optimizing your solutions and discussing trade-offs",
        "Practice explaining complex concepts in simple terms",
    ]),
    (None, [
        "Maintain your strong performance with continued practice",
        "Focus on leadership and system design questions",
        "Consider mentoring others to reinforce your knowledge",
    ]),
]
CODING_RECOMMENDATION = "Practice more coding problems on platforms like LeetCode or HackerRank"
CODING_SCORE_THRESHOLD = 70

BASE_NEXT_STEPS = [
    "Review the detailed feedback for each question",
    "Practice the areas identified for improvement",
    "Take another mock interview to track progress",
]
NEXT_STEPS_THRESHOLD = 70
FOUNDATION_NEXT_STEPS = [
    "Study fundamental concepts in your field",
    "Practice basic interview questions daily",
]
ADVANCED_NEXT_STEPS = [
    "Practice advanced interview scenarios",
    "Focus on system design and architectural questions",
]


def dedupe(items: list[str], limit: int = MAX_POOL_ITEMS) -> list[str]:
    """Drop duplicates keeping first-seen order, then cap."""
    return list(dict.fromkeys(items))[:limit]


def _as_number(value: Any) -> float:
    if isinstance(value, bool):
        return 0
    try:
        return float(value) if value is not None else 0
    except (TypeError, ValueError):
        return 0


class ReportGenerator:
    """
    Builds the session feedback report.

    Pure aggregation over already-scored answers; the only
    non-deterministic field of the output is ``generated_at``.
    """

    def generate(
        self,
        scored_answers: list[ScoredAnswer],
        questions: list[Question],
        session_id: str,
        user_id: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> SessionFeedback:
        """
        Generate the complete session feedback.

        Args:
            scored_answers: Output of the evaluation engine, in order
            questions: Every question of the session
            session_id: Session the answers belong to
            user_id: Owner of the session
            metadata: Client-supplied interview metadata

        Returns:
            Complete SessionFeedback
        """
        metadata = metadata or {}
        entries = [s.feedback for s in scored_answers]

        total_questions = len(questions)
        answered = sum(1 for e in entries if e.was_answered)
        overall_score = mean_rounded([e.score for e in entries])
        completion_rate = min(100, percentage(answered, total_questions))

        strengths, improvements, strong_areas, weak_areas = self._collect_pools(entries)
        communication = self._communication_analysis(entries)

        logger.info(
            f"Aggregated session {session_id}: score={overall_score}, "
            f"answered={answered}/{total_questions}"
        )

        return SessionFeedback(
            user_id=user_id,
            session_id=session_id,
            role=metadata.get("jobRole") or metadata.get("role") or "Not specified",
            company=metadata.get("company") or "Not specified",
            interview_type=metadata.get("interviewType") or "technical",
            difficulty=metadata.get("difficulty") or "medium",
            language=metadata.get("language") or "javascript",
            overall_score=overall_score,
            overall_grade=calculate_grade(overall_score),
            completion_rate=completion_rate,
            total_questions=total_questions,
            answered_questions=answered,
            skipped_questions=max(0, total_questions - answered),
            coding_questions=sum(1 for q in questions if q.coding),
            average_time_per_question=_as_number(metadata.get("averageTimePerQuestion")),
            total_interview_time=_as_number(metadata.get("totalInterviewTime")),
            strong_areas=dedupe(strong_areas, limit=len(strong_areas)),
            weak_areas=dedupe(weak_areas, limit=len(weak_areas)),
            resume_processed=bool(metadata.get("resumeProcessed")),
            metrics=self._metrics(entries, answered, total_questions),
            overall_strengths=strengths or list(DEFAULT_STRENGTHS),
            overall_improvements=improvements or list(DEFAULT_IMPROVEMENTS),
            recommendations=self.generate_recommendations(entries, overall_score),
            next_steps=self.generate_next_steps(overall_score),
            question_feedbacks=entries,
            category_performance=self.calculate_category_performance(entries),
            communication_analysis=communication,
            interview_metadata=dict(metadata),
        )

    # =========================================================================
    # STRENGTHS AND IMPROVEMENTS
    # =========================================================================

    def _collect_pools(
        self,
        entries: list[QuestionFeedback],
    ) -> tuple[list[str], list[str], list[str], list[str]]:
        strengths: list[str] = []
        improvements: list[str] = []
        strong_areas: list[str] = []
        weak_areas: list[str] = []

        for entry in entries:
            if entry.score >= STRENGTH_THRESHOLD:
                strengths.extend(entry.strengths)
                strong_areas.append(entry.question_type)
            elif entry.score < IMPROVEMENT_THRESHOLD:
                improvements.extend(entry.improvements)
                weak_areas.append(entry.question_type)

        return dedupe(strengths), dedupe(improvements), strong_areas, weak_areas

    # =========================================================================
    # CATEGORY PERFORMANCE
    # =========================================================================

    def calculate_category_performance(
        self,
        entries: list[QuestionFeedback],
    ) -> dict[str, CategoryPerformance]:
        """Roll entries up by question type."""
        categories: dict[str, CategoryPerformance] = {}

        for entry in entries:
            category = categories.setdefault(entry.question_type or "general", CategoryPerformance())
            category.total_questions += 1
            if entry.was_answered:
                category.questions_answered += 1
                category.scores.append(entry.score)
            if entry.has_transcript:
                category.transcript_available += 1
                category.total_words_spoken += entry.transcript_word_count
            if entry.has_code:
                category.code_submissions += 1
                category.total_code_length += entry.code_length

        for category in categories.values():
            category.average_score = mean_rounded(category.scores)
            category.completion_rate = percentage(category.questions_answered, category.total_questions)
            if category.transcript_available:
                category.average_words_spoken = round_half_up(
                    category.total_words_spoken / category.transcript_available
                )
            if category.code_submissions:
                category.average_code_length = round_half_up(
                    category.total_code_length / category.code_submissions
                )

        return categories

    # =========================================================================
    # METRICS
    # =========================================================================

    def _metrics(
        self,
        entries: list[QuestionFeedback],
        answered: int,
        total_questions: int,
    ) -> FeedbackMetrics:
        voice = [e for e in entries if e.has_transcript]
        total_words = sum(e.transcript_word_count for e in voice)

        communication_scores = [
            e.communication_score if e.communication_score is not None else e.score
            for e in entries
        ]
        technical_scores = [e.technical_score for e in entries if e.technical_score]

        return FeedbackMetrics(
            questions_answered=answered,
            total_questions=total_questions,
            average_communication_score=mean_rounded(communication_scores) if entries else None,
            average_technical_score=mean_rounded(technical_scores) if technical_scores else None,
            total_words_spoken=total_words,
            average_words_per_response=round_half_up(total_words / len(voice)) if voice else 0,
            questions_with_transcripts=len(voice),
            coding_questions_attempted=sum(1 for e in entries if e.coding and e.has_code),
            total_code_length=sum(e.code_length for e in entries),
        )

    def _communication_analysis(self, entries: list[QuestionFeedback]) -> CommunicationAnalysis | None:
        voice = [e for e in entries if e.has_transcript]
        if not voice:
            return None

        total_words = sum(e.transcript_word_count for e in voice)
        average_words = round_half_up(total_words / len(voice))

        if average_words < 50:
            brevity = "concise"
        elif average_words > 150:
            brevity = "detailed"
        else:
            brevity = "balanced"

        return CommunicationAnalysis(
            total_words_spoken=total_words,
            average_words_per_response=average_words,
            communication_patterns={
                "brevity": brevity,
                "technicalLanguageUse": "moderate",
            },
        )

    # =========================================================================
    # RECOMMENDATIONS
    # =========================================================================

    def generate_recommendations(self, entries: list[QuestionFeedback], average_score: int) -> list[str]:
        """Tiered recommendations plus a coding tip when coding answers were weak."""
        recommendations: list[str] = []
        for ceiling, bullets in RECOMMENDATION_TIERS:
            if ceiling is None or average_score < ceiling:
                recommendations.extend(bullets)
                break

        coding_scores = [e.score for e in entries if e.coding]
        if coding_scores and sum(coding_scores) / len(coding_scores) < CODING_SCORE_THRESHOLD:
            recommendations.append(CODING_RECOMMENDATION)

        return recommendations[:MAX_RECOMMENDATIONS]

    def generate_next_steps(self, average_score: int) -> list[str]:
        """Fixed next steps plus one branch-specific step."""
        branch = FOUNDATION_NEXT_STEPS if average_score < NEXT_STEPS_THRESHOLD else ADVANCED_NEXT_STEPS
        return (BASE_NEXT_STEPS + branch)[:MAX_NEXT_STEPS]
