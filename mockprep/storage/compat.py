"""
Stored-record compatibility for MockPrep

Feedback documents exist in two shapes: the flat v1 shape
(``strengths``/``improvements``/``detailedFeedback``) and the enriched v2
shape (``questionFeedbacks`` and friends). Everything read from the store
goes through ``load_feedback`` so the rest of the code only sees v2.
"""

import logging
import re
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from mockprep.core.report_generator import ReportGenerator
from mockprep.core.scoring import calculate_grade, percentage
from mockprep.models.feedback import (
    CategoryPerformance,
    FeedbackMetrics,
    LegacyAnswerEntry,
    QuestionFeedback,
    SessionFeedback,
)
from mockprep.models.question import StructuredTranscript
from mockprep.models.records import LegacyFeedbackRecord

logger = logging.getLogger(__name__)

SKIPPED_ANSWER = "Question was skipped"
NO_TRANSCRIPT = "No transcript available"
NO_CODE = "No code submitted"

LEGACY_TRANSCRIPT_CONFIDENCE = 0.9
LEGACY_QUESTION_TYPE = "technical"

CODE_TOKENS = ("def ", "function ", "class ", "const ", "let ", "var ", "import ", "from ", "return ")
CODE_PUNCTUATION = re.compile(r"[{}\[\];]")


def classify_user_answer(text: str | None) -> bool:
    """
    Best-effort guess whether a stored v1 answer is code.

    Returns True for code, False for prose or a sentinel.
    """
    if not text or text in (SKIPPED_ANSWER, NO_TRANSCRIPT):
        return False
    return any(token in text for token in CODE_TOKENS) or bool(CODE_PUNCTUATION.search(text))


# ============================================================================
# READING
# ============================================================================

def is_v2_document(document: dict[str, Any]) -> bool:
    return document.get("feedbackVersion") == "v2" and isinstance(document.get("questionFeedbacks"), list)


def load_feedback(document: dict[str, Any], fill_grade: bool = True) -> SessionFeedback:
    """
    Resolve a stored document of either shape into SessionFeedback.

    With ``fill_grade=False`` a record stored without a grade keeps
    ``overall_grade=None``.
    """
    if is_v2_document(document):
        return _load_v2(document, fill_grade)
    return upgrade_legacy_record(LegacyFeedbackRecord.model_validate(document), fill_grade)


def _load_v2(document: dict[str, Any], fill_grade: bool = True) -> SessionFeedback:
    data = dict(document)

    # Older v2 writers kept metrics under enhancedMetrics
    if not data.get("metrics") and isinstance(data.get("enhancedMetrics"), dict):
        data["metrics"] = {
            "questionsAnswered": data.get("answeredQuestions", 0),
            "totalQuestions": data.get("totalQuestions", 0),
            **{k: v for k, v in data["enhancedMetrics"].items() if v is not None},
        }

    feedback = SessionFeedback.model_validate(data)
    if fill_grade and feedback.overall_grade is None:
        feedback.overall_grade = calculate_grade(feedback.overall_score)
    return feedback


def upgrade_legacy_record(record: LegacyFeedbackRecord, fill_grade: bool = True) -> SessionFeedback:
    """Convert a v1 record into the enriched shape."""
    entries = [_upgrade_entry(detail, record) for detail in record.detailed_feedback]
    report = ReportGenerator()

    grade = record.overall_grade or None
    if grade is None and fill_grade:
        grade = calculate_grade(record.overall_score)

    extra: dict[str, Any] = {}
    if record.generated_at is not None:
        extra["generated_at"] = record.generated_at

    return SessionFeedback(
        user_id=record.user_id,
        session_id=record.session_id,
        role=record.role,
        company=record.company or "Not specified",
        interview_type=record.interview_type,
        difficulty=record.difficulty,
        language=record.language,
        overall_score=max(0, min(100, record.overall_score)),
        overall_grade=grade,
        completion_rate=min(100, percentage(record.answered_questions, record.total_questions)),
        total_questions=record.total_questions,
        answered_questions=record.answered_questions,
        skipped_questions=record.skipped_questions,
        coding_questions=record.coding_questions,
        average_time_per_question=record.average_time_per_question,
        total_interview_time=record.total_interview_time,
        strong_areas=record.strong_areas,
        weak_areas=record.weak_areas,
        resume_processed=record.resume_processed,
        metrics=FeedbackMetrics(
            questions_answered=record.answered_questions,
            total_questions=record.total_questions,
            average_communication_score=record.overall_score,
        ),
        overall_strengths=record.strengths,
        overall_improvements=record.improvements,
        recommendations=(
            record.recommendations
            if record.recommendations is not None
            else report.generate_recommendations([], record.overall_score)
        ),
        next_steps=(
            record.next_steps
            if record.next_steps is not None
            else report.generate_next_steps(record.overall_score)
        ),
        question_feedbacks=entries,
        category_performance=_category_performance(record.score_distribution),
        communication_analysis=None,
        interview_metadata={
            "jobRole": record.role,
            "company": record.company,
            "interviewType": record.interview_type,
            "difficulty": record.difficulty,
            "language": record.language,
        },
        feedback_version="v1",
        **extra,
    )


def _upgrade_entry(detail: LegacyAnswerEntry, record: LegacyFeedbackRecord) -> QuestionFeedback:
    answer = detail.user_answer
    skipped = answer == SKIPPED_ANSWER
    answered = bool(answer) and answer not in (SKIPPED_ANSWER, NO_TRANSCRIPT, NO_CODE)
    is_coding = classify_user_answer(answer)
    has_transcript = answered and not is_coding

    if skipped:
        score = 0
    else:
        score = detail.score if detail.score is not None else record.overall_score
        score = max(0, min(100, score))

    return QuestionFeedback(
        question_id=detail.question_id,
        question_text=detail.question_text,
        question_type=LEGACY_QUESTION_TYPE,
        difficulty=record.difficulty,
        coding=is_coding,
        score=score,
        was_answered=answered,
        has_transcript=has_transcript,
        transcription=(
            StructuredTranscript(text=answer, confidence=LEGACY_TRANSCRIPT_CONFIDENCE)
            if has_transcript else None
        ),
        transcript_word_count=len(answer.split()) if has_transcript else 0,
        has_code=is_coding,
        code=answer if is_coding else None,
        code_length=len(answer) if is_coding else 0,
        detailed_feedback=detail.feedback,
        strengths=detail.strengths,
        improvements=detail.improvements,
        communication_score=score,
        technical_score=score if is_coding else None,
        completeness=score,
        clarity=None,
    )


def _category_performance(distribution: dict[str, Any]) -> dict[str, CategoryPerformance]:
    categories: dict[str, CategoryPerformance] = {}
    for name, value in distribution.items():
        if not isinstance(value, dict):
            logger.warning(f"Ignoring malformed scoreDistribution entry: {name}")
            continue
        try:
            categories[name] = CategoryPerformance.model_validate(value)
        except PydanticValidationError as e:
            logger.warning(f"Ignoring malformed scoreDistribution entry {name}: {e}")
    return categories


# ============================================================================
# WRITING
# ============================================================================

def to_document(
    feedback: SessionFeedback,
    legacy_entries: list[LegacyAnswerEntry] | None = None,
) -> dict[str, Any]:
    """
    Build the stored document for a feedback record.

    The v1 fields are written next to the v2 ones for older readers.
    """
    document = feedback.model_dump(by_alias=True, exclude={"feedback_version"})
    document["feedbackVersion"] = "v2"

    document["strengths"] = list(feedback.overall_strengths)
    document["improvements"] = list(feedback.overall_improvements)
    document["scoreDistribution"] = document["categoryPerformance"]
    document["detailedFeedback"] = [
        entry.model_dump(by_alias=True) for entry in (legacy_entries or [])
    ]
    return document
