"""
Feedback API endpoints

Handles:
- Feedback generation for a finished interview
- Feedback retrieval by session
- Paginated feedback history per user
- Progress analytics per user
"""

import logging
import math
import time
from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends, Query
from pydantic import Field

from mockprep.api.auth import ensure_owner_or_admin, get_current_user
from mockprep.api.dependencies import get_evaluation_engine, get_feedback_store, get_report_generator
from mockprep.core.analytics import compute_user_analytics
from mockprep.core.evaluation_engine import EvaluationEngine
from mockprep.core.exceptions import (
    AuthorizationError,
    MockPrepError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from mockprep.core.report_generator import ReportGenerator
from mockprep.models.analytics import UserAnalytics
from mockprep.models.base import CamelModel
from mockprep.models.feedback import CategoryPerformance, QuestionFeedback, SessionFeedback
from mockprep.models.question import Answer, Question
from mockprep.models.user import CurrentUser
from mockprep.storage.compat import load_feedback
from mockprep.storage.feedback_store import FeedbackStore

logger = logging.getLogger(__name__)

router = APIRouter()


# ============================================================================
# REQUEST/RESPONSE MODELS
# ============================================================================

class GenerateFeedbackRequest(CamelModel):
    """Answers of a finished interview."""
    session_data: dict[str, Any] | None = None
    answers: list[Answer] = Field(default_factory=list)
    questions: list[Question] = Field(default_factory=list)
    metadata: dict[str, Any] | None = None


class GenerateFeedbackResponse(CamelModel):
    success: bool = True
    feedback: SessionFeedback


class FeedbackOwner(CamelModel):
    id: str
    name: str = ""
    email: str = ""


class SessionFeedbackView(SessionFeedback):
    """Stored feedback as returned to clients."""
    id: str
    score_distribution: dict[str, CategoryPerformance] = Field(default_factory=dict)
    user: FeedbackOwner | None = None


class SessionFeedbackResponse(CamelModel):
    success: bool = True
    feedback: SessionFeedbackView


class FeedbackSummary(CamelModel):
    """One row of a user's feedback history."""
    id: str
    session_id: str
    overall_score: int
    overall_grade: str | None
    completion_rate: int
    generated_at: datetime | None
    questions_answered: int
    total_questions: int
    job_role: str
    company: str
    interview_type: str
    difficulty: str
    language: str
    strengths: list[str]
    improvements: list[str]
    recommendations: list[str]
    question_feedbacks: list[QuestionFeedback]


class Pagination(CamelModel):
    current_page: int
    total_pages: int
    total_count: int
    has_next: bool
    has_prev: bool


class FeedbackHistoryResponse(CamelModel):
    success: bool = True
    message: str | None = None
    feedback: list[FeedbackSummary]
    pagination: Pagination


class AnalyticsResponse(CamelModel):
    success: bool = True
    analytics: UserAnalytics


# ============================================================================
# FEEDBACK GENERATION
# ============================================================================

@router.post("/generate-feedback", response_model=GenerateFeedbackResponse)
async def generate_feedback(
    request: GenerateFeedbackRequest,
    user: CurrentUser = Depends(get_current_user),
    store: FeedbackStore = Depends(get_feedback_store),
    engine: EvaluationEngine = Depends(get_evaluation_engine),
    report_generator: ReportGenerator = Depends(get_report_generator),
) -> GenerateFeedbackResponse:
    """
    Score every answer and build the session report.

    Answers are scored one at a time. Upstream failures are absorbed per
    answer, and storage failures are logged without failing the request.
    """
    if not request.answers or not request.questions:
        raise ValidationError("Missing required fields: answers and questions are required")

    session_data = request.session_data or {}
    metadata = request.metadata or {}
    session_id = str(session_data.get("id") or f"session_{int(time.time() * 1000)}_{user.id}")

    logger.info(
        f"Generating feedback for session {session_id}: "
        f"{len(request.answers)} answers, {len(request.questions)} questions"
    )

    try:
        await _claim_session(store, session_id, user, metadata)
        await store.save_questions(request.questions)

        scored = await engine.score_answers(
            request.answers,
            request.questions,
            session_context={**session_data, **metadata},
        )
        feedback = report_generator.generate(
            scored,
            request.questions,
            session_id=session_id,
            user_id=user.id,
            metadata=metadata,
        )
    except MockPrepError:
        raise
    except Exception as e:
        logger.error(f"Generate feedback failed for session {session_id}: {e}")
        raise MockPrepError("Failed to generate feedback", details=str(e)) from e

    try:
        await store.save_feedback(feedback, [s.legacy for s in scored])
    except PersistenceError as e:
        logger.error(f"Database save error for session {session_id}: {e.details}")

    return GenerateFeedbackResponse(feedback=feedback)


async def _claim_session(
    store: FeedbackStore,
    session_id: str,
    user: CurrentUser,
    metadata: dict[str, Any],
) -> None:
    """Create the session for ``user`` or verify they already own it."""
    session = await store.get_session(session_id)
    if session is None:
        try:
            await store.create_session(
                session_id=session_id,
                user_id=user.id,
                job_role=metadata.get("jobRole") or metadata.get("role") or "Not specified",
                metadata=metadata,
            )
        except PersistenceError as e:
            logger.error(f"Could not create session {session_id}: {e.details}")
        return

    owner = session.get("userId")
    if owner is not None and str(owner) != user.id:
        raise AuthorizationError("Unauthorized access to session")


# ============================================================================
# FEEDBACK RETRIEVAL
# ============================================================================

@router.get("/feedback/session/{session_id}", response_model=SessionFeedbackResponse)
async def get_feedback_by_session(
    session_id: str,
    user: CurrentUser = Depends(get_current_user),
    store: FeedbackStore = Depends(get_feedback_store),
) -> SessionFeedbackResponse:
    """Get the stored feedback of one session (owner or admin only)."""
    document = await store.get_feedback_by_session(session_id)
    if document is None:
        raise NotFoundError("Feedback not found for this session", details={"sessionId": session_id})

    ensure_owner_or_admin(user, document.get("userId"), "Unauthorized access to this feedback")

    try:
        feedback = load_feedback(document)
        owner = await _feedback_owner(store, feedback.user_id)

        view = SessionFeedbackView(
            **feedback.model_dump(),
            id=str(document.get("_id", "")),
            score_distribution=feedback.category_performance,
            user=owner,
        )
        view.interview_metadata = {
            "jobRole": feedback.role,
            "company": feedback.company,
            "interviewType": feedback.interview_type,
            "difficulty": feedback.difficulty,
            "language": feedback.language,
            **feedback.interview_metadata,
        }
        return SessionFeedbackResponse(feedback=view)

    except MockPrepError:
        raise
    except Exception as e:
        logger.error(f"Error retrieving feedback by session ID: {e}")
        raise MockPrepError("Failed to retrieve feedback", details=str(e)) from e


async def _feedback_owner(store: FeedbackStore, user_id: str | None) -> FeedbackOwner | None:
    if not user_id:
        return None
    document = await store.get_user(user_id)
    if document is None:
        return FeedbackOwner(id=user_id)
    owner = CurrentUser.model_validate(document)
    return FeedbackOwner(id=owner.id, name=owner.display_name, email=owner.email)


@router.get("/feedback/user/{user_id}", response_model=FeedbackHistoryResponse)
async def get_feedback_by_user(
    user_id: str,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    user: CurrentUser = Depends(get_current_user),
    store: FeedbackStore = Depends(get_feedback_store),
) -> FeedbackHistoryResponse:
    """Get a page of a user's feedback, newest first."""
    ensure_owner_or_admin(user, user_id, "Unauthorized access to user feedback")

    try:
        documents = await store.list_feedback_for_user(user_id, page=page, limit=limit)
        total_count = await store.count_feedback_for_user(user_id)

        summaries = [_summarize(document) for document in documents]
        return FeedbackHistoryResponse(
            message=None if summaries else "No feedback found for this user",
            feedback=summaries,
            pagination=Pagination(
                current_page=page,
                total_pages=math.ceil(total_count / limit),
                total_count=total_count,
                has_next=page * limit < total_count,
                has_prev=page > 1,
            ),
        )

    except MockPrepError:
        raise
    except Exception as e:
        logger.error(f"Error retrieving feedback by user ID: {e}")
        raise MockPrepError("Failed to retrieve feedback", details=str(e)) from e


def _summarize(document: dict[str, Any]) -> FeedbackSummary:
    feedback = load_feedback(document)
    return FeedbackSummary(
        id=str(document.get("_id", "")),
        session_id=feedback.session_id,
        overall_score=feedback.overall_score,
        overall_grade=feedback.overall_grade,
        completion_rate=feedback.completion_rate,
        generated_at=feedback.generated_at,
        questions_answered=feedback.answered_questions,
        total_questions=feedback.total_questions,
        job_role=feedback.role,
        company=feedback.company,
        interview_type=feedback.interview_type,
        difficulty=feedback.difficulty,
        language=feedback.language,
        strengths=feedback.overall_strengths,
        improvements=feedback.overall_improvements,
        recommendations=feedback.recommendations,
        question_feedbacks=feedback.question_feedbacks,
    )


@router.get("/feedback/user/{user_id}/analytics", response_model=AnalyticsResponse)
async def get_user_analytics(
    user_id: str,
    user: CurrentUser = Depends(get_current_user),
    store: FeedbackStore = Depends(get_feedback_store),
) -> AnalyticsResponse:
    """Progress analytics over a user's whole history."""
    ensure_owner_or_admin(user, user_id, "Unauthorized access to analytics")

    try:
        documents = await store.feedback_history(user_id)
        analytics = compute_user_analytics([load_feedback(d, fill_grade=False) for d in documents])
        return AnalyticsResponse(analytics=analytics)

    except MockPrepError:
        raise
    except Exception as e:
        logger.error(f"Error generating analytics: {e}")
        raise MockPrepError("Failed to generate analytics", details=str(e)) from e
