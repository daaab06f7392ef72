"""
Interview API endpoints

Handles:
- Question generation (with optional resume upload)
- Saving raw session snapshots
- Resume analysis against a job description
"""

import logging
import time
from typing import Any

from fastapi import APIRouter, Depends, File, Form, UploadFile
from pydantic import BaseModel, Field

from mockprep.api.auth import get_optional_user
from mockprep.api.dependencies import get_ai_reasoning, get_feedback_store, get_resume_processor
from mockprep.core.ai_reasoning import AIReasoningLayer
from mockprep.core.exceptions import MockPrepError, PersistenceError, ValidationError
from mockprep.core.resume_processor import ResumeProcessor
from mockprep.models.base import CamelModel
from mockprep.models.question import Question
from mockprep.models.user import CurrentUser
from mockprep.prompts.interviewer import question_count_for_duration
from mockprep.storage.feedback_store import FeedbackStore

logger = logging.getLogger(__name__)

router = APIRouter()


# ============================================================================
# REQUEST/RESPONSE MODELS
# ============================================================================

class QuestionSetMetadata(CamelModel):
    """Echo of the generation parameters."""
    role: str
    company: str
    type: str
    difficulty: str
    duration: str
    include_coding: bool
    language: str
    total_questions: int
    coding_questions: int
    resume_processed: bool
    fallback_used: bool = False


class GenerateQuestionsResponse(CamelModel):
    questions: list[Question]
    metadata: QuestionSetMetadata


class SaveSessionRequest(CamelModel):
    """Raw session payload sent by the client at the end of an interview."""
    session_data: dict[str, Any] = Field(default_factory=dict)
    answers: list[dict[str, Any]] = Field(default_factory=list)


class SaveSessionResponse(CamelModel):
    success: bool
    message: str
    session_id: str


class ResumeAnalysisResponse(BaseModel):
    feedback: dict[str, Any]


# ============================================================================
# ENDPOINTS
# ============================================================================

@router.post("/generate-questions", response_model=GenerateQuestionsResponse)
async def generate_questions(
    role: str | None = Form(None),
    job_description: str | None = Form(None, alias="jobDescription"),
    company: str = Form("General Company"),
    difficulty: str = Form("medium"),
    type: str = Form("technical"),
    include_coding: str = Form("false", alias="includeCoding"),
    language: str = Form("javascript"),
    duration: str = Form("medium"),
    resume: UploadFile | None = File(None),
    ai_reasoning: AIReasoningLayer = Depends(get_ai_reasoning),
    resume_processor: ResumeProcessor = Depends(get_resume_processor),
) -> GenerateQuestionsResponse:
    """
    Generate an interview question set.

    The question count follows the duration (short 5, medium 10, long 15).
    Generation failures fall back to a fixed question set.
    """
    if not role or not job_description:
        raise ValidationError("Missing required fields: role and jobDescription are required")

    coding_requested = include_coding.strip().lower() == "true"

    try:
        resume_text = ""
        if resume is not None:
            resume_text = await resume_processor.process_upload(resume)

        question_count = question_count_for_duration(duration)
        questions, fallback_used = await ai_reasoning.generate_questions(
            role=role,
            job_description=job_description,
            question_count=question_count,
            company=company,
            resume_text=resume_text,
            type=type,
            difficulty=difficulty,
            duration=duration,
            include_coding=coding_requested,
            language=language,
        )

        return GenerateQuestionsResponse(
            questions=questions,
            metadata=QuestionSetMetadata(
                role=role,
                company=company,
                type=type,
                difficulty=difficulty,
                duration=duration,
                include_coding=coding_requested,
                language=language,
                total_questions=len(questions),
                coding_questions=sum(1 for q in questions if q.coding),
                resume_processed=resume is not None,
                fallback_used=fallback_used,
            ),
        )

    except MockPrepError:
        raise
    except Exception as e:
        logger.error(f"Generate questions failed: {e}")
        raise MockPrepError("Failed to generate questions", details=str(e)) from e


@router.post("/save-session", response_model=SaveSessionResponse)
async def save_session(
    request: SaveSessionRequest,
    user: CurrentUser | None = Depends(get_optional_user),
    store: FeedbackStore = Depends(get_feedback_store),
) -> SaveSessionResponse:
    """Store the client's session snapshot."""
    session_id = str(request.session_data.get("id") or f"session_{int(time.time() * 1000)}")

    try:
        await store.save_session_snapshot(
            session_id=session_id,
            user_id=user.id if user else None,
            session_data=request.session_data,
            answers=request.answers,
        )
    except PersistenceError as e:
        logger.error(f"Failed to persist session {session_id}: {e.details}")

    logger.info(
        f"Session saved: {session_id} "
        f"(questions: {len(request.session_data.get('questions') or [])}, answers: {len(request.answers)})"
    )

    return SaveSessionResponse(
        success=True,
        message="Interview session saved successfully",
        session_id=session_id,
    )


@router.post("/analyze-resume", response_model=ResumeAnalysisResponse)
async def analyze_resume(
    resume: UploadFile = File(...),
    job_description: str | None = Form(None, alias="jobDescription"),
    ai_reasoning: AIReasoningLayer = Depends(get_ai_reasoning),
    resume_processor: ResumeProcessor = Depends(get_resume_processor),
) -> ResumeAnalysisResponse:
    """Review a resume against a job description."""
    if not job_description:
        raise ValidationError("Job description is required")

    try:
        resume_text = await resume_processor.process_upload(resume)
        feedback = await ai_reasoning.analyze_resume(resume_text, job_description)
        return ResumeAnalysisResponse(feedback=feedback)
    except MockPrepError:
        raise
    except Exception as e:
        logger.error(f"Error analyzing resume: {e}")
        raise MockPrepError("Internal server error", details=str(e)) from e
