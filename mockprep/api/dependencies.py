"""
API Dependencies

Provides dependency injection for API endpoints.
Manages singleton instances of core components.
"""

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from mockprep.config.settings import get_settings
from mockprep.core.ai_reasoning import AIReasoningLayer
from mockprep.core.evaluation_engine import EvaluationEngine
from mockprep.core.exceptions import ConfigurationError
from mockprep.core.report_generator import ReportGenerator
from mockprep.core.resume_processor import ResumeProcessor
from mockprep.storage.feedback_store import FeedbackStore


# ============================================================================
# SINGLETON INSTANCES
# ============================================================================

_ai_reasoning: AIReasoningLayer | None = None
_mongo_client: AsyncIOMotorClient | None = None
_resume_processor: ResumeProcessor | None = None


def get_ai_reasoning() -> AIReasoningLayer:
    """
    Get the AI reasoning layer singleton.

    Raises ConfigurationError while no Gemini key is configured.
    """
    global _ai_reasoning

    if _ai_reasoning is None:
        if not get_settings().gemini_configured:
            raise ConfigurationError(
                "Gemini API key not configured. Please add GEMINI_API_KEY to your .env file"
            )
        _ai_reasoning = AIReasoningLayer()

    return _ai_reasoning


def get_database() -> AsyncIOMotorDatabase:
    """Get the MongoDB database handle, connecting lazily."""
    global _mongo_client

    settings = get_settings()
    if _mongo_client is None:
        _mongo_client = AsyncIOMotorClient(settings.mongodb_uri)

    return _mongo_client[settings.mongodb_database]


def get_feedback_store() -> FeedbackStore:
    return FeedbackStore(get_database())


def get_resume_processor() -> ResumeProcessor:
    """Get the resume processor singleton."""
    global _resume_processor

    if _resume_processor is None:
        _resume_processor = ResumeProcessor()

    return _resume_processor


def get_evaluation_engine() -> EvaluationEngine:
    """Per-request evaluation engine bound to the shared AI layer."""
    return EvaluationEngine(
        get_ai_reasoning(),
        delay_seconds=get_settings().feedback_call_delay_seconds,
    )


def get_report_generator() -> ReportGenerator:
    return ReportGenerator()


async def cleanup():
    """Cleanup resources on shutdown."""
    global _ai_reasoning, _mongo_client, _resume_processor

    if _ai_reasoning:
        await _ai_reasoning.close()
        _ai_reasoning = None

    if _mongo_client:
        _mongo_client.close()
        _mongo_client = None

    _resume_processor = None
