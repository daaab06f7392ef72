"""
Core business logic modules for MockPrep

Contains:
- AI Reasoning: Question generation, answer evaluation, resume review
- Response Normalizer: Parsing and repairing model output
- Evaluation Engine: Per-answer scoring
- Report Generator: Session feedback compilation
- Analytics: Progress over a user's history
- Resume Processor: Text extraction from uploads
"""

from mockprep.core.ai_reasoning import AIReasoningLayer
from mockprep.core.evaluation_engine import EvaluationEngine
from mockprep.core.report_generator import ReportGenerator
from mockprep.core.resume_processor import ResumeProcessor

__all__ = [
    "AIReasoningLayer",
    "EvaluationEngine",
    "ReportGenerator",
    "ResumeProcessor",
]
