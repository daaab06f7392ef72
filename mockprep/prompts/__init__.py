"""
AI prompt templates for MockPrep

Contains structured prompts for:
- Question generation
- Answer evaluation
- Resume analysis
"""

from mockprep.prompts.interviewer import InterviewerPrompts
from mockprep.prompts.evaluator import EvaluatorPrompts
from mockprep.prompts.resume import ResumePrompts

__all__ = [
    "InterviewerPrompts",
    "EvaluatorPrompts",
    "ResumePrompts",
]
