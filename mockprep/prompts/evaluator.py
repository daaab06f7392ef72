"""
AI Evaluator Prompt Templates

Contains the prompt for scoring a single answer (voice transcript or code)
against the scoring rubric.
"""

from typing import Any

from mockprep.models.question import Answer, Question


class EvaluatorPrompts:
    """
    Prompt templates for AI evaluation of answers.

    Key principles:
    - Objective, rubric-based scoring on a 0-100 scale
    - Identify both strengths and gaps
    - Provide actionable feedback
    """

    SYSTEM_CONTEXT = """You are an expert interviewer evaluating a candidate's answer in a mock interview.

Your role:
- Score the answer objectively against the rubric
- Identify what the candidate did well
- Note what was missing or incorrect
- Suggest concrete ways to improve

Be fair but thorough. A skipped question always scores 0.
"""

    SCORING_RUBRIC = """
=== SCORING RUBRIC (0-100 scale) ===
- 90-100: Outstanding. Complete, correct, well structured, covers edge cases
- 75-89: Strong. Mostly complete and correct with minor gaps
- 60-74: Adequate. Core idea present but lacks depth or examples
- 40-59: Weak. Significant gaps or errors
- 0-39: Poor. Incorrect, off-topic, or no meaningful answer

Sub-scores (each 0-100):
- communicationScore: how clearly the answer was articulated
- technicalScore: technical accuracy (code correctness for coding questions)
- completeness: how fully the question was addressed
- clarity: structure and readability of the answer or code
"""

    def generate_feedback_prompt(
        self,
        question: Question,
        answer: Answer,
        session_context: dict[str, Any] | None = None,
    ) -> str:
        """Generate prompt for evaluating one answer."""

        session_context = session_context or {}
        role = session_context.get("jobRole") or session_context.get("role") or "Not specified"
        company = session_context.get("company") or "General Company"
        language = session_context.get("language") or "javascript"

        if answer.skipped:
            answer_label = "CANDIDATE'S ANSWER"
            answer_body = "(question skipped)"
        elif question.coding:
            answer_label = f"CANDIDATE'S CODE ({language})"
            answer_body = answer.code or "(no code submitted)"
        else:
            answer_label = "CANDIDATE'S ANSWER (voice transcript)"
            answer_body = f'"{answer.transcript_text}"' if answer.transcript_text else "(no transcript available)"

        prompt = f"""{self.SYSTEM_CONTEXT}

{self.SCORING_RUBRIC}

=== CONTEXT ===
Role: {role}
Company: {company}
Question Type: {question.type}
Question Difficulty: {question.difficulty.value}
Coding Question: {"yes" if question.coding else "no"}

=== QUESTION ASKED ===
{question.text}

=== {answer_label} ===
{answer_body}

=== YOUR TASK ===
Evaluate the answer according to the rubric.

IMPORTANT: Output ONLY valid JSON, no preamble text. Start directly with {{

{{
    "score": <0-100>,
    "assessment": "two or three sentence overall assessment",
    "strengths": ["specific strength 1", "specific strength 2"],
    "improvements": ["specific gap 1", "specific gap 2"],
    "suggestions": ["actionable suggestion 1", "actionable suggestion 2"],
    "keywordsCovered": ["key concept mentioned"],
    "missedOpportunities": ["concept that should have been mentioned"],
    "communicationScore": <0-100>,
    "technicalScore": <0-100>,
    "completeness": <0-100>,
    "clarity": <0-100>
}}"""

        return prompt
