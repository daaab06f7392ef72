"""
Evaluation Engine for MockPrep

Scores each submitted answer against its question, one model call per
answer. Works in conjunction with the AI Reasoning Layer; failures of a
single answer are replaced by fallback feedback and never abort the batch.
"""

import asyncio
import logging
from typing import Any

from mockprep.core.response_normalizer import fallback_feedback
from mockprep.models.feedback import (
    AnswerFeedback,
    LegacyAnswerEntry,
    QuestionFeedback,
    ScoredAnswer,
)
from mockprep.models.question import Answer, Question

logger = logging.getLogger(__name__)

SKIPPED_ANSWER = "Question was skipped"
NO_TRANSCRIPT = "No transcript available"
NO_CODE = "No code submitted"


class EvaluationEngine:
    """
    Per-answer scoring component.

    Responsibilities:
    - Match answers to their questions
    - Call the model for each answer, strictly one at a time
    - Build the v2 per-question entry and its v1 twin
    """

    def __init__(self, ai_reasoning: Any, delay_seconds: float = 1.0):
        """
        Initialize evaluation engine.

        Args:
            ai_reasoning: AI reasoning layer used for scoring
            delay_seconds: Pause between consecutive model calls
        """
        self.ai_reasoning = ai_reasoning
        self.delay_seconds = delay_seconds

    # =========================================================================
    # BATCH SCORING
    # =========================================================================

    async def score_answers(
        self,
        answers: list[Answer],
        questions: list[Question],
        session_context: dict[str, Any] | None = None,
    ) -> list[ScoredAnswer]:
        """
        Score answers in submission order.

        Answers whose question id is unknown are logged and skipped.
        """
        questions_by_id = {q.id: q for q in questions}
        results: list[ScoredAnswer] = []

        for index, answer in enumerate(answers):
            question = questions_by_id.get(answer.question_id)
            if question is None:
                logger.warning(f"Question not found for answer ID: {answer.question_id}")
                continue

            # Pace consecutive model calls
            if results and self.delay_seconds > 0:
                await asyncio.sleep(self.delay_seconds)

            logger.info(f"Generating feedback for question {index + 1}/{len(answers)}")
            feedback = await self._evaluate(question, answer, session_context)
            results.append(self.build_scored_answer(question, answer, feedback))

        return results

    async def _evaluate(
        self,
        question: Question,
        answer: Answer,
        session_context: dict[str, Any] | None,
    ) -> AnswerFeedback:
        try:
            return await self.ai_reasoning.evaluate_answer(
                question=question,
                answer=answer,
                session_context=session_context,
            )
        except Exception as e:
            logger.error(f"Error generating feedback for question {question.id}: {e}")
            return fallback_feedback(question, answer)

    # =========================================================================
    # ENTRY CONSTRUCTION
    # =========================================================================

    def build_scored_answer(
        self,
        question: Question,
        answer: Answer,
        feedback: AnswerFeedback,
    ) -> ScoredAnswer:
        """Combine a question, its answer and the model feedback."""
        is_coding = question.coding
        transcript_text = answer.transcript_text
        score = 0 if answer.skipped else feedback.score

        entry = QuestionFeedback(
            question_id=question.id,
            question_text=question.text,
            question_type=question.type,
            difficulty=question.difficulty.value,
            coding=is_coding,
            score=score,
            was_answered=not answer.skipped,
            has_transcript=not is_coding and bool(transcript_text),
            transcription=None if is_coding else answer.transcription,
            transcript_word_count=0 if is_coding else len(transcript_text.split()),
            has_code=is_coding and bool(answer.code),
            code=(answer.code or None) if is_coding else None,
            code_length=len(answer.code) if is_coding and answer.code else 0,
            detailed_feedback=feedback.assessment,
            strengths=feedback.strengths,
            improvements=feedback.improvements,
            suggestions=feedback.suggestions,
            keywords_covered=feedback.keywords_covered,
            missed_opportunities=feedback.missed_opportunities,
            communication_score=(
                feedback.communication_score if feedback.communication_score is not None else score
            ),
            technical_score=feedback.technical_score,
            completeness=feedback.completeness if feedback.completeness is not None else score,
            clarity=feedback.clarity,
        )

        legacy = LegacyAnswerEntry(
            question_id=question.id,
            question_text=question.text,
            user_answer=self._user_answer(question, answer),
            score=score,
            feedback=feedback.assessment,
            strengths=feedback.strengths,
            improvements=feedback.improvements,
        )

        return ScoredAnswer(feedback=entry, legacy=legacy)

    def _user_answer(self, question: Question, answer: Answer) -> str:
        """Flat answer text stored on the v1 entry."""
        if answer.skipped:
            return SKIPPED_ANSWER
        if question.coding:
            return answer.code or NO_CODE
        return answer.transcript_text or NO_TRANSCRIPT
