"""
AI Reasoning Layer for MockPrep

Handles all model-backed operations:
- Interview question generation
- Per-answer evaluation
- Resume analysis

Talks to the Gemini generateContent REST API over a shared httpx client.
Integrated with Langfuse for optional observability and tracing.
"""

import logging
from typing import Any

import httpx
from langfuse import Langfuse

from mockprep.config.settings import get_settings
from mockprep.core.exceptions import UpstreamGenerationError
from mockprep.core.response_normalizer import (
    fallback_feedback,
    fallback_questions,
    normalize_feedback,
    normalize_questions,
    parse_model_json,
)
from mockprep.models.feedback import AnswerFeedback
from mockprep.models.question import Answer, Question
from mockprep.prompts.evaluator import EvaluatorPrompts
from mockprep.prompts.interviewer import InterviewerPrompts
from mockprep.prompts.resume import ResumePrompts

logger = logging.getLogger(__name__)


class AIReasoningLayer:
    """
    Central AI component using Gemini via its REST API.

    Every public operation either returns usable data or a deterministic
    fallback; upstream failures never escape except from ``_call_gemini``.

    Observability:
    - Langfuse integration for tracing question generation and scoring
    """

    def __init__(self):
        """Initialize the Gemini HTTP client from settings."""
        self.settings = get_settings()
        self.model = self.settings.gemini_model

        self.client = httpx.AsyncClient(
            base_url=self.settings.gemini_base_url.rstrip("/"),
            headers={
                "x-goog-api-key": self.settings.gemini_api_key,
                "Content-Type": "application/json",
            },
            timeout=self.settings.gemini_timeout_seconds,
        )

        # Prompt templates
        self.interviewer_prompts = InterviewerPrompts()
        self.evaluator_prompts = EvaluatorPrompts()
        self.resume_prompts = ResumePrompts()

        self.langfuse = None
        if self.settings.langfuse_enabled:
            if self.settings.langfuse_secret_key and self.settings.langfuse_public_key:
                try:
                    self.langfuse = Langfuse(
                        secret_key=self.settings.langfuse_secret_key,
                        public_key=self.settings.langfuse_public_key,
                        host=self.settings.langfuse_base_url,
                    )
                    logger.info("Langfuse initialized for LLM observability")
                except Exception as e:
                    logger.warning(f"Failed to initialize Langfuse: {e}")
            else:
                logger.info("Langfuse keys not configured, tracing disabled")

    async def close(self):
        """Close the HTTP client and flush Langfuse."""
        await self.client.aclose()
        if self.langfuse:
            try:
                self.langfuse.flush()
            except Exception as e:
                logger.warning(f"Failed to flush Langfuse: {e}")

    # =========================================================================
    # CORE MODEL CALL
    # =========================================================================

    def _extract_content(self, result: dict) -> str:
        """Join the text parts of the first candidate."""
        candidates = result.get("candidates") or []
        if not candidates:
            return ""

        parts = (candidates[0].get("content") or {}).get("parts") or []
        text_parts = []
        for part in parts:
            if isinstance(part, str):
                text_parts.append(part)
            elif isinstance(part, dict) and isinstance(part.get("text"), str):
                text_parts.append(part["text"])
        return "".join(text_parts)

    async def _call_gemini(
        self,
        prompt: str,
        max_tokens: int = 2048,
        trace_name: str = "gemini_call",
    ) -> str:
        """
        Send a prompt to Gemini and return the response text.

        Args:
            prompt: The prompt to send
            max_tokens: Maximum tokens in response
            trace_name: Label used in log messages

        Returns:
            Model response text

        Raises:
            UpstreamGenerationError: on transport errors, non-2xx responses
                or a response without candidate text
        """
        payload = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": self.settings.gemini_temperature,
                "maxOutputTokens": max_tokens,
            },
        }

        try:
            response = await self.client.post(
                f"/v1beta/models/{self.model}:generateContent",
                json=payload,
            )
            response.raise_for_status()
            result = response.json()
        except httpx.HTTPError as e:
            logger.error(f"Gemini API error ({trace_name}): {e}")
            raise UpstreamGenerationError("Model request failed", details=str(e)) from e
        except ValueError as e:
            logger.error(f"Gemini returned a non-JSON body ({trace_name}): {e}")
            raise UpstreamGenerationError("Model returned an invalid response", details=str(e)) from e

        content = self._extract_content(result) if isinstance(result, dict) else ""
        if not content:
            logger.error(f"Gemini returned no candidate text ({trace_name})")
            raise UpstreamGenerationError("Model returned no content")
        return content

    # =========================================================================
    # QUESTION GENERATION
    # =========================================================================

    async def generate_questions(
        self,
        role: str,
        job_description: str,
        question_count: int,
        company: str | None = None,
        resume_text: str | None = None,
        type: str = "technical",
        difficulty: str = "medium",
        duration: str = "medium",
        include_coding: bool = False,
        language: str = "javascript",
    ) -> tuple[list[Question], bool]:
        """
        Generate a question set for an interview.

        Returns:
            The questions and whether the fallback set was used
        """
        span = None
        if self.langfuse:
            try:
                span = self.langfuse.start_span(
                    name="generate_questions",
                    metadata={
                        "role": role,
                        "type": type,
                        "difficulty": difficulty,
                        "question_count": question_count,
                        "include_coding": include_coding,
                    },
                )
            except Exception as lf_err:
                logger.warning(f"Langfuse span start failed: {lf_err}")
                span = None

        prompt = self.interviewer_prompts.generate_questions_prompt(
            role=role,
            job_description=job_description,
            question_count=question_count,
            company=company,
            resume_text=resume_text,
            type=type,
            difficulty=difficulty,
            duration=duration,
            include_coding=include_coding,
            language=language,
            max_resume_chars=self.settings.max_resume_chars,
        )

        try:
            response = await self._call_gemini(
                prompt,
                max_tokens=4096,
                trace_name="question_generation",
            )
            questions, fallback_used = normalize_questions(
                response,
                role=role,
                company=company or "General Company",
                type=type,
                difficulty=difficulty,
                include_coding=include_coding,
                language=language,
                question_count=question_count,
            )
        except UpstreamGenerationError as e:
            logger.warning(f"Using fallback questions due to generation failure: {e.message}")
            questions = fallback_questions(
                role=role,
                company=company or "General Company",
                difficulty=difficulty,
                include_coding=include_coding,
                language=language,
                question_count=question_count,
            )
            fallback_used = True

        logger.info(
            f"Generated {len(questions)} questions for {role} "
            f"(coding: {sum(1 for q in questions if q.coding)}, fallback: {fallback_used})"
        )

        if span:
            try:
                span.update(output={
                    "question_count": len(questions),
                    "fallback_used": fallback_used,
                })
                span.end()
            except Exception as lf_err:
                logger.warning(f"Langfuse span end failed: {lf_err}")

        return questions, fallback_used

    # =========================================================================
    # ANSWER EVALUATION
    # =========================================================================

    async def evaluate_answer(
        self,
        question: Question,
        answer: Answer,
        session_context: dict[str, Any] | None = None,
    ) -> AnswerFeedback:
        """
        Score a single answer.

        Call failures and unusable output are absorbed into fallback
        feedback, so this never raises for upstream problems.
        """
        prompt = self.evaluator_prompts.generate_feedback_prompt(
            question=question,
            answer=answer,
            session_context=session_context,
        )

        try:
            response = await self._call_gemini(
                prompt,
                max_tokens=1024,
                trace_name="answer_evaluation",
            )
        except UpstreamGenerationError as e:
            logger.warning(f"Evaluation failed for question {question.id}, using fallback: {e.message}")
            return fallback_feedback(question, answer)

        feedback = normalize_feedback(response, question, answer)
        logger.info(
            f"Evaluated question {question.id}: score={feedback.score}, "
            f"fallback={feedback.is_fallback}"
        )

        if self.langfuse:
            try:
                self.langfuse.create_score(
                    name="answer_score",
                    value=feedback.score,
                    comment=f"Question: {question.id}, type: {question.type}",
                )
            except Exception as lf_err:
                logger.warning(f"Langfuse score failed: {lf_err}")

        return feedback

    # =========================================================================
    # RESUME ANALYSIS
    # =========================================================================

    async def analyze_resume(self, resume_text: str, job_description: str) -> dict[str, Any]:
        """
        Run an ATS-style review of a resume.

        Returns the parsed JSON object, ``{"raw": text}`` when the output is
        not JSON, or ``{"error": message}`` when the call fails.
        """
        prompt = self.resume_prompts.generate_analysis_prompt(resume_text, job_description)

        try:
            response = await self._call_gemini(
                prompt,
                max_tokens=2048,
                trace_name="resume_analysis",
            )
        except UpstreamGenerationError as e:
            logger.warning(f"Resume analysis failed: {e.message}")
            return {"error": e.message}

        data = parse_model_json(response)
        if not isinstance(data, dict):
            logger.warning("Resume analysis returned non-JSON output")
            return {"raw": response}
        return data
