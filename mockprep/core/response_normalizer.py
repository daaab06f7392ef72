"""
Response Normalizer for MockPrep

Turns raw model text into usable objects. Model output is expected to be
JSON, possibly wrapped in markdown fences; anything unusable is replaced by
deterministic rule-based fallbacks. Nothing in this module raises.
"""

import json
import logging
import re
from typing import Any

from mockprep.core.scoring import clamp_score, coerce_score
from mockprep.models.feedback import AnswerFeedback
from mockprep.models.question import Answer, Question, QuestionDifficulty

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"\n?```(?:json)?\n?", re.IGNORECASE)

DEFAULT_SCORE = 60
DEFAULT_ASSESSMENT = "Assessment not available"

# Maximum list lengths kept from model feedback
LIST_LIMITS = {
    "strengths": 5,
    "improvements": 5,
    "suggestions": 5,
    "keywordsCovered": 8,
    "missedOpportunities": 5,
}

SUB_SCORES = {
    "communicationScore": "communication_score",
    "technicalScore": "technical_score",
    "completeness": "completeness",
    "clarity": "clarity",
}


def strip_code_fences(text: str) -> str:
    """Remove ```json / ``` fences and surrounding whitespace."""
    return _FENCE_RE.sub("", text or "").strip()


def parse_model_json(text: str) -> Any | None:
    """
    Parse JSON from model output.

    Tries the fence-stripped text first, then the outermost object/array
    slice. Returns None when nothing parses.
    """
    cleaned = strip_code_fences(text)
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError:
        pass

    for opener, closer in (("{", "}"), ("[", "]")):
        start = cleaned.find(opener)
        end = cleaned.rfind(closer) + 1
        if start >= 0 and end > start:
            try:
                return json.loads(cleaned[start:end])
            except json.JSONDecodeError:
                continue
    return None


def _response_type(question: Question, answer: Answer) -> str:
    if answer.skipped:
        return "skipped"
    return "code" if question.coding else "audio"


def _string_list(value: Any, limit: int) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if item is not None][:limit]


# ============================================================================
# ANSWER FEEDBACK
# ============================================================================

def normalize_feedback(raw_text: str, question: Question, answer: Answer) -> AnswerFeedback:
    """Parse and validate model feedback, falling back on any failure."""
    data = parse_model_json(raw_text)
    if not isinstance(data, dict):
        logger.warning(
            f"Unparseable feedback for question {question.id}, using fallback "
            f"(response length: {len(raw_text or '')})"
        )
        return fallback_feedback(question, answer)
    return validate_feedback(data, question, answer)


def validate_feedback(data: dict[str, Any], question: Question, answer: Answer) -> AnswerFeedback:
    """Backfill missing fields, clamp scores and truncate lists."""
    score = coerce_score(data.get("score"))
    assessment = data.get("assessment")

    sub_scores = {
        field: coerce_score(data.get(key))
        for key, field in SUB_SCORES.items()
    }

    return AnswerFeedback(
        score=DEFAULT_SCORE if score is None else score,
        assessment=str(assessment) if assessment else DEFAULT_ASSESSMENT,
        strengths=_string_list(data.get("strengths"), LIST_LIMITS["strengths"]),
        improvements=_string_list(data.get("improvements"), LIST_LIMITS["improvements"]),
        suggestions=_string_list(data.get("suggestions"), LIST_LIMITS["suggestions"]),
        keywords_covered=_string_list(data.get("keywordsCovered"), LIST_LIMITS["keywordsCovered"]),
        missed_opportunities=_string_list(
            data.get("missedOpportunities"), LIST_LIMITS["missedOpportunities"]
        ),
        response_type=_response_type(question, answer),
        answered=not answer.skipped,
        is_fallback=False,
        **sub_scores,
    )


def fallback_feedback(question: Question, answer: Answer) -> AnswerFeedback:
    """
    Deterministic rule-based feedback used when the model output is unusable.

    Base score is 0 for skipped answers, 50 for code and 55 for voice,
    adjusted by +10 for easy and -10 for hard questions.
    """
    skipped = answer.skipped
    coding = question.coding
    difficulty = question.difficulty
    qtype = question.type

    base_score = 0 if skipped else (50 if coding else 55)
    if difficulty == QuestionDifficulty.EASY:
        base_score += 10
    elif difficulty == QuestionDifficulty.HARD:
        base_score -= 10

    if skipped:
        assessment = (
            "Question was not attempted. This indicates a gap in knowledge "
            "or time management."
        )
        strengths: list[str] = []
        improvements = [f"Study {qtype} concepts", "Practice time management", "Build confidence in this area"]
        suggestions = [
            f"Review {difficulty.value} level {qtype} questions",
            "Practice similar problems",
            "Allocate time better",
        ]
        keywords: list[str] = []
        missed = ["Complete understanding of the topic", "Demonstration of problem-solving skills"]
    elif coding:
        assessment = (
            "Code submission detected but detailed analysis unavailable. "
            "Basic problem-solving approach assumed."
        )
        strengths = ["Attempted the coding challenge", "Code structure shows basic understanding"]
        improvements = ["Code optimization", "Edge case handling", "Algorithm efficiency"]
        suggestions = ["Practice coding problems daily", "Review algorithm fundamentals", "Write cleaner code"]
        keywords = [qtype, f"{difficulty.value} level"]
        missed = ["Code comments", "Time complexity analysis", "Alternative solutions"]
    else:
        assessment = (
            "Audio response recorded but detailed analysis unavailable. "
            "Communication attempt noted."
        )
        strengths = ["Provided a response", "Communication attempt demonstrates engagement"]
        improvements = ["Technical depth", "Specific examples", "Structured responses"]
        suggestions = ["Use the STAR method", "Provide concrete examples", "Practice technical explanations"]
        keywords = [qtype, f"{difficulty.value} level"]
        missed = ["Technical details", "Real-world applications", "Follow-up questions"]

    return AnswerFeedback(
        score=clamp_score(base_score),
        assessment=assessment,
        strengths=strengths,
        improvements=improvements,
        suggestions=suggestions,
        keywords_covered=keywords,
        missed_opportunities=missed,
        response_type=_response_type(question, answer),
        answered=not skipped,
        is_fallback=True,
    )


# ============================================================================
# GENERATED QUESTIONS
# ============================================================================

def normalize_questions(
    raw_text: str,
    role: str,
    company: str,
    type: str,
    difficulty: str,
    include_coding: bool,
    language: str,
    question_count: int,
) -> tuple[list[Question], bool]:
    """
    Parse generated questions.

    Returns the questions and whether the fallback set was used.
    """
    data = parse_model_json(raw_text)
    if isinstance(data, dict) and isinstance(data.get("questions"), list):
        data = data["questions"]

    if not isinstance(data, list):
        logger.warning("Question generation returned no JSON array, using fallback questions")
        return fallback_questions(
            role=role,
            company=company,
            difficulty=difficulty,
            include_coding=include_coding,
            language=language,
            question_count=question_count,
        ), True

    return validate_questions(
        data,
        type=type,
        difficulty=difficulty,
        include_coding=include_coding,
        question_count=question_count,
    ), False


def validate_questions(
    items: list[Any],
    type: str,
    difficulty: str,
    include_coding: bool,
    question_count: int,
) -> list[Question]:
    """Backfill question fields and pad or truncate to ``question_count``."""
    questions: list[Question] = []

    for index, item in enumerate(items[:question_count]):
        if isinstance(item, str):
            item = {"text": item}
        elif not isinstance(item, dict):
            item = {}

        coding = bool(item.get("coding")) if include_coding else False
        questions.append(Question(
            id=str(item.get("id") or index + 1),
            text=item.get("text") or item.get("question") or f"Generated question {index + 1}",
            type=item.get("type") or type,
            difficulty=QuestionDifficulty.parse(
                item.get("difficulty") or difficulty,
                default=QuestionDifficulty.parse(difficulty),
            ),
            coding=coding,
            expected_duration=_as_duration(item.get("expectedDuration")) or (900 if coding else 180),
        ))

    while len(questions) < question_count:
        questions.append(Question(
            id=str(len(questions) + 1),
            text=f"What experience do you have with {type.lower()} responsibilities?",
            type=type,
            difficulty=QuestionDifficulty.parse(difficulty),
            coding=False,
            expected_duration=180,
        ))

    return questions


def _as_duration(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    try:
        duration = int(value)
    except (TypeError, ValueError):
        return None
    return duration if duration > 0 else None


def fallback_questions(
    role: str,
    company: str,
    difficulty: str,
    include_coding: bool,
    language: str,
    question_count: int,
) -> list[Question]:
    """Fixed question set used when generation fails."""
    base_questions: list[tuple[str, str, bool]] = [
        (f"Tell me about your experience as a {role}.", "behavioral", False),
        (f"What interests you about working at {company}?", "behavioral", False),
        ("Describe a challenging project you've worked on.", "behavioral", False),
        ("How do you stay updated with industry trends?", "technical", False),
        ("Where do you see yourself in 5 years?", "hr", False),
    ]

    lowered = role.lower()
    if "frontend" in lowered or "react" in lowered:
        base_questions.extend([
            ("What are the key differences between React class components and functional components?", "technical", False),
            ("How do you optimize React application performance?", "technical", False),
            ("Explain the virtual DOM and how React uses it.", "technical", False),
        ])

    if include_coding:
        base_questions.extend([
            (f"Write a function to reverse a string in {language}.", "technical", True),
            ("Implement a function to check if a string is a palindrome.", "technical", True),
        ])

    level = QuestionDifficulty.parse(difficulty)
    return [
        Question(
            id=str(index + 1),
            text=text,
            type=qtype,
            difficulty=level,
            coding=coding,
            expected_duration=900 if coding else 180,
        )
        for index, (text, qtype, coding) in enumerate(base_questions[:question_count])
    ]
