"""
Question and answer models for MockPrep
"""

from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import AliasChoices, BeforeValidator, Field, field_validator

from mockprep.models.base import CamelModel


class QuestionDifficulty(str, Enum):
    """Question difficulty levels."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @classmethod
    def parse(cls, value: Any, default: "QuestionDifficulty | None" = None) -> "QuestionDifficulty":
        """Map loose model/client input onto a difficulty, defaulting to medium."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return default or cls.MEDIUM


class Question(CamelModel):
    """A single interview question."""

    id: str = Field(..., description="Question ID (numeric ids are coerced to strings)")
    text: str = Field(default="", description="The question text")
    type: str = Field(default="general", description="Free-form question category")
    difficulty: QuestionDifficulty = Field(default=QuestionDifficulty.MEDIUM)
    coding: bool = Field(default=False, description="Answered with code instead of voice")
    expected_duration: int | None = Field(
        default=None,
        description="Expected answer time in seconds"
    )

    @field_validator("difficulty", mode="before")
    @classmethod
    def _loose_difficulty(cls, value: Any) -> QuestionDifficulty:
        return QuestionDifficulty.parse(value)

    @field_validator("type", mode="before")
    @classmethod
    def _default_type(cls, value: Any) -> str:
        return str(value) if value else "general"


# ============================================================================
# TRANSCRIPTS
# ============================================================================

class RawTranscript(CamelModel):
    """Transcript delivered as an opaque string."""

    kind: Literal["raw"] = "raw"
    text: str = ""
    confidence: None = None


class StructuredTranscript(CamelModel):
    """Transcript delivered as an object carrying text and confidence."""

    kind: Literal["structured"] = "structured"
    text: str = ""
    confidence: float | None = None


def _as_confidence(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    try:
        return float(value) if value is not None else None
    except (TypeError, ValueError):
        return None


def resolve_transcript(payload: Any) -> RawTranscript | StructuredTranscript | None:
    """
    Resolve a speech-to-text payload into a transcript variant.

    Objects are read structurally (``transcript`` first, then ``text``);
    anything else is kept as an opaque string. Never raises.
    """
    if payload is None:
        return None
    if isinstance(payload, (RawTranscript, StructuredTranscript)):
        return payload
    if isinstance(payload, str):
        return RawTranscript(text=payload)
    if isinstance(payload, dict):
        if payload.get("kind") == "raw":
            return RawTranscript(text=str(payload.get("text") or ""))
        text = ""
        for key in ("transcript", "text"):
            candidate = payload.get(key)
            if isinstance(candidate, str):
                text = candidate
                break
        return StructuredTranscript(
            text=text,
            confidence=_as_confidence(payload.get("confidence")),
        )
    return RawTranscript(text=str(payload))


Transcript = Annotated[
    RawTranscript | StructuredTranscript | None,
    BeforeValidator(resolve_transcript),
]


class Answer(CamelModel):
    """A candidate's answer to one question (transient, never stored alone)."""

    question_id: str
    transcription: Transcript = Field(
        default=None,
        validation_alias=AliasChoices("transcription", "transcript"),
    )
    code: str | None = None
    skipped: bool = False

    @property
    def transcript_text(self) -> str:
        return self.transcription.text if self.transcription else ""
