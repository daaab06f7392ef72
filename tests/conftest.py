import copy
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from typing import Any

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from jose import jwt

from mockprep.config.settings import get_settings
from mockprep.core.response_normalizer import fallback_questions
from mockprep.models.feedback import AnswerFeedback
from mockprep.models.question import Answer, Question
from mockprep.storage.feedback_store import FeedbackStore

JWT_SECRET = "test-secret"
USER_ID = "64b7f0c2a1b2c3d4e5f60718"
OTHER_USER_ID = "64b7f0c2a1b2c3d4e5f60719"
ADMIN_ID = "64b7f0c2a1b2c3d4e5f6071a"


# ============================================================================
# IN-MEMORY MONGO
# ============================================================================

def _matches(document: dict[str, Any], query: dict[str, Any]) -> bool:
    for key, condition in query.items():
        value = document.get(key)
        if isinstance(condition, dict) and any(k.startswith("$") for k in condition):
            if "$ne" in condition and value == condition["$ne"]:
                return False
            if "$in" in condition and value not in condition["$in"]:
                return False
        elif value != condition:
            return False
    return True


class FakeCursor:
    def __init__(self, documents: list[dict[str, Any]]):
        self.documents = documents

    def sort(self, key: str, direction: int) -> "FakeCursor":
        self.documents.sort(key=lambda d: d.get(key), reverse=direction < 0)
        return self

    def skip(self, count: int) -> "FakeCursor":
        self.documents = self.documents[count:]
        return self

    def limit(self, count: int) -> "FakeCursor":
        self.documents = self.documents[:count]
        return self

    async def to_list(self, length: int | None = None) -> list[dict[str, Any]]:
        return self.documents if length is None else self.documents[:length]


class FakeCollection:
    """Just enough of motor's collection API for FeedbackStore."""

    def __init__(self):
        self.documents: list[dict[str, Any]] = []

    async def find_one(self, query: dict[str, Any]) -> dict[str, Any] | None:
        for document in self.documents:
            if _matches(document, query):
                return copy.deepcopy(document)
        return None

    def find(self, query: dict[str, Any]) -> FakeCursor:
        return FakeCursor([copy.deepcopy(d) for d in self.documents if _matches(d, query)])

    async def insert_one(self, document: dict[str, Any]) -> SimpleNamespace:
        document = copy.deepcopy(document)
        document.setdefault("_id", ObjectId())
        self.documents.append(document)
        return SimpleNamespace(inserted_id=document["_id"])

    async def update_one(
        self,
        query: dict[str, Any],
        update: dict[str, Any],
        upsert: bool = False,
    ) -> SimpleNamespace:
        for document in self.documents:
            if _matches(document, query):
                document.update(copy.deepcopy(update.get("$set", {})))
                return SimpleNamespace(matched_count=1, upserted_id=None)

        if not upsert:
            return SimpleNamespace(matched_count=0, upserted_id=None)

        document = {**query, **update.get("$setOnInsert", {}), **update.get("$set", {})}
        document = copy.deepcopy(document)
        document.setdefault("_id", ObjectId())
        self.documents.append(document)
        return SimpleNamespace(matched_count=0, upserted_id=document["_id"])

    async def count_documents(self, query: dict[str, Any]) -> int:
        return sum(1 for d in self.documents if _matches(d, query))


class FakeDatabase:
    def __init__(self):
        self.collections: dict[str, FakeCollection] = {}

    def __getitem__(self, name: str) -> FakeCollection:
        return self.collections.setdefault(name, FakeCollection())


# ============================================================================
# FAKE MODEL LAYER
# ============================================================================

class FakeAIReasoning:
    """Stands in for AIReasoningLayer; scores every answer with ``score``."""

    def __init__(self, score: int = 80):
        self.score = score
        self.evaluated: list[str] = []
        self.failing_ids: set[str] = set()

    async def evaluate_answer(self, question: Question, answer: Answer, session_context=None) -> AnswerFeedback:
        self.evaluated.append(question.id)
        if question.id in self.failing_ids:
            raise RuntimeError("model unavailable")
        return AnswerFeedback(
            score=self.score,
            assessment=f"Solid answer to {question.id}",
            strengths=["Clear structure"],
            improvements=["Add examples"],
            communication_score=self.score,
            technical_score=self.score,
        )

    async def generate_questions(self, role: str, question_count: int, include_coding: bool = False, **kwargs):
        questions = fallback_questions(
            role=role,
            company=kwargs.get("company") or "General Company",
            difficulty=kwargs.get("difficulty") or "medium",
            include_coding=include_coding,
            language=kwargs.get("language") or "javascript",
            question_count=question_count,
        )
        return questions, False

    async def analyze_resume(self, resume_text: str, job_description: str) -> dict[str, Any]:
        return {"overallScore": 72, "resumeLength": len(resume_text)}

    async def close(self):
        pass


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture(autouse=True)
def _test_env(monkeypatch: pytest.MonkeyPatch, tmp_path):
    monkeypatch.setenv("JWT_SECRET", JWT_SECRET)
    monkeypatch.setenv("GEMINI_API_KEY", "test-key")
    monkeypatch.setenv("FEEDBACK_CALL_DELAY_SECONDS", "0")
    monkeypatch.setenv("UPLOAD_DIR", str(tmp_path / "uploads"))
    monkeypatch.setenv("LANGFUSE_ENABLED", "false")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def fake_db() -> FakeDatabase:
    db = FakeDatabase()
    db["users"].documents.extend([
        {"_id": ObjectId(USER_ID), "firstName": "Ada", "lastName": "Lovelace", "email": "ada@example.com", "role": "user"},
        {"_id": ObjectId(OTHER_USER_ID), "firstName": "Alan", "lastName": "Turing", "email": "alan@example.com", "role": "user"},
        {"_id": ObjectId(ADMIN_ID), "firstName": "Grace", "lastName": "Hopper", "email": "grace@example.com", "role": "admin"},
    ])
    return db


@pytest.fixture
def store(fake_db) -> FeedbackStore:
    return FeedbackStore(fake_db)


@pytest.fixture
def fake_ai() -> FakeAIReasoning:
    return FakeAIReasoning()


@pytest.fixture
def client(store, fake_ai):
    from main import app
    from mockprep.api.dependencies import (
        get_ai_reasoning,
        get_evaluation_engine,
        get_feedback_store,
        get_resume_processor,
    )
    from mockprep.core.evaluation_engine import EvaluationEngine
    from mockprep.core.resume_processor import ResumeProcessor

    app.dependency_overrides[get_feedback_store] = lambda: store
    app.dependency_overrides[get_ai_reasoning] = lambda: fake_ai
    app.dependency_overrides[get_evaluation_engine] = lambda: EvaluationEngine(fake_ai, delay_seconds=0)
    app.dependency_overrides[get_resume_processor] = ResumeProcessor

    yield TestClient(app)

    app.dependency_overrides.clear()


def make_token(user_id: str = USER_ID) -> str:
    return jwt.encode({"id": user_id}, JWT_SECRET, algorithm="HS256")


def auth_headers(user_id: str = USER_ID) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(user_id)}"}


def make_questions() -> list[Question]:
    return [
        Question(id="1", text="Explain closures.", type="technical", difficulty="medium"),
        Question(id="2", text="Tell me about a conflict.", type="behavioral", difficulty="easy"),
        Question(id="3", text="Reverse a string.", type="technical", difficulty="hard", coding=True),
    ]


def stored_feedback(session_id: str, score: int, user_id: str = USER_ID, days_ago: int = 0, **extra) -> dict[str, Any]:
    """A minimal v2 feedback document."""
    return {
        "_id": ObjectId(),
        "feedbackVersion": "v2",
        "userId": user_id,
        "sessionId": session_id,
        "overallScore": score,
        "completionRate": 100,
        "totalQuestions": 2,
        "answeredQuestions": 2,
        "overallStrengths": ["Clear structure"],
        "overallImprovements": ["Add examples"],
        "questionFeedbacks": [],
        "generatedAt": datetime(2026, 1, 31, tzinfo=timezone.utc) - timedelta(days=days_ago),
        **extra,
    }
