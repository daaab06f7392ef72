"""
MongoDB persistence for MockPrep

Thin async access layer over the ``feedbacks``, ``sessions``,
``questions`` and ``users`` collections. All driver errors surface as
PersistenceError.
"""

import logging
from datetime import datetime, timezone
from typing import Any

from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import PyMongoError

from mockprep.core.exceptions import PersistenceError
from mockprep.models.feedback import LegacyAnswerEntry, SessionFeedback
from mockprep.models.question import Question
from mockprep.storage.compat import to_document

logger = logging.getLogger(__name__)

FEEDBACKS = "feedbacks"
SESSIONS = "sessions"
QUESTIONS = "questions"
USERS = "users"

NOT_DELETED = {"deleted": {"$ne": True}}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _owner_id(user_id: str) -> Any:
    """Match user ids stored either as ObjectId or as plain strings."""
    if ObjectId.is_valid(user_id):
        return {"$in": [user_id, ObjectId(user_id)]}
    return user_id


class FeedbackStore:
    """
    Document store access for feedback records and interview sessions.

    Args:
        db: Motor database handle
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db

    # =========================================================================
    # FEEDBACK
    # =========================================================================

    async def save_feedback(
        self,
        feedback: SessionFeedback,
        legacy_entries: list[LegacyAnswerEntry] | None = None,
    ) -> None:
        """
        Create or overwrite the record for ``(sessionId, userId)``.

        Every field is replaced wholesale; there is no history of earlier
        submissions.
        """
        document = to_document(feedback, legacy_entries)
        now = _utcnow()
        document["updatedAt"] = now

        try:
            result = await self.db[FEEDBACKS].update_one(
                {"sessionId": feedback.session_id, "userId": feedback.user_id},
                {"$set": document, "$setOnInsert": {"createdAt": now}},
                upsert=True,
            )
        except PyMongoError as e:
            raise PersistenceError("Failed to save feedback", details=str(e)) from e

        if result.upserted_id is not None:
            logger.info(f"Saved new feedback for session: {feedback.session_id}")
        else:
            logger.info(f"Updated existing feedback for session: {feedback.session_id}")

    async def get_feedback_by_session(self, session_id: str) -> dict[str, Any] | None:
        try:
            return await self.db[FEEDBACKS].find_one({"sessionId": session_id, **NOT_DELETED})
        except PyMongoError as e:
            raise PersistenceError("Failed to load feedback", details=str(e)) from e

    async def list_feedback_for_user(
        self,
        user_id: str,
        page: int = 1,
        limit: int = 10,
    ) -> list[dict[str, Any]]:
        """One page of a user's records, newest first."""
        skip = (page - 1) * limit
        try:
            cursor = (
                self.db[FEEDBACKS]
                .find({"userId": _owner_id(user_id), **NOT_DELETED})
                .sort("generatedAt", DESCENDING)
                .skip(skip)
                .limit(limit)
            )
            return await cursor.to_list(length=limit)
        except PyMongoError as e:
            raise PersistenceError("Failed to list feedback", details=str(e)) from e

    async def count_feedback_for_user(self, user_id: str) -> int:
        try:
            return await self.db[FEEDBACKS].count_documents({"userId": _owner_id(user_id), **NOT_DELETED})
        except PyMongoError as e:
            raise PersistenceError("Failed to count feedback", details=str(e)) from e

    async def feedback_history(self, user_id: str) -> list[dict[str, Any]]:
        """Every record of a user, oldest first."""
        try:
            cursor = (
                self.db[FEEDBACKS]
                .find({"userId": _owner_id(user_id), **NOT_DELETED})
                .sort("generatedAt", ASCENDING)
            )
            return await cursor.to_list(length=None)
        except PyMongoError as e:
            raise PersistenceError("Failed to load feedback history", details=str(e)) from e

    # =========================================================================
    # SESSIONS AND QUESTIONS
    # =========================================================================

    async def get_session(self, session_id: str) -> dict[str, Any] | None:
        try:
            return await self.db[SESSIONS].find_one({"_id": session_id})
        except PyMongoError as e:
            raise PersistenceError("Failed to load session", details=str(e)) from e

    async def create_session(
        self,
        session_id: str,
        user_id: str | None,
        job_role: str,
        metadata: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        document = {
            "_id": session_id,
            "userId": user_id,
            "jobRole": job_role,
            "metadata": metadata or {},
            "createdAt": _utcnow(),
        }
        try:
            await self.db[SESSIONS].insert_one(document)
        except PyMongoError as e:
            raise PersistenceError("Failed to create session", details=str(e)) from e

        logger.info(f"Created new session: {session_id}")
        return document

    async def save_session_snapshot(
        self,
        session_id: str,
        user_id: str | None,
        session_data: dict[str, Any],
        answers: list[dict[str, Any]],
    ) -> None:
        """Store the client's raw session payload."""
        try:
            await self.db[SESSIONS].update_one(
                {"_id": session_id},
                {
                    "$set": {
                        "userId": user_id,
                        "snapshot": {"sessionData": session_data, "answers": answers},
                        "updatedAt": _utcnow(),
                    },
                    "$setOnInsert": {"createdAt": _utcnow()},
                },
                upsert=True,
            )
        except PyMongoError as e:
            raise PersistenceError("Failed to save session", details=str(e)) from e

    async def save_questions(self, questions: list[Question]) -> int:
        """
        Insert questions that are not stored yet.

        Stored questions are never modified. Returns the number inserted;
        a failure on one question is logged and does not stop the rest.
        """
        inserted = 0
        for question in questions:
            try:
                existing = await self.db[QUESTIONS].find_one({"_id": question.id})
                if existing is not None:
                    continue
                document = question.model_dump(by_alias=True, mode="json", exclude={"id"})
                await self.db[QUESTIONS].insert_one({"_id": question.id, **document})
                inserted += 1
            except PyMongoError as e:
                logger.warning(f"Error saving question {question.id}: {e}")
        return inserted

    # =========================================================================
    # USERS
    # =========================================================================

    async def get_user(self, user_id: str) -> dict[str, Any] | None:
        """Load a user document by ObjectId or string id."""
        try:
            key: Any = ObjectId(user_id)
        except (InvalidId, TypeError):
            key = user_id

        try:
            return await self.db[USERS].find_one({"_id": key})
        except PyMongoError as e:
            raise PersistenceError("Failed to load user", details=str(e)) from e
