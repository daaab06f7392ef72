"""
Persistence layer for MockPrep
"""

from mockprep.storage.compat import classify_user_answer, load_feedback, to_document, upgrade_legacy_record
from mockprep.storage.feedback_store import FeedbackStore

__all__ = [
    "FeedbackStore",
    "classify_user_answer",
    "load_feedback",
    "to_document",
    "upgrade_legacy_record",
]
