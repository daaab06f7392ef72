"""
Bearer-token authentication

Tokens are issued by the account service and signed with ``JWT_SECRET``;
this module only verifies them and loads the user they name.
"""

import logging

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from mockprep.api.dependencies import get_feedback_store
from mockprep.config.settings import get_settings
from mockprep.core.exceptions import AuthenticationError, AuthorizationError
from mockprep.models.user import CurrentUser
from mockprep.storage.feedback_store import FeedbackStore

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def decode_token(token: str) -> str:
    """Return the user id carried by a token."""
    settings = get_settings()
    if not settings.jwt_secret:
        logger.error("JWT_SECRET is not configured, rejecting bearer token")
        raise AuthenticationError("Not authorized, token failed")

    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as e:
        logger.warning(f"Rejected bearer token: {e}")
        raise AuthenticationError("Not authorized, token failed") from e

    user_id = payload.get("id") or payload.get("sub")
    if not user_id:
        raise AuthenticationError("Not authorized, token failed")
    return str(user_id)


async def _resolve_user(token: str, store: FeedbackStore) -> CurrentUser:
    user_id = decode_token(token)
    document = await store.get_user(user_id)
    if document is None:
        raise AuthenticationError("Not authorized, user not found")
    return CurrentUser.model_validate(document)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    store: FeedbackStore = Depends(get_feedback_store),
) -> CurrentUser:
    """Require a valid bearer token."""
    if credentials is None:
        raise AuthenticationError("Not authorized, no token")
    return await _resolve_user(credentials.credentials, store)


async def get_optional_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    store: FeedbackStore = Depends(get_feedback_store),
) -> CurrentUser | None:
    """Resolve the caller when a token is sent; anonymous otherwise."""
    if credentials is None:
        return None
    return await _resolve_user(credentials.credentials, store)


def ensure_owner_or_admin(user: CurrentUser, owner_id: str | None, message: str) -> None:
    """Raise AuthorizationError unless ``user`` owns the resource or is an admin."""
    if user.is_admin:
        return
    if owner_id is None or str(owner_id) != user.id:
        raise AuthorizationError(message)
