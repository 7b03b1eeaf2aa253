"""Caller resolution for authenticated endpoints.

Tokens are issued outside this service as base64 of ``"<user_id>:<issued_at>"``
and are trusted as-is. An ``X-User-Id`` header is accepted in their place.
"""

import base64
import binascii

from fastapi import Header
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from marketplace.accounts.user import User
from marketplace.shared.errors import Unauthenticated
from marketplace.utils.logging import add_context


def user_id_from_token(token: str) -> str:
    try:
        decoded = base64.b64decode(token, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as exc:
        raise Unauthenticated("Invalid token") from exc

    user_id, _, _issued_at = decoded.partition(":")
    if not user_id:
        raise Unauthenticated("Invalid token")
    return user_id


async def current_caller(
    authorization: str | None = Header(None),
    x_user_id: str | None = Header(None),
) -> User:
    """FastAPI dependency returning the calling user's record."""
    if authorization:
        scheme, _, token = authorization.partition(" ")
        if scheme.lower() != "bearer" or not token:
            raise Unauthenticated("Access token required")
        user_id = user_id_from_token(token.strip())
    elif x_user_id:
        user_id = x_user_id
    else:
        raise Unauthenticated("Access token required")

    try:
        user = current_domain.repository_for(User).get(user_id)
    except ObjectNotFoundError as exc:
        raise Unauthenticated("User not found") from exc

    add_context(caller_id=str(user.id), caller_role=user.role)
    return user
