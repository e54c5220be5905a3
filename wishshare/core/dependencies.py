"""
FastAPI dependencies - the guard layer.
Resolves the bearer token to a validated User once per request; endpoint and
service code downstream only ever sees that User.
"""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from wishshare.core import policy
from wishshare.core.security import ACCESS, decode_token
from wishshare.db.models.user import User
from wishshare.db.repositories.user_repository import UserRepository
from wishshare.db.session import DbSession

security = HTTPBearer(auto_error=False)


async def _resolve(
    session: DbSession,
    credentials: HTTPAuthorizationCredentials | None,
) -> tuple[int | None, User | None]:
    if not credentials:
        return None, None
    user_id = decode_token(credentials.credentials, purpose=ACCESS)
    if user_id is None:
        return None, None
    return user_id, await UserRepository(session).get_by_id(user_id)


async def get_current_user(
    session: DbSession,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> User:
    """Token -> active User. 401 without a valid token, 403 for missing/deactivated users."""
    user_id, user = await _resolve(session, credentials)
    policy.ensure(policy.can_authenticate(user_id, user))
    return user


async def get_current_admin(
    session: DbSession,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> User:
    user_id, user = await _resolve(session, credentials)
    policy.ensure(policy.can_administer(user_id, user))
    return user


CurrentUser = Annotated[User, Depends(get_current_user)]
CurrentAdmin = Annotated[User, Depends(get_current_admin)]
