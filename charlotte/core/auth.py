# charlotte/core/auth.py
import uuid
from typing import Any, Iterator

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError

from charlotte.core.auth_context import AuthContext, AuthSession
from charlotte.core.config import get_settings
from charlotte.core.gateway import Gateway, SupabaseGateway
from charlotte.core.supabase_client import supabase_for_token
from charlotte.models.user import User
from charlotte.repositories.user_repo import UserRepository

settings = get_settings()

# HTTP Bearer scheme:
# - auto_error=False => a missing Authorization header does not raise here,
#   so the 401 comes from our own dependencies with a consistent detail.
bearer_scheme = HTTPBearer(auto_error=False)

user_repo = UserRepository()


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Decode and verify a Supabase access token (JWT).

    Verification:
      - signature (HS256 using SUPABASE_JWT_SECRET)
      - expiration time (exp)
      - audience is NOT verified (Supabase 'aud' may vary)

    Raises:
        HTTPException(401): if token is invalid/expired.
    """
    try:
        return jwt.decode(
            token,
            settings.SUPABASE_JWT_SECRET,
            algorithms=[settings.SUPABASE_JWT_ALG],
            options={"verify_aud": False},
        )
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )


def session_from_token(token: str) -> AuthSession:
    """
    Build the AuthSession carried by a bearer token.

    Raises:
        HTTPException(401): if token is malformed or missing required claims.
    """
    payload = decode_access_token(token)
    sub = payload.get("sub")
    if not sub:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token missing sub",
        )

    # Supabase provides sub as a string; enforce UUID
    try:
        user_id = uuid.UUID(sub)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid sub in token",
        )

    return AuthSession(
        user_id=user_id,
        email=payload.get("email"),
        access_token=token,
        user_metadata=payload.get("user_metadata") or {},
    )


def get_session(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> AuthSession:
    """
    Resolve the caller's session from the Authorization header.

    Every route of this API needs a signed-in user, as the browser
    application only renders the sign-in form for anonymous visitors.
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    return session_from_token(credentials.credentials)


def get_gateway(session: AuthSession = Depends(get_session)) -> Gateway:
    """
    Remote data gateway acting as the caller (RLS applies).
    """
    return SupabaseGateway(supabase_for_token(session.access_token), settings.STORAGE_BUCKET)


def get_auth_context(
    session: AuthSession = Depends(get_session),
    gateway: Gateway = Depends(get_gateway),
) -> Iterator[AuthContext]:
    """
    Per-request AuthContext.

    Started with the token's session (profile loaded or provisioned) and
    closed once the response is sent.
    """
    context = AuthContext(user_repo, gateway).start(session)
    try:
        yield context
    finally:
        context.close()


def require_auth(context: AuthContext = Depends(get_auth_context)) -> User:
    """
    Enforce authentication.

    Returns:
        The authenticated user's profile.

    Raises:
        HTTPException(401): if no profile is held.
    """
    if context.usuario is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    return context.usuario


def require_admin(user: User = Depends(require_auth)) -> User:
    """
    Enforce admin role.

    Raises:
        HTTPException(403): if role is not admin.
    """
    if not user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return user
