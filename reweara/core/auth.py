# reweara/core/auth.py
import uuid
from dataclasses import dataclass
from typing import Any

from fastapi import Depends, Header, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from sqlmodel import Session

from reweara.core.config import get_settings
from reweara.database import get_session
from reweara.models.user import User

settings = get_settings()

# Optional bearer: browsing and guest carts work without a token
bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class CartOwner:
    """
    Whoever a cart / checkout belongs to: an authenticated user or a
    guest browser session. Exactly one of the two is set.
    """

    user: User | None = None
    session_id: str | None = None

    @property
    def user_id(self) -> uuid.UUID | None:
        return self.user.id if self.user else None


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Verify signature and expiry of an access token and return its claims.
    Audience is not checked; the identity provider issues several.
    """
    try:
        return jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALG],
            options={"verify_aud": False},
        )
    except JWTError:
        raise _unauthorized("Invalid or expired token")


def _identity_from_claims(claims: dict[str, Any]) -> tuple[uuid.UUID, str]:
    sub, email = claims.get("sub"), claims.get("email")
    if not sub or not email:
        raise _unauthorized("Token missing sub/email")
    try:
        return uuid.UUID(sub), email
    except ValueError:
        raise _unauthorized("Invalid sub in token")


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    session: Session = Depends(get_session),
) -> User | None:
    """
    The signed-in shopper, or None for guests.

    First sight of a valid token creates the profile with role "user";
    admins are promoted by hand in the database.
    """
    if credentials is None:
        return None

    claims = decode_access_token(credentials.credentials)
    user_id, email = _identity_from_claims(claims)

    user = session.get(User, user_id)
    if user is not None:
        return user

    user = User(
        id=user_id,
        email=email,
        first_name=claims.get("first_name"),
        last_name=claims.get("last_name"),
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def require_auth(user: User | None = Depends(get_current_user)) -> User:
    """401 for guests."""
    if user is None:
        raise _unauthorized("Authentication required")
    return user


def require_admin(user: User = Depends(require_auth)) -> User:
    """403 unless the caller's role is admin."""
    if user.role != "admin":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return user


def get_cart_owner(
    user: User | None = Depends(get_current_user),
    session_id: str | None = Header(default=None, alias=settings.SESSION_HEADER),
) -> CartOwner:
    """
    Resolve who owns the cart for this request.

    - Authenticated user wins over the guest session header.
    - Neither present => 400 (a cart needs an owner).
    """
    if user is not None:
        return CartOwner(user=user)

    if session_id and session_id.strip():
        return CartOwner(session_id=session_id.strip())

    raise HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail="Either an authenticated user or a session id must be provided",
    )
