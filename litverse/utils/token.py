from jose import jwt, ExpiredSignatureError, JWTError
from datetime import timedelta
from typing import Optional
from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlmodel import Session
from litverse.config import settings
from litverse.database import get_session
from litverse.errors import AuthError, ForbiddenError
from litverse.models.user import User
from litverse.utils.clock import utc_now

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None):
    to_encode = data.copy()

    expire = utc_now() + (
        expires_delta
        if expires_delta
        else timedelta(minutes=settings.access_token_expire_minutes)
    )

    to_encode.update({"exp": expire})

    encoded_jwt = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.algorithm
    )
    return encoded_jwt


def decode_access_token(token: str):
    try:
        return jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.algorithm],
        )
    except ExpiredSignatureError:
        raise AuthError("Token expired")
    except JWTError:
        raise AuthError("Invalid token")


def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    session: Session = Depends(get_session)
) -> User:
    if not token:
        raise AuthError("Access token required")

    payload = decode_access_token(token)

    user_id = payload.get("user_id") or payload.get("sub")

    if user_id is None:
        raise AuthError("Invalid token payload")

    user = session.get(User, int(user_id))

    if user is None:
        raise AuthError("User not found")

    if not user.is_active:
        raise ForbiddenError("User account is disabled")

    return user


def require_admin(current_user: User = Depends(get_current_user)) -> User:
    if current_user.role != "admin":
        raise ForbiddenError("Admin access required")
    return current_user
