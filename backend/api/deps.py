from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from jose import jwt, JWTError
from database import get_db
from config import get_settings
from errors import Unauthorized
from models import User

settings = get_settings()
bearer = HTTPBearer(auto_error=False)  # auto_error=False so cookie fallback works

COOKIE_NAME = "friends_token"


def _decode_token(token: str) -> str | None:
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
        return payload.get("sub")
    except JWTError:
        return None


async def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer),
    db: AsyncSession = Depends(get_db),
) -> User:
    # Prefer httpOnly cookie; fall back to Authorization header
    token = request.cookies.get(COOKIE_NAME)
    if not token and credentials:
        token = credentials.credentials

    if not token:
        raise Unauthorized()

    user_id = _decode_token(token)
    if not user_id:
        raise Unauthorized("Invalid or expired token")

    try:
        user_pk = int(user_id)
    except ValueError:
        raise Unauthorized("Invalid token payload")

    user = await db.get(User, user_pk)
    if not user or not user.is_active:
        raise Unauthorized("User not found")
    return user
