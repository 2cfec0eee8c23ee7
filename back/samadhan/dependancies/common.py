# Standard library imports
from typing import Any
from uuid import UUID

# Third-party imports
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession

# Local application imports
from samadhan.core.db import get_async_session
from samadhan.models.auth.user import User
from samadhan.schemas.auth import TokenClaims
from samadhan.settings import settings

# Tokens are issued by the identity provider; this only extracts the bearer
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/token", auto_error=False)


def _credentials_exception() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )


def _decode_token(token: str) -> TokenClaims | None:
    try:
        payload: dict[str, Any] = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
        return TokenClaims(
            subject=UUID(str(payload["sub"])),
            email=payload.get("email"),
            email_verified=payload.get("email_verified") is True,
            name=payload.get("name"),
        )
    except (JWTError, KeyError, ValueError):
        return None


async def get_token_claims(token: str | None = Depends(oauth2_scheme)) -> TokenClaims:
    """Verified claims of the bearer token, whether or not the user has a profile yet"""
    claims = _decode_token(token) if token else None
    if claims is None:
        raise _credentials_exception()
    return claims


async def get_current_user(
    claims: TokenClaims = Depends(get_token_claims),
    db: AsyncSession = Depends(get_async_session),
) -> User:
    """Get current user from JWT token"""
    user = await db.get(User, claims.subject)
    if user is None:
        raise _credentials_exception()
    return user
