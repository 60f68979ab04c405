"""Session token verification.

Tokens are issued by the external identity provider; this service only
verifies them and reads the ``sub`` claim, which is the caller's external
identity id.
"""
from jose import JWTError, jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.core.config import settings


# JWT bearer token scheme
security = HTTPBearer()


def _credentials_error(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def decode_token(token: str) -> dict:
    """Decode and validate a session token."""
    options = {"verify_aud": settings.JWT_AUDIENCE is not None}
    try:
        return jwt.decode(
            token,
            settings.JWT_VERIFY_KEY,
            algorithms=[settings.JWT_ALGORITHM],
            audience=settings.JWT_AUDIENCE,
            options=options,
        )
    except JWTError:
        raise _credentials_error("Could not validate credentials")


async def get_current_external_id(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> str:
    """
    Dependency returning the caller's external identity id.

    Usage:
        @router.get("/protected")
        def protected_route(external_id: str = Depends(get_current_external_id)):
            return {"external_id": external_id}
    """
    payload = decode_token(credentials.credentials)

    external_id = payload.get("sub")
    if not external_id:
        raise _credentials_error("Invalid authentication credentials")

    return external_id
