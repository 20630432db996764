"""
Authentication dependency for JWT bearer tokens
"""

from fastapi import HTTPException, status, Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from app.services.auth import JWTService

# HTTP Bearer token scheme
security = HTTPBearer(auto_error=False)


async def get_current_user_id(
    credentials: HTTPAuthorizationCredentials = Depends(security)
) -> str:
    """
    Dependency returning the caller's user id (the token's ``sub`` claim)
    Raises HTTPException if authentication fails
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if credentials is None or not credentials.credentials:
        raise credentials_exception

    user_id = JWTService.user_id_from_token(credentials.credentials)
    if user_id is None:
        raise credentials_exception
    return user_id
