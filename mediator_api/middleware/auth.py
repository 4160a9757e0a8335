"""JWT authentication middleware for FastAPI."""
from fastapi import Request
from jose import jwt, JWTError
from pydantic import BaseModel
from typing import Optional

from mediator_api.config import AUTH_SECRET, JWT_ALGORITHM
from mediator_api.errors import UnauthorizedError


class CurrentUser(BaseModel):
    """User information extracted from JWT."""
    user_id: str
    email: Optional[str] = None
    name: Optional[str] = None


async def get_current_user(request: Request) -> CurrentUser:
    """
    Validate JWT token from Authorization header and extract user information.

    Tokens are issued by the identity provider; this service only verifies
    the signature and expiry.

    Args:
        request: FastAPI request object to extract Authorization header

    Returns:
        CurrentUser with user_id, email and name from token

    Raises:
        UnauthorizedError: If token is missing, invalid or expired
    """
    auth_header = request.headers.get("authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        raise UnauthorizedError("Missing or invalid Authorization header")

    token = auth_header[7:]  # Remove "Bearer " prefix

    try:
        payload = jwt.decode(token, AUTH_SECRET, algorithms=[JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise UnauthorizedError("Token has expired")
    except JWTError as e:
        raise UnauthorizedError(f"Invalid token: {str(e)}")

    user_id: Optional[str] = payload.get("sub")
    if not user_id:
        raise UnauthorizedError("Invalid token: missing user ID")

    return CurrentUser(
        user_id=user_id,
        email=payload.get("email"),
        name=payload.get("name"),
    )
