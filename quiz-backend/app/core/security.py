from dataclasses import dataclass
from typing import Annotated, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from .config import settings
from .errors import Unauthenticated

bearer = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Requester:
    id: str
    role: Optional[str] = None


def decode_token(token: str) -> Optional[dict]:
    try:
        return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        return None


async def get_requester(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer)],
) -> Requester:
    """Identity of the caller, taken from the Bearer token issued by the auth service."""
    if credentials is None:
        raise Unauthenticated("You must be logged in to manage quizzes")

    payload = decode_token(credentials.credentials)
    if payload is None:
        raise Unauthenticated("Invalid or expired token")

    user_id = payload.get("sub") or payload.get("id")
    if not user_id:
        raise Unauthenticated("Invalid token payload")

    return Requester(id=str(user_id), role=payload.get("role"))


RequesterDep = Annotated[Requester, Depends(get_requester)]
