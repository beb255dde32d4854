"""API dependencies: caller identity, db session."""
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from hocnhac.core.security import decode_token
from hocnhac.db.session import get_db  # noqa: F401
from hocnhac.schemas.identity import Actor

security = HTTPBearer(auto_error=False)


async def get_current_actor_optional(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> Actor | None:
    if not credentials:
        return None
    payload = decode_token(credentials.credentials)
    if not payload or payload.get("type", "access") != "access":
        return None
    sub = payload.get("sub")
    name = payload.get("name")
    if not sub or not name:
        return None
    return Actor(
        id=str(sub),
        name=str(name),
        avatar_url=payload.get("avatar"),
        role=payload.get("role") or "user",
    )


async def get_current_actor(
    actor: Actor | None = Depends(get_current_actor_optional),
) -> Actor:
    if actor is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Vui lòng đăng nhập",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return actor


async def get_current_admin(
    actor: Actor = Depends(get_current_actor),
) -> Actor:
    if not actor.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="The user does not have enough privileges",
        )
    return actor
