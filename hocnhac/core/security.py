"""Bearer token handling: tokens are issued by the auth provider and only verified here."""
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from hocnhac.core.config import settings

ACCESS_TOKEN_EXPIRE_MINUTES = 30


def create_access_token(
    subject: str,
    *,
    name: str,
    avatar: str | None = None,
    role: str = "user",
    expires_minutes: int = ACCESS_TOKEN_EXPIRE_MINUTES,
) -> str:
    """Mint a token in the provider's claim layout (used by scripts and tests)."""
    expire = datetime.now(timezone.utc) + timedelta(minutes=expires_minutes)
    to_encode = {"sub": str(subject), "name": name, "role": role, "exp": expire, "type": "access"}
    if avatar:
        to_encode["avatar"] = avatar
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> dict | None:
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
        return payload
    except JWTError:
        return None
