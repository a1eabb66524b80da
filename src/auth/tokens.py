from datetime import datetime, timedelta, timezone
from jose import JWTError, jwt
from src.config import SECRET

ACCESS_TOKEN_EXPIRE_MINUTES = 30
REFRESH_TOKEN_EXPIRE_DAYS = 7
ALGORITHM = "HS256"


def _encode(subject: str, token_type: str, lifetime: timedelta) -> str:
    expire = datetime.now(timezone.utc) + lifetime
    return jwt.encode({"sub": subject, "type": token_type, "exp": expire}, SECRET, algorithm=ALGORITHM)


def create_access_token(user_id: str, expires_delta: timedelta = None) -> str:
    return _encode(user_id, "access", expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))


def create_refresh_token(user_id: str) -> str:
    return _encode(user_id, "refresh", timedelta(days=REFRESH_TOKEN_EXPIRE_DAYS))


def decode_token(token: str, token_type: str = "access") -> str:
    """Return the user id carried by ``token``; raise ``JWTError`` otherwise."""
    payload = jwt.decode(token, SECRET, algorithms=[ALGORITHM])
    if payload.get("type") != token_type or not payload.get("sub"):
        raise JWTError("Unexpected token")
    return str(payload["sub"])
