from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from jose import JWTError, jwt

from benefits_portal.core.config import settings

# --- Session token management ---

def create_session_token(user_id: int, expires_delta: Optional[timedelta] = None) -> Dict[str, Any]:
    """Creates a signed session token for a user id and returns it along with its expiry."""
    expires_delta = expires_delta or timedelta(minutes=settings.SESSION_EXPIRE_MINUTES)
    expire = datetime.now(timezone.utc) + expires_delta
    to_encode = {"sub": str(user_id), "exp": expire}
    encoded_jwt = jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    return {"access_token": encoded_jwt, "expires_in": int(expires_delta.total_seconds())}


def decode_session_token(token: str) -> Optional[int]:
    """Returns the user id carried by a valid token, or None."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
    subject = payload.get("sub")
    if subject is None or not str(subject).isdigit():
        return None
    return int(subject)
