# auth/jwt.py
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Tuple
from jwt import encode, decode, ExpiredSignatureError, InvalidTokenError
from uuid import uuid4
from skillnexis.config import settings
import logging

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"

def create_session_token(data: Dict[str, Any]) -> Tuple[str, str]:
    """Return (token, jti); the jti names the stored session snapshot."""
    try:
        to_encode = data.copy()
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        jti = str(uuid4())
        to_encode.update({"exp": expire, "jti": jti, "type": "session"})
        return encode(to_encode, settings.JWT_SECRET, algorithm=ALGORITHM), jti
    except Exception as e:
        logger.error(f"Failed to create session token: {str(e)}")
        raise ValueError(f"Token creation failed: {str(e)}")

def decode_token(token: str) -> dict:
    try:
        payload = decode(token, settings.JWT_SECRET, algorithms=[ALGORITHM])
    except ExpiredSignatureError:
        logger.warning("Attempt to use expired token")
        raise ValueError("Token expired")
    except InvalidTokenError:
        logger.warning("Attempt to use invalid token")
        raise ValueError("Invalid token")
    if not payload.get("jti"):
        raise ValueError("Token missing JTI claim")
    return payload
