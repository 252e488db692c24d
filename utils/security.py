# utils/security.py

import logging
import time
from typing import Any, Dict, Optional
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
import config
from utils.errors import Unauthorized

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")

bearer_scheme = HTTPBearer(auto_error=False)

def hash_password(password: str) -> str:
    return pwd_context.hash(password)

def verify_password(plain: str, hashed: Optional[str]) -> bool:
    if not hashed:
        return False
    return pwd_context.verify(plain, hashed)

def create_access_token(subject: str, minutes: Optional[int] = None) -> str:
    """Signed JWT carrying the username in `sub`; expiry in epoch seconds."""
    now_ts = int(time.time())
    exp_ts = now_ts + 60 * (minutes or config.ACCESS_TOKEN_EXPIRE_MINUTES)
    payload = {"sub": subject, "iat": now_ts, "exp": exp_ts}
    return jwt.encode(payload, config.JWT_SECRET, algorithm=config.JWT_ALG)

def decode_access_token(token: str) -> Dict[str, Any]:
    """Return the token payload or raise Unauthorized (401)."""
    try:
        payload = jwt.decode(token, config.JWT_SECRET, algorithms=[config.JWT_ALG])
    except JWTError as e:
        logger.info("Rejected token: %s", e)
        raise Unauthorized("Invalid or expired token")
    if not payload.get("sub"):
        raise Unauthorized("Invalid or expired token")
    return payload

async def require_auth(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    """
    Route dependency guarding employee operations. Returns the username of
    the token holder.
    """
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise Unauthorized()
    return decode_access_token(credentials.credentials)["sub"]
