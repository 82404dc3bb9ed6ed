# Implements security-related functionality:
# JWT token generation and verification
# Password hashing and verification using bcrypt
# Verification codes for the email confirmation step of registration

from datetime import datetime, timedelta, timezone
from typing import Any, Optional, Union
import secrets
import string
import logging

from jose import jwt, JWTError
from passlib.context import CryptContext

from memoria.core.config import settings

logger = logging.getLogger("memoria")

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

def create_access_token(subject: Union[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    # "sub" carries the user id, the equivalent of a NameIdentifier claim
    to_encode = {"exp": expire, "sub": str(subject)}
    encoded_jwt = jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    return encoded_jwt

def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)

def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)

def generate_verification_code(length: Optional[int] = None) -> str:
    length = length or settings.VERIFICATION_CODE_LENGTH
    return "".join(secrets.choice(string.digits) for _ in range(length))

def verify_access_token(token: str) -> Optional[str]:
    """Return the user id stored in a valid token, or None"""
    try:
        # jose rejects expired tokens on decode
        payload = jwt.decode(
            token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM]
        )
    except JWTError as e:
        logger.warning(f"JWT verification error: {e}")
        return None

    user_id: Optional[str] = payload.get("sub")
    if user_id is None:
        logger.warning("Token payload missing 'sub' field")
        return None

    return user_id
