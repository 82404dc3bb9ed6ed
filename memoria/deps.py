from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from memoria.core.config import settings
from memoria.core.security import verify_access_token
from memoria.db.session import get_db
from memoria.modules.user_management.models.user import User
from memoria.modules.user_management.services.user import get_user

# OAuth2 token URL
oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_PREFIX}/auth/login")

def _credentials_exception(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )

def get_user_from_token(db: Session, token: str) -> User:
    """Resolve the active user a bearer token belongs to"""
    user_id = verify_access_token(token)
    if not user_id:
        raise _credentials_exception("Could not validate credentials")

    user = get_user(db, user_id=user_id)
    if not user:
        raise _credentials_exception("User not found")

    if not user.is_active:
        raise _credentials_exception("Inactive user")

    return user

def get_current_user(db: Session = Depends(get_db), token: str = Depends(oauth2_scheme)) -> User:
    """
    Dependency for getting current authenticated user
    """
    return get_user_from_token(db, token)
