"""Authentication router: email registration and password login"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from memoria.core.config import settings
from memoria.core.email import EmailSender, get_email_sender
from memoria.core.security import create_access_token
from memoria.db.session import get_db
from memoria.deps import get_current_user
from memoria.modules.auth.schemas.auth import (
    LoginRequest,
    RegisterRequest,
    RegisterResponse,
    Token,
    VerifyEmailRequest,
)
from memoria.modules.auth.services.auth import authenticate, complete_registration, start_registration
from memoria.modules.user_management.models.user import User
from memoria.modules.user_management.schemas.user import UserMe

router = APIRouter()

@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_202_ACCEPTED)
def register(
    *,
    db: Session = Depends(get_db),
    register_in: RegisterRequest,
    email_sender: EmailSender = Depends(get_email_sender),
) -> RegisterResponse:
    """Start a registration; the account is created once the emailed code is confirmed"""
    pending = start_registration(db, register_in, email_sender)
    return RegisterResponse(
        email=pending.email,
        expires_in_minutes=settings.PENDING_REGISTRATION_TTL_MINUTES,
    )

@router.post("/verify-email", response_model=Token, status_code=status.HTTP_201_CREATED)
def verify_email(
    *,
    db: Session = Depends(get_db),
    verify_in: VerifyEmailRequest,
) -> Token:
    user = complete_registration(db, verify_in)
    return Token(access_token=create_access_token(user.id))

@router.post("/login", response_model=Token)
def login(
    *,
    db: Session = Depends(get_db),
    login_in: LoginRequest,
) -> Token:
    user = authenticate(db, login_in.login, login_in.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return Token(access_token=create_access_token(user.id))

@router.get("/me", response_model=UserMe)
def read_me(current_user: User = Depends(get_current_user)) -> User:
    return current_user
