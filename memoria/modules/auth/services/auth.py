"""
Registration and login.

Sign-ups are held in the pending_registrations table until the emailed code is
confirmed, so an unfinished registration survives restarts and expires on its
own. Only the password hash is ever stored.
"""
import logging
from typing import Optional
from sqlalchemy.orm import Session

from memoria.core.config import settings
from memoria.core.email import EmailSender
from memoria.core.exceptions import ConflictError, InvalidArgumentError
from memoria.core.security import generate_verification_code, get_password_hash, verify_password
from memoria.core.time_helpers import minutes_from_now, utcnow
from memoria.modules.auth.models.pending_registration import PendingRegistration
from memoria.modules.auth.schemas.auth import RegisterRequest, VerifyEmailRequest
from memoria.modules.user_management.models.user import User
from memoria.modules.user_management.services.user import get_user_by_email, get_user_by_login, get_user_by_username

logger = logging.getLogger(__name__)

def get_pending_registration(db: Session, email: str) -> Optional[PendingRegistration]:
    return db.query(PendingRegistration).filter(PendingRegistration.email == email).first()

def purge_expired_registrations(db: Session) -> int:
    """Delete pending registrations past their expiry; the caller commits"""
    return db.query(PendingRegistration).filter(
        PendingRegistration.expires_at < utcnow()
    ).delete(synchronize_session=False)

def start_registration(db: Session, register_in: RegisterRequest, email_sender: EmailSender) -> PendingRegistration:
    """Create or replace the pending registration for an email and send its code"""
    if get_user_by_email(db, register_in.email):
        raise ConflictError("Email already registered")
    if get_user_by_username(db, register_in.username):
        raise ConflictError("Username already taken")

    purge_expired_registrations(db)

    code = generate_verification_code()
    pending = get_pending_registration(db, register_in.email) or PendingRegistration(email=register_in.email)
    pending.username = register_in.username
    pending.hashed_password = get_password_hash(register_in.password)
    pending.first_name = register_in.first_name
    pending.last_name = register_in.last_name
    pending.verification_code = code
    pending.expires_at = minutes_from_now(settings.PENDING_REGISTRATION_TTL_MINUTES)

    db.add(pending)
    db.commit()
    db.refresh(pending)

    email_sender.send_verification_code(pending.email, code)
    logger.info(f"Pending registration stored for {pending.email}")
    return pending

def complete_registration(db: Session, verify_in: VerifyEmailRequest) -> User:
    """Turn a verified pending registration into a user"""
    pending = get_pending_registration(db, verify_in.email)
    if not pending or pending.verification_code != verify_in.code:
        raise InvalidArgumentError("Invalid verification code")

    if pending.expires_at < utcnow():
        db.delete(pending)
        db.commit()
        raise InvalidArgumentError("Verification code expired")

    if get_user_by_username(db, pending.username):
        raise ConflictError("Username already taken")

    user = User(
        email=pending.email,
        username=pending.username,
        hashed_password=pending.hashed_password,
        first_name=pending.first_name,
        last_name=pending.last_name,
    )
    db.add(user)
    db.delete(pending)
    db.commit()
    db.refresh(user)

    logger.info(f"User {user.id} registered as {user.username}")
    return user

def authenticate(db: Session, login: str, password: str) -> Optional[User]:
    """Return the user for a username/email and password, or None"""
    user = get_user_by_login(db, login)
    if not user or not verify_password(password, user.hashed_password):
        return None
    if not user.is_active:
        return None
    return user
