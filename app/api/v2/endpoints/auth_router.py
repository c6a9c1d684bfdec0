# Fichier: wortschatz/backend/app/api/v2/endpoints/auth_router.py

import logging
from datetime import datetime, timedelta, timezone

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.api.v2.dependencies import get_current_identity, get_db
from app.core import security
from app.core.config import settings
from app.core.exceptions import AuthenticationError, ConflictError, NotFoundError, ValidationError
from app.core.security import Identity
from app.crud import user_crud
from app.models.user.user_model import User
from app.schemas.user import user_schema

router = APIRouter()
logger = logging.getLogger(__name__)

FORGOT_PASSWORD_MESSAGE = "If an account exists with this email, you will receive a password reset code."
INVALID_RESET_MESSAGE = "Invalid or expired reset code"


def _auth_response(user: User) -> user_schema.AuthResponse:
    token = security.create_access_token(user.id, user.email, user.is_admin)
    return user_schema.AuthResponse(token=token, user=user_schema.User.model_validate(user))


@router.post("/signup", response_model=user_schema.AuthResponse, status_code=status.HTTP_201_CREATED)
def signup(user_in: user_schema.UserCreate, db: Session = Depends(get_db)):
    if user_crud.get_user_by_email(db, email=user_in.email):
        raise ConflictError("email_registered", "User already exists")

    try:
        user = user_crud.create_user(db=db, user=user_in)
    except IntegrityError as exc:
        # Inscription concurrente avec le même email.
        db.rollback()
        raise ConflictError("email_registered", "User already exists") from exc

    logger.info("Nouvel utilisateur inscrit: %s", user.id)
    return _auth_response(user)


@router.post("/login", response_model=user_schema.AuthResponse)
def login(payload: user_schema.LoginIn, db: Session = Depends(get_db)):
    user = user_crud.get_user_by_email(db, email=payload.email)
    # Même réponse pour un email inconnu et un mauvais mot de passe.
    if not user or not security.verify_password(payload.password, user.hashed_password):
        raise AuthenticationError("invalid_credentials", "Invalid credentials")
    return _auth_response(user)


@router.get("/user", response_model=user_schema.User)
def read_current_user(
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    user = user_crud.get_user(db, identity.user_id)
    if user is None:
        raise NotFoundError("user_not_found", "User not found")
    return user


@router.post("/forgot-password", response_model=user_schema.ForgotPasswordOut)
def forgot_password(payload: user_schema.ForgotPasswordIn, db: Session = Depends(get_db)):
    user = user_crud.get_user_by_email(db, email=payload.email)
    if not user:
        # Ne révèle pas l'existence du compte.
        return user_schema.ForgotPasswordOut(message=FORGOT_PASSWORD_MESSAGE)

    code = user_crud.issue_reset_code(db, user, timedelta(minutes=settings.PASSWORD_RESET_TTL_MIN))
    # TODO: envoyer le code par e-mail une fois un fournisseur SMTP configuré.
    if settings.ENVIRONMENT == "development":
        logger.info("Code de réinitialisation pour l'utilisateur %s: %s", user.id, code)
        return user_schema.ForgotPasswordOut(message=FORGOT_PASSWORD_MESSAGE, reset_code=code)
    return user_schema.ForgotPasswordOut(message=FORGOT_PASSWORD_MESSAGE)


@router.post("/reset-password")
def reset_password(payload: user_schema.ResetPasswordIn, db: Session = Depends(get_db)):
    if len(payload.new_password) < settings.PASSWORD_MIN_LENGTH:
        raise ValidationError(
            "password_too_short",
            f"Password must be at least {settings.PASSWORD_MIN_LENGTH} characters",
        )

    user = user_crud.get_user_by_email(db, email=payload.email)
    if not user or not user.reset_code or user.reset_code != payload.reset_code.strip():
        raise ValidationError("invalid_reset_code", INVALID_RESET_MESSAGE)

    expires_at = user.reset_code_expires_at
    if expires_at is not None and expires_at.tzinfo is None:
        # SQLite renvoie des datetimes naïfs.
        expires_at = expires_at.replace(tzinfo=timezone.utc)
    if expires_at is None or expires_at < datetime.now(timezone.utc):
        raise ValidationError("invalid_reset_code", INVALID_RESET_MESSAGE)

    user_crud.update_password(db, user, payload.new_password)
    return {"message": "Password reset successfully"}
