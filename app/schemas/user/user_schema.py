# Fichier: wortschatz/backend/app/schemas/user/user_schema.py
from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime


# --- Schéma de Base ---
class UserBase(BaseModel):
    email: EmailStr
    name: str = Field(min_length=1)


# --- Inscription (POST /auth/signup) ---
class UserCreate(UserBase):
    password: str = Field(min_length=1)


class LoginIn(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


# --- Réponse API : jamais de mot de passe ni de code de réinitialisation ---
class User(BaseModel):
    id: int
    email: EmailStr
    name: str
    is_admin: bool = Field(serialization_alias="isAdmin")
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True  # Permet à Pydantic de lire les modèles SQLAlchemy
        populate_by_name = True


class AuthResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    user: User


# --- Mot de passe oublié ---
class ForgotPasswordIn(BaseModel):
    email: EmailStr


class ForgotPasswordOut(BaseModel):
    message: str
    # Renvoyé uniquement en développement, faute de service d'e-mail.
    reset_code: Optional[str] = Field(default=None, serialization_alias="resetToken")


class ResetPasswordIn(BaseModel):
    email: EmailStr
    reset_code: str = Field(alias="resetToken", min_length=1)
    new_password: str = Field(alias="newPassword", min_length=1)

    class Config:
        populate_by_name = True
