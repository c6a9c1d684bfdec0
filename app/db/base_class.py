# Fichier: wortschatz/backend/app/db/base_class.py
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base déclarative commune à tous les modèles (users, vocabulaire, progression, badges)."""
