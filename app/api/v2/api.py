# Fichier: wortschatz/backend/app/api/v2/api.py
from fastapi import APIRouter
from .endpoints import (
    auth_router,
    badge_router,
    flashcard_router,
    progress_router,
    vocabulary_router,
)

api_router = APIRouter()

api_router.include_router(auth_router.router, prefix="/auth", tags=["Auth"])
api_router.include_router(vocabulary_router.router, prefix="/vocabulary", tags=["Vocabulary"])
api_router.include_router(flashcard_router.router, prefix="/flashcards", tags=["Flashcards"])
api_router.include_router(progress_router.router, prefix="/progress", tags=["Progress"])
api_router.include_router(badge_router.router, prefix="/badges", tags=["Badges"])
