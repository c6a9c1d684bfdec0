import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

# Imports de l'application
from app.core.config import settings
from app.core.exceptions import AppError
from app.db.base import Base
from app.api.v2.api import api_router

from app.core.security import verify_password
from app.models.user.user_model import User
from app.db.session import async_engine, SessionLocal

# Imports pour SQLAdmin
from sqladmin import Admin
from sqladmin.authentication import AuthenticationBackend
from app.admin import ADMIN_VIEWS

# --- Configuration du logging ---
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# --- Initialisation de l'application FastAPI ---
app = FastAPI(
    title="Wortschatz API V2",
    openapi_url="/api/v2/openapi.json"
)


# --- Gestion des erreurs ---
@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s -> %s (%s)", request.method, request.url.path, exc.code, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Champs manquants ou mal formés : 400, comme les autres erreurs de validation.
    errors = [
        {"loc": [str(part) for part in error.get("loc", ())], "msg": error.get("msg")}
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content={"detail": "Missing or invalid fields", "code": "validation_error", "details": {"errors": errors}},
    )


# --- Configuration des Middlewares ---
app.add_middleware(SessionMiddleware, secret_key=settings.SECRET_KEY)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["Authorization", "Content-Type"],
)


# --- Initialisation de l'Admin ---
class AdminAuth(AuthenticationBackend):
    async def login(self, request: Request) -> bool:
        form = await request.form()
        email = str(form.get("username") or "").strip().lower()
        password = form.get("password")

        with SessionLocal() as db:
            user = db.query(User).filter(User.email == email).first()

        if user and user.is_admin and verify_password(password, user.hashed_password):
            request.session.update({"token": "admin_logged_in", "user": user.email})
            return True
        return False

    async def logout(self, request: Request) -> bool:
        request.session.clear()
        return True

    async def authenticate(self, request: Request) -> bool:
        return "token" in request.session


admin = Admin(
    app,
    async_engine,
    authentication_backend=AdminAuth(secret_key=settings.SECRET_KEY),
    base_url="/admin",
)
for view in ADMIN_VIEWS:
    admin.add_view(view)

app.include_router(api_router, prefix="/api/v2")


def ensure_default_admin() -> None:
    """Crée l'administrateur configuré via DEFAULT_ADMIN_EMAIL / DEFAULT_ADMIN_PASSWORD."""
    email = (settings.DEFAULT_ADMIN_EMAIL or "").strip().lower()
    if not email or not settings.DEFAULT_ADMIN_PASSWORD:
        return

    with SessionLocal() as session:
        admin_user = session.query(User).filter(User.email == email).first()
        if admin_user is not None:
            logger.info("Administrateur par défaut déjà présent.")
            return

        from app.crud import user_crud
        from app.schemas.user.user_schema import UserCreate

        logger.info("Création de l'administrateur par défaut '%s'.", email)
        user_crud.create_user(
            session,
            UserCreate(email=email, name="Admin", password=settings.DEFAULT_ADMIN_PASSWORD),
            is_admin=True,
        )
        logger.info("✅ Administrateur par défaut créé.")


# --- Événement de Démarrage ---
@app.on_event("startup")
async def startup():
    logger.info("Vérification et création des tables de la base de données...")
    async with async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("✅ Les tables de la base de données sont prêtes.")
    ensure_default_admin()


# --- Route Racine ---
@app.get("/")
def read_root():
    return {"message": "Welcome to Wortschatz API V2!"}
