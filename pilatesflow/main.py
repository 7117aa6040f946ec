"""
PilatesFlow API
FastAPI backend for the studio: class catalog, bookings and practice progress
"""

import os
import logging
from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware

# Setup logging
logging.basicConfig(level=(os.getenv("LOG_LEVEL") or "INFO").upper())
logger = logging.getLogger(__name__)

from pilatesflow.database.connection import engine
from pilatesflow.models.orm_models import Base
from pilatesflow.routers import auth, classes, bookings, progress, profile, dashboard
from pilatesflow.utils import env_flag

# Initialize FastAPI app
app = FastAPI(
    title="PilatesFlow API",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

allowed_origins = [
    o.strip()
    for o in (os.getenv("CORS_ORIGINS") or "http://localhost:3000").split(",")
    if o.strip()
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Session middleware
is_dev = env_flag("DEVELOPMENT_MODE")
env = (os.getenv("ENV") or os.getenv("APP_ENV") or "").strip().lower()
is_prod = (not is_dev) and (env not in ("dev", "development", "local", "test", "testing"))

session_secret = str(os.getenv("SESSION_SECRET") or "").strip()
if is_prod:
    if (not session_secret) or session_secret in ("pilatesflow-session-secret", "changeme", "password"):
        raise RuntimeError("SESSION_SECRET requerido y debe ser fuerte en producción")
else:
    if not session_secret:
        session_secret = "pilatesflow-session-secret"

same_site_env = str(os.getenv("SESSION_SAMESITE") or "").strip().lower()
same_site = same_site_env if same_site_env in ("lax", "none", "strict") else "lax"

app.add_middleware(
    SessionMiddleware,
    secret_key=session_secret,
    https_only=is_prod,
    same_site=same_site,
    session_cookie=os.getenv("SESSION_COOKIE", "pilatesflow_session"),
)


@app.on_event("startup")
async def _startup_create_tables() -> None:
    if not env_flag("AUTO_CREATE_TABLES"):
        return
    try:
        Base.metadata.create_all(bind=engine)
        logger.info("Tables ensured")
    except Exception as e:
        logger.error(f"Error creating tables: {e}")


# Routes
@app.get("/")
async def root():
    return {"name": "PilatesFlow API", "version": "1.0.0", "status": "running"}


@app.get("/health")
async def health():
    return {"status": "healthy"}


app.include_router(auth.router, tags=["Auth"])
app.include_router(classes.router, tags=["Classes"])
app.include_router(bookings.router, tags=["Bookings"])
app.include_router(progress.router, tags=["Progress"])
app.include_router(profile.router, tags=["Profile"])
app.include_router(dashboard.router, tags=["Dashboard"])
