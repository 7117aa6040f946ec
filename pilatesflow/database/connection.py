import os
import logging

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Configuración de logs
logger = logging.getLogger(__name__)

# --- SQLAlchemy Configuration ---


def get_database_url() -> str:
    """Construye la URL de conexión a partir de variables de entorno."""
    url = os.getenv("DATABASE_URL")
    if url:
        # Asegurar driver correcto para PostgreSQL si no se especifica
        if url.startswith("postgres://"):
            url = url.replace("postgres://", "postgresql+psycopg2://", 1)
        elif url.startswith("postgresql://") and "+" not in url.split("://")[0]:
            url = url.replace("postgresql://", "postgresql+psycopg2://", 1)
        return url

    user = os.getenv("DB_USER", "postgres")
    password = os.getenv("DB_PASSWORD", "")
    host = os.getenv("DB_HOST", "localhost")
    port = os.getenv("DB_PORT", "5432")
    db_name = os.getenv("DB_NAME", "pilatesflow")
    sslmode = os.getenv("DB_SSLMODE", "")

    auth = f"{user}:{password}" if password else user
    base_url = f"postgresql+psycopg2://{auth}@{host}:{port}/{db_name}"

    # Required for managed cloud databases
    if sslmode:
        base_url += f"?sslmode={sslmode}"

    return base_url


def _int_env(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except Exception:
        return default


def build_engine(url: str) -> Engine:
    """Create the engine for ``url`` with pool options suited to its backend."""
    if url.startswith("sqlite"):
        # In-memory SQLite must share one connection across threads
        if url in ("sqlite://", "sqlite:///:memory:"):
            return create_engine(
                url,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        return create_engine(url, connect_args={"check_same_thread": False})

    is_serverless = bool(
        os.getenv("VERCEL")
        or os.getenv("AWS_LAMBDA_FUNCTION_NAME")
        or os.getenv("K_SERVICE")
    )
    pool_size = _int_env("DB_POOL_SIZE", 1 if is_serverless else 10)
    max_overflow = _int_env("DB_MAX_OVERFLOW", 0 if is_serverless else 20)
    try:
        return create_engine(
            url,
            pool_pre_ping=True,  # Verifica la conexión antes de usarla
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_recycle=1800,  # Reciclar conexiones cada 30 mins
        )
    except TypeError as e:
        # Dialects without a queue pool reject the sizing arguments
        logger.error(f"Error creando engine con opciones de pool: {e}")
        return create_engine(url, pool_pre_ping=True)


DATABASE_URL = get_database_url()
engine = build_engine(DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
