# PilatesFlow Database Package
from pilatesflow.database.connection import SessionLocal, engine, build_engine, get_database_url

__all__ = [
    "SessionLocal",
    "engine",
    "build_engine",
    "get_database_url",
]
