from smartstock.database.base import Base
from smartstock.database.engine import build_engine, engine, ensure_schema
from smartstock.database.session import SessionLocal

__all__ = ["Base", "SessionLocal", "build_engine", "engine", "ensure_schema"]
