# src/wellcoach/infrastructure/db/base.py
"""
Database engine setup.

SQLite is used for development and tests, PostgreSQL in production. JSON
columns are declared with a JSONB variant (see models/base.py), so the same
models run on both.
"""

import json
from decimal import Decimal

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from wellcoach.config import settings


def _custom_json_serializer(obj):
    """Decimal values (e.g. from pydantic input) are stored as numbers."""
    if isinstance(obj, Decimal):
        return float(obj)
    raise TypeError(f"Object of type {obj.__class__.__name__} is not JSON serializable")


def normalize_database_url(url: str) -> str:
    url = (url or "").strip()
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql+psycopg://", 1)
    return url


def build_engine(url: str):
    url = normalize_database_url(url)
    if url.startswith("sqlite"):
        # FastAPI runs sync endpoints in a thread pool.
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            json_serializer=lambda obj: json.dumps(obj, default=_custom_json_serializer),
        )
    return create_engine(
        url,
        pool_pre_ping=True,
        pool_recycle=3600,
        json_serializer=lambda obj: json.dumps(obj, default=_custom_json_serializer),
    )


engine = build_engine(settings.DATABASE_URL)

SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
