"""
unicorn_store.db.base

SQLAlchemy declarative base shared by ORM models and Alembic metadata discovery.
"""

from __future__ import annotations

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass
