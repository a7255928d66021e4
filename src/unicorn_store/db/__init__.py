"""
unicorn_store.db

Persistence package (SQLAlchemy async).

Responsibilities:
- Provide the ORM model, engine/session setup, and repositories.
"""

# Package marker.
