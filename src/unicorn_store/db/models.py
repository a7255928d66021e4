"""
unicorn_store.db.models

Persistence schema for the store.

Responsibilities:
- Define the `Unicorn` entity (table `unicorns`).
"""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from unicorn_store.db.base import Base


def _new_id() -> str:
    return str(uuid.uuid4())


class Unicorn(Base):
    __tablename__ = "unicorns"

    # Generated on INSERT (flush); stays None on freshly constructed instances.
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    name: Mapped[str | None] = mapped_column(String(256), nullable=True)
    age: Mapped[str | None] = mapped_column(String(64), nullable=True)
    size: Mapped[str | None] = mapped_column(String(64), nullable=True)
    type: Mapped[str | None] = mapped_column(String(128), nullable=True)

    def __init__(
        self,
        name: str | None = None,
        age: str | None = None,
        size: str | None = None,
        type: str | None = None,
        **kw: Any,
    ) -> None:
        super().__init__(name=name, age=age, size=size, type=type, **kw)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "age": self.age,
            "size": self.size,
            "type": self.type,
        }

    def __repr__(self) -> str:
        return f"Unicorn(id={self.id!r}, name={self.name!r}, type={self.type!r})"
