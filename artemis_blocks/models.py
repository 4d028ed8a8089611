"""
Data models — Block, Selection
SQLAlchemy (SQLite) + Pydantic v2 + Enums
"""
import uuid
from datetime import datetime
from enum import Enum
from typing import Any, Optional

import sqlalchemy as sa
from pydantic import BaseModel, Field
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


# ── ENUMS ──────────────────────────────────────────────────────────────

class BlockType(str, Enum):
    SINGLE  = "single"
    GROUPED = "grouped"


# ── ORM ────────────────────────────────────────────────────────────────

class Base(DeclarativeBase):
    pass


class BlockDB(Base):
    __tablename__ = "blocks"
    id:          Mapped[str]           = mapped_column(sa.String, primary_key=True, default=lambda: str(uuid.uuid4()))
    title:       Mapped[str]           = mapped_column(sa.String, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(sa.Text, nullable=True)
    type:        Mapped[str]           = mapped_column(sa.String, nullable=False)
    icon:        Mapped[Optional[str]] = mapped_column(sa.String, nullable=True)
    # réservé : jamais lu ni écrit par les routes
    selected:    Mapped[bool]          = mapped_column(sa.Boolean, default=False)


class SelectionDB(Base):
    __tablename__ = "selections"
    id:        Mapped[str]      = mapped_column(sa.String, primary_key=True, default=lambda: str(uuid.uuid4()))
    block_ids: Mapped[str]      = mapped_column(sa.Text, default="[]")
    timestamp: Mapped[datetime] = mapped_column(sa.DateTime, default=datetime.utcnow)


# ── PYDANTIC SCHEMAS ────────────────────────────────────────────────────

class BlockCreate(BaseModel):
    title:       str               = Field(min_length=1)
    description: Optional[str]     = None
    type:        BlockType
    icon:        Optional[str]     = None
    selected:    bool              = False


class SelectionInput(BaseModel):
    """Corps de POST /api/selections. La forme de blockIds est vérifiée par le validateur."""
    block_ids: Any = Field(default=None, alias="blockIds")
