"""Read-only mappings of the Directus system tables that describe the schema."""
from __future__ import annotations
from sqlalchemy import Boolean, Integer, JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from directus_typegen.db.session import Base


class DirectusCollection(Base):
    __tablename__ = "directus_collections"

    collection: Mapped[str] = mapped_column(String(64), primary_key=True)
    singleton: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    hidden: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)


class DirectusField(Base):
    __tablename__ = "directus_fields"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    collection: Mapped[str] = mapped_column(String(64), nullable=False)
    field: Mapped[str] = mapped_column(String(64), nullable=False)
    special: Mapped[str | None] = mapped_column(String(64), nullable=True)
    interface: Mapped[str | None] = mapped_column(String(64), nullable=True)
    options: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)
    sort: Mapped[int | None] = mapped_column(Integer, nullable=True)
    hidden: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)


class DirectusRelation(Base):
    __tablename__ = "directus_relations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    many_collection: Mapped[str] = mapped_column(String(64), nullable=False)
    many_field: Mapped[str] = mapped_column(String(64), nullable=False)
    one_collection: Mapped[str | None] = mapped_column(String(64), nullable=True)
    one_field: Mapped[str | None] = mapped_column(String(64), nullable=True)
    junction_field: Mapped[str | None] = mapped_column(String(64), nullable=True)
    one_allowed_collections: Mapped[str | None] = mapped_column(Text, nullable=True)
