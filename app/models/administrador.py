"""Modelo Administrador (Rector o Coordinador)."""
from sqlalchemy import Text
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base
from app.models.tipos import AuditoriaMixin, IdGrande, Rol, columna_enum


class Administrador(AuditoriaMixin, Base):
    """Cuenta administrativa. Nunca se borra físicamente: la baja es estado=inactivo."""

    __tablename__ = "administradores"

    id: Mapped[int] = mapped_column(IdGrande, primary_key=True, autoincrement=True)
    nombre: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    email: Mapped[str | None] = mapped_column(Text, nullable=True, unique=True)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    dni: Mapped[str | None] = mapped_column(Text, nullable=True, unique=True)
    telefono: Mapped[str | None] = mapped_column(Text, nullable=True)
    rol: Mapped[Rol] = mapped_column(columna_enum(Rol), nullable=False)
