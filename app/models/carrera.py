"""Modelo Carrera y asignación carrera-coordinador."""
from sqlalchemy import ForeignKey, Integer, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base
from app.models.tipos import AuditoriaMixin, IdGrande


class Carrera(AuditoriaMixin, Base):
    """Carrera (plan académico). Estados: activo, cerrado, inactivo."""

    __tablename__ = "carreras"

    id: Mapped[int] = mapped_column(IdGrande, primary_key=True, autoincrement=True)
    nombre: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    duracion: Mapped[str | None] = mapped_column(Text, nullable=True)
    modalidad: Mapped[str | None] = mapped_column(Text, nullable=True)
    anio_aprobacion: Mapped[int | None] = mapped_column(Integer, nullable=True)


class AdminCarrera(Base):
    """Tabla asociación: qué coordinador tiene asignada cada carrera (a lo sumo uno por carrera)."""

    __tablename__ = "admin_carrera"
    __table_args__ = (UniqueConstraint("id_carrera", name="uq_admin_carrera_carrera"),)

    id_administrador: Mapped[int] = mapped_column(
        IdGrande, ForeignKey("administradores.id", ondelete="CASCADE"), primary_key=True
    )
    id_carrera: Mapped[int] = mapped_column(
        IdGrande, ForeignKey("carreras.id", ondelete="CASCADE"), primary_key=True
    )
