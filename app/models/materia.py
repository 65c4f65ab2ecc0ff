"""Modelo Materia (unidad curricular de una carrera)."""
from sqlalchemy import ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base
from app.models.tipos import AuditoriaMixin, IdGrande


class Materia(AuditoriaMixin, Base):
    """Materia: pertenece a una carrera y a un año de cursado."""

    __tablename__ = "materias"

    id: Mapped[int] = mapped_column(IdGrande, primary_key=True, autoincrement=True)
    nombre: Mapped[str] = mapped_column(Text, nullable=False)
    id_carrera: Mapped[int] = mapped_column(
        IdGrande, ForeignKey("carreras.id"), nullable=False, index=True
    )
    anio: Mapped[int] = mapped_column(Integer, nullable=False)
    campo_formacion: Mapped[str | None] = mapped_column(Text, nullable=True)
    modalidad: Mapped[str | None] = mapped_column(Text, nullable=True)
    formato: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Texto libre: el plan muestra el valor tal cual y solo suma los numéricos.
    horas_semanales: Mapped[str | None] = mapped_column(Text, nullable=True)
    total_horas_anuales: Mapped[str | None] = mapped_column(Text, nullable=True)
    acreditacion: Mapped[str | None] = mapped_column(Text, nullable=True)
    vistas: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
