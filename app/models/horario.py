"""Modelo Horario (franja semanal de una materia)."""
from datetime import time

from sqlalchemy import ForeignKey, Time
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base
from app.models.tipos import AuditoriaMixin, DiaSemana, IdGrande, columna_enum


class Horario(AuditoriaMixin, Base):
    """Franja horaria recurrente: día de la semana + hora de inicio y fin."""

    __tablename__ = "horarios"

    id: Mapped[int] = mapped_column(IdGrande, primary_key=True, autoincrement=True)
    id_materia: Mapped[int] = mapped_column(
        IdGrande, ForeignKey("materias.id"), nullable=False, index=True
    )
    dia_semana: Mapped[DiaSemana] = mapped_column(columna_enum(DiaSemana), nullable=False)
    hora_inicio: Mapped[time] = mapped_column(Time, nullable=False)
    hora_fin: Mapped[time] = mapped_column(Time, nullable=False)
