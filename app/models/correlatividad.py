"""Modelo Correlatividad (requisito dirigido entre dos materias)."""
from sqlalchemy import CheckConstraint, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base
from app.models.tipos import (
    AuditoriaMixin,
    EstadoRequisito,
    IdGrande,
    TipoCorrelatividad,
    columna_enum,
)


class Correlatividad(AuditoriaMixin, Base):
    """Para cursar/rendir `id_materia` se requiere `id_materia_requisito` en `estado_requisito`."""

    __tablename__ = "correlatividades"
    __table_args__ = (
        CheckConstraint(
            "id_materia <> id_materia_requisito", name="ck_correlatividad_no_autorreferencia"
        ),
    )

    id: Mapped[int] = mapped_column(IdGrande, primary_key=True, autoincrement=True)
    id_materia: Mapped[int] = mapped_column(
        IdGrande, ForeignKey("materias.id"), nullable=False, index=True
    )
    id_materia_requisito: Mapped[int] = mapped_column(
        IdGrande, ForeignKey("materias.id"), nullable=False, index=True
    )
    tipo: Mapped[TipoCorrelatividad] = mapped_column(
        columna_enum(TipoCorrelatividad), nullable=False
    )
    estado_requisito: Mapped[EstadoRequisito] = mapped_column(
        columna_enum(EstadoRequisito), nullable=False
    )
