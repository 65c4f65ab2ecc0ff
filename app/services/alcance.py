"""Resolución del alcance (carreras visibles) de un administrador autenticado.

El alcance se calcula una vez por request y se pasa a cada chequeo posterior.
No se cachea entre requests: las asignaciones pueden cambiar entre una y otra.
"""
from collections.abc import Iterable
from dataclasses import dataclass, field

from sqlalchemy import ColumnElement, false, select, true
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.carrera import AdminCarrera, Carrera
from app.models.tipos import EstadoRegistro, Rol


@dataclass(frozen=True)
class Principal:
    """Identidad autenticada que viaja por los servicios."""

    id: int
    nombre: str
    rol: Rol
    estado: EstadoRegistro = EstadoRegistro.ACTIVO


@dataclass(frozen=True)
class Alcance:
    """`irrestricto` para Rector; en otro caso, el conjunto explícito de carreras (puede estar vacío)."""

    irrestricto: bool
    carreras: frozenset[int] = field(default_factory=frozenset)

    @classmethod
    def total(cls) -> "Alcance":
        return cls(irrestricto=True)

    @classmethod
    def restringido(cls, carreras: Iterable[int]) -> "Alcance":
        return cls(irrestricto=False, carreras=frozenset(carreras))

    @property
    def vacio(self) -> bool:
        return not self.irrestricto and not self.carreras

    def permite(self, id_carrera: int | None) -> bool:
        if self.irrestricto:
            return True
        return id_carrera is not None and id_carrera in self.carreras

    def filtro(self, columna_carrera) -> ColumnElement[bool]:
        """Condición SQL sobre la columna de carrera. Un alcance vacío no deja pasar ninguna fila."""
        if self.irrestricto:
            return true()
        if not self.carreras:
            return false()
        return columna_carrera.in_(sorted(self.carreras))


async def carreras_asignadas(db: AsyncSession, id_administrador: int) -> list[int]:
    """IDs de las carreras activas asignadas al administrador."""
    q = (
        select(AdminCarrera.id_carrera)
        .join(Carrera, Carrera.id == AdminCarrera.id_carrera)
        .where(
            AdminCarrera.id_administrador == id_administrador,
            Carrera.estado == EstadoRegistro.ACTIVO,
        )
        .order_by(AdminCarrera.id_carrera)
    )
    result = await db.execute(q)
    return list(result.scalars().all())


async def resolver_alcance(db: AsyncSession, principal: Principal) -> Alcance:
    if principal.rol is Rol.RECTOR:
        return Alcance.total()
    if principal.rol is Rol.COORDINADOR:
        return Alcance.restringido(await carreras_asignadas(db, principal.id))
    raise ValueError(f"Rol no contemplado en la resolución de alcance: {principal.rol!r}")
