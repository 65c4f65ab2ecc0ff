"""Lecturas compartidas por los servicios de entidades."""
from typing import TypeVar

from sqlalchemy import and_
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errores import MotivoNoEncontrado, NoEncontrado, ReferenciaInexistente
from app.models.carrera import Carrera
from app.models.materia import Materia
from app.models.tipos import EstadoRegistro

Entidad = TypeVar("Entidad")


async def obtener_o_404(db: AsyncSession, modelo: type[Entidad], id_: int, mensaje: str) -> Entidad:
    entidad = await db.get(modelo, id_)
    if entidad is None:
        raise NoEncontrado(mensaje)
    return entidad


def exigir_activo(entidad, mensaje: str) -> None:
    """El recurso existe pero ya fue dado de baja."""
    if entidad.estado != EstadoRegistro.ACTIVO:
        raise NoEncontrado(mensaje, MotivoNoEncontrado.YA_INACTIVO)


async def carrera_referenciada(db: AsyncSession, id_carrera: int) -> Carrera:
    carrera = await db.get(Carrera, id_carrera)
    if carrera is None or carrera.estado == EstadoRegistro.INACTIVO:
        raise ReferenciaInexistente(f"La carrera {id_carrera} no existe.")
    return carrera


async def materia_referenciada(db: AsyncSession, id_materia: int) -> Materia:
    """Materia activa; la referencia a una materia dada de baja cuenta como inexistente."""
    materia = await db.get(Materia, id_materia)
    if materia is None or materia.estado != EstadoRegistro.ACTIVO:
        raise ReferenciaInexistente(f"La materia {id_materia} no existe.")
    return materia


def materia_visible():
    """Materia activa de una carrera activa (requiere join con Carrera)."""
    return and_(
        Materia.estado == EstadoRegistro.ACTIVO,
        Carrera.estado == EstadoRegistro.ACTIVO,
    )
