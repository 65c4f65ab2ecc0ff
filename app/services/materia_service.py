"""Servicio de materias (administración)."""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import transaccion
from app.core.errores import MotivoNoEncontrado, NoEncontrado
from app.models.carrera import Carrera
from app.models.materia import Materia
from app.models.tipos import EstadoRegistro
from app.schemas.materia import MateriaCreate, MateriaUpdate
from app.services import cascadas
from app.services.alcance import Alcance, Principal
from app.services.autorizacion import Accion, Recurso, Solicitud, verificar
from app.services.consultas import (
    carrera_referenciada,
    exigir_activo,
    materia_visible,
    obtener_o_404,
)

_NO_NULOS = frozenset({"nombre", "id_carrera", "anio"})


async def listar_materias(
    db: AsyncSession, alcance: Alcance, id_carrera: int | None = None
) -> list[Materia]:
    q = (
        select(Materia)
        .join(Carrera, Carrera.id == Materia.id_carrera)
        .where(materia_visible(), alcance.filtro(Materia.id_carrera))
        .order_by(Materia.id_carrera, Materia.anio, Materia.nombre)
    )
    if id_carrera is not None:
        q = q.where(Materia.id_carrera == id_carrera)
    result = await db.execute(q)
    return list(result.scalars().all())


async def obtener_materia(
    db: AsyncSession, principal: Principal, alcance: Alcance, id_materia: int
) -> Materia:
    """El Rector ve la materia aunque su carrera ya no esté activa; el Coordinador no."""
    materia = await obtener_o_404(db, Materia, id_materia, "Materia no encontrada.")
    if materia.estado != EstadoRegistro.ACTIVO:
        raise NoEncontrado("Materia no encontrada.")
    if not alcance.irrestricto:
        carrera = await db.get(Carrera, materia.id_carrera)
        if carrera is None or carrera.estado != EstadoRegistro.ACTIVO:
            raise NoEncontrado("Materia no encontrada.")
    verificar(
        principal,
        alcance,
        Solicitud(Accion.LEER, Recurso.MATERIA, id_carrera=materia.id_carrera),
    )
    return materia


async def crear_materia(
    db: AsyncSession, principal: Principal, alcance: Alcance, datos: MateriaCreate
) -> Materia:
    verificar(
        principal,
        alcance,
        Solicitud(Accion.CREAR, Recurso.MATERIA, id_carrera=datos.id_carrera),
    )
    await carrera_referenciada(db, datos.id_carrera)
    async with transaccion(db):
        materia = Materia(**datos.model_dump(), estado=EstadoRegistro.ACTIVO, vistas=0)
        db.add(materia)
        await db.flush()
    return materia


async def actualizar_materia(
    db: AsyncSession,
    principal: Principal,
    alcance: Alcance,
    id_materia: int,
    datos: MateriaUpdate,
) -> Materia:
    cambios = {
        k: v for k, v in datos.model_dump(exclude_unset=True).items()
        if not (k in _NO_NULOS and v is None)
    }
    materia = await obtener_o_404(db, Materia, id_materia, "Materia no encontrada.")
    verificar(
        principal,
        alcance,
        Solicitud(
            Accion.ACTUALIZAR,
            Recurso.MATERIA,
            id_carrera=materia.id_carrera,
            campos=frozenset(cambios),
        ),
    )
    if materia.estado != EstadoRegistro.ACTIVO:
        raise NoEncontrado("La materia ya está inactiva.", MotivoNoEncontrado.YA_INACTIVO)
    nueva_carrera = cambios.get("id_carrera")
    if nueva_carrera is not None and nueva_carrera != materia.id_carrera:
        # Mover la materia exige alcance también sobre la carrera de destino.
        verificar(
            principal,
            alcance,
            Solicitud(Accion.ACTUALIZAR, Recurso.MATERIA, id_carrera=nueva_carrera),
        )
        await carrera_referenciada(db, nueva_carrera)

    async with transaccion(db):
        for campo, valor in cambios.items():
            setattr(materia, campo, valor)
        await db.flush()
    return materia


async def eliminar_materia(
    db: AsyncSession, principal: Principal, alcance: Alcance, id_materia: int
) -> Materia:
    """Baja lógica; una segunda baja responde ya_inactivo sin tocar la auditoría."""
    materia = await obtener_o_404(db, Materia, id_materia, "Materia no encontrada.")
    verificar(
        principal,
        alcance,
        Solicitud(Accion.ELIMINAR, Recurso.MATERIA, id_carrera=materia.id_carrera),
    )
    exigir_activo(materia, "La materia ya se encuentra inactiva.")
    async with transaccion(db):
        cascadas.sellar_baja(materia, principal.id)
        await db.flush()
    return materia
