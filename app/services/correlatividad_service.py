"""Servicio de correlatividades (aristas materia -> materia requisito)."""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from app.core.database import transaccion
from app.core.errores import Conflicto, MotivoNoEncontrado, NoEncontrado
from app.models.carrera import Carrera
from app.models.correlatividad import Correlatividad
from app.models.materia import Materia
from app.models.tipos import EstadoRegistro, TipoCorrelatividad
from app.schemas.materia import CorrelatividadCreate, CorrelatividadUpdate
from app.services import cascadas
from app.services.alcance import Alcance, Principal
from app.services.autorizacion import Accion, Recurso, Solicitud, verificar
from app.services.consultas import (
    exigir_activo,
    materia_referenciada,
    materia_visible,
    obtener_o_404,
)

Requisito = aliased(Materia, name="requisito")


def _visibles():
    """Arista activa cuya materia principal, materia requisito y carrera están activas."""
    return (
        select(Correlatividad)
        .join(Materia, Materia.id == Correlatividad.id_materia)
        .join(Carrera, Carrera.id == Materia.id_carrera)
        .join(Requisito, Requisito.id == Correlatividad.id_materia_requisito)
        .where(
            Correlatividad.estado == EstadoRegistro.ACTIVO,
            Requisito.estado == EstadoRegistro.ACTIVO,
            materia_visible(),
        )
    )


async def listar_correlatividades(
    db: AsyncSession, alcance: Alcance, id_materia: int | None
) -> list[Correlatividad]:
    if id_materia is None:
        return []
    q = (
        _visibles()
        .where(Correlatividad.id_materia == id_materia, alcance.filtro(Materia.id_carrera))
        .order_by(Correlatividad.tipo, Correlatividad.id)
    )
    result = await db.execute(q)
    return list(result.scalars().all())


async def obtener_correlatividad(
    db: AsyncSession, principal: Principal, alcance: Alcance, id_correlatividad: int
) -> Correlatividad:
    q = _visibles().add_columns(Materia.id_carrera).where(Correlatividad.id == id_correlatividad)
    fila = (await db.execute(q)).first()
    if fila is None:
        raise NoEncontrado("Correlatividad no encontrada o inactiva.")
    correlatividad, id_carrera = fila
    verificar(
        principal,
        alcance,
        Solicitud(Accion.LEER, Recurso.CORRELATIVIDAD, id_carrera=id_carrera),
    )
    return correlatividad


async def _exigir_unica(
    db: AsyncSession,
    id_materia: int,
    id_requisito: int,
    tipo: TipoCorrelatividad,
    excluir_id: int | None = None,
) -> None:
    q = select(Correlatividad.id).where(
        Correlatividad.id_materia == id_materia,
        Correlatividad.id_materia_requisito == id_requisito,
        Correlatividad.tipo == tipo,
        Correlatividad.estado == EstadoRegistro.ACTIVO,
    )
    if excluir_id is not None:
        q = q.where(Correlatividad.id != excluir_id)
    if (await db.execute(q)).first() is not None:
        raise Conflicto("Esta correlatividad ya existe.")


def _exigir_no_autorreferencia(id_materia: int, id_requisito: int) -> None:
    if id_materia == id_requisito:
        raise Conflicto("Una materia no puede ser correlativa de sí misma.")


async def crear_correlatividad(
    db: AsyncSession, principal: Principal, alcance: Alcance, datos: CorrelatividadCreate
) -> Correlatividad:
    _exigir_no_autorreferencia(datos.id_materia, datos.id_materia_requisito)
    principal_materia = await materia_referenciada(db, datos.id_materia)
    verificar(
        principal,
        alcance,
        Solicitud(
            Accion.CREAR, Recurso.CORRELATIVIDAD, id_carrera=principal_materia.id_carrera
        ),
    )
    await materia_referenciada(db, datos.id_materia_requisito)
    await _exigir_unica(db, datos.id_materia, datos.id_materia_requisito, datos.tipo)
    async with transaccion(db):
        correlatividad = Correlatividad(**datos.model_dump(), estado=EstadoRegistro.ACTIVO)
        db.add(correlatividad)
        await db.flush()
    return correlatividad


async def actualizar_correlatividad(
    db: AsyncSession,
    principal: Principal,
    alcance: Alcance,
    id_correlatividad: int,
    datos: CorrelatividadUpdate,
) -> Correlatividad:
    cambios = {k: v for k, v in datos.model_dump(exclude_unset=True).items() if v is not None}
    correlatividad = await obtener_o_404(
        db, Correlatividad, id_correlatividad, "Correlatividad no encontrada."
    )
    actual = await db.get(Materia, correlatividad.id_materia)
    verificar(
        principal,
        alcance,
        Solicitud(
            Accion.ACTUALIZAR,
            Recurso.CORRELATIVIDAD,
            id_carrera=actual.id_carrera if actual is not None else None,
            campos=frozenset(cambios),
        ),
    )
    if correlatividad.estado != EstadoRegistro.ACTIVO:
        raise NoEncontrado(
            "La correlatividad ya está inactiva.", MotivoNoEncontrado.YA_INACTIVO
        )
    id_materia = cambios.get("id_materia", correlatividad.id_materia)
    id_requisito = cambios.get("id_materia_requisito", correlatividad.id_materia_requisito)
    tipo = cambios.get("tipo", correlatividad.tipo)
    _exigir_no_autorreferencia(id_materia, id_requisito)
    if id_materia != correlatividad.id_materia:
        destino = await materia_referenciada(db, id_materia)
        verificar(
            principal,
            alcance,
            Solicitud(
                Accion.ACTUALIZAR, Recurso.CORRELATIVIDAD, id_carrera=destino.id_carrera
            ),
        )
    if id_requisito != correlatividad.id_materia_requisito:
        await materia_referenciada(db, id_requisito)
    await _exigir_unica(db, id_materia, id_requisito, tipo, excluir_id=correlatividad.id)

    async with transaccion(db):
        for campo, valor in cambios.items():
            setattr(correlatividad, campo, valor)
        await db.flush()
    return correlatividad


async def eliminar_correlatividad(
    db: AsyncSession, principal: Principal, alcance: Alcance, id_correlatividad: int
) -> Correlatividad:
    correlatividad = await obtener_o_404(
        db, Correlatividad, id_correlatividad, "Correlatividad no encontrada."
    )
    materia = await db.get(Materia, correlatividad.id_materia)
    verificar(
        principal,
        alcance,
        Solicitud(
            Accion.ELIMINAR,
            Recurso.CORRELATIVIDAD,
            id_carrera=materia.id_carrera if materia is not None else None,
        ),
    )
    exigir_activo(correlatividad, "La correlatividad ya se encuentra inactiva.")
    async with transaccion(db):
        cascadas.sellar_baja(correlatividad, principal.id)
        await db.flush()
    return correlatividad
