"""Servicio de horarios. La pertenencia se hereda Horario -> Materia -> Carrera."""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import transaccion
from app.core.errores import ErrorValidacion, MotivoNoEncontrado, NoEncontrado
from app.models.carrera import Carrera
from app.models.horario import Horario
from app.models.materia import Materia
from app.models.tipos import EstadoRegistro
from app.schemas.materia import HorarioCreate, HorarioUpdate
from app.services import cascadas
from app.services.alcance import Alcance, Principal
from app.services.autorizacion import Accion, Recurso, Solicitud, verificar
from app.services.consultas import (
    exigir_activo,
    materia_referenciada,
    materia_visible,
    obtener_o_404,
)


def ordenar_horarios(horarios):
    """Lunes a Domingo y, dentro del día, por hora de inicio."""
    return sorted(horarios, key=lambda h: (h.dia_semana.orden, h.hora_inicio))


async def _carrera_de_materia(db: AsyncSession, id_materia: int) -> int | None:
    materia = await db.get(Materia, id_materia)
    return materia.id_carrera if materia is not None else None


async def listar_horarios(
    db: AsyncSession, alcance: Alcance, id_materia: int | None
) -> list[Horario]:
    if id_materia is None:
        return []
    q = (
        select(Horario)
        .join(Materia, Materia.id == Horario.id_materia)
        .join(Carrera, Carrera.id == Materia.id_carrera)
        .where(
            Horario.id_materia == id_materia,
            Horario.estado == EstadoRegistro.ACTIVO,
            materia_visible(),
            alcance.filtro(Materia.id_carrera),
        )
    )
    result = await db.execute(q)
    return ordenar_horarios(result.scalars().all())


async def obtener_horario(
    db: AsyncSession, principal: Principal, alcance: Alcance, id_horario: int
) -> Horario:
    q = (
        select(Horario, Materia.id_carrera)
        .join(Materia, Materia.id == Horario.id_materia)
        .join(Carrera, Carrera.id == Materia.id_carrera)
        .where(Horario.id == id_horario, Horario.estado == EstadoRegistro.ACTIVO, materia_visible())
    )
    fila = (await db.execute(q)).first()
    if fila is None:
        raise NoEncontrado("Horario no encontrado o inactivo.")
    horario, id_carrera = fila
    verificar(principal, alcance, Solicitud(Accion.LEER, Recurso.HORARIO, id_carrera=id_carrera))
    return horario


async def crear_horario(
    db: AsyncSession, principal: Principal, alcance: Alcance, datos: HorarioCreate
) -> Horario:
    materia = await materia_referenciada(db, datos.id_materia)
    verificar(
        principal,
        alcance,
        Solicitud(Accion.CREAR, Recurso.HORARIO, id_carrera=materia.id_carrera),
    )
    async with transaccion(db):
        horario = Horario(**datos.model_dump(), estado=EstadoRegistro.ACTIVO)
        db.add(horario)
        await db.flush()
    return horario


async def actualizar_horario(
    db: AsyncSession,
    principal: Principal,
    alcance: Alcance,
    id_horario: int,
    datos: HorarioUpdate,
) -> Horario:
    cambios = {k: v for k, v in datos.model_dump(exclude_unset=True).items() if v is not None}
    horario = await obtener_o_404(db, Horario, id_horario, "Horario no encontrado.")
    verificar(
        principal,
        alcance,
        Solicitud(
            Accion.ACTUALIZAR,
            Recurso.HORARIO,
            id_carrera=await _carrera_de_materia(db, horario.id_materia),
            campos=frozenset(cambios),
        ),
    )
    if horario.estado != EstadoRegistro.ACTIVO:
        raise NoEncontrado("El horario ya está inactivo.", MotivoNoEncontrado.YA_INACTIVO)
    if "id_materia" in cambios and cambios["id_materia"] != horario.id_materia:
        destino = await materia_referenciada(db, cambios["id_materia"])
        verificar(
            principal,
            alcance,
            Solicitud(Accion.ACTUALIZAR, Recurso.HORARIO, id_carrera=destino.id_carrera),
        )
    inicio = cambios.get("hora_inicio", horario.hora_inicio)
    fin = cambios.get("hora_fin", horario.hora_fin)
    if inicio >= fin:
        raise ErrorValidacion("hora_inicio debe ser anterior a hora_fin.")

    async with transaccion(db):
        for campo, valor in cambios.items():
            setattr(horario, campo, valor)
        await db.flush()
    return horario


async def eliminar_horario(
    db: AsyncSession, principal: Principal, alcance: Alcance, id_horario: int
) -> Horario:
    horario = await obtener_o_404(db, Horario, id_horario, "Horario no encontrado.")
    verificar(
        principal,
        alcance,
        Solicitud(
            Accion.ELIMINAR,
            Recurso.HORARIO,
            id_carrera=await _carrera_de_materia(db, horario.id_materia),
        ),
    )
    exigir_activo(horario, "El horario ya se encuentra inactivo.")
    async with transaccion(db):
        cascadas.sellar_baja(horario, principal.id)
        await db.flush()
    return horario
