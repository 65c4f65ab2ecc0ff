"""Servicio de carreras: listado por alcance, alta con coordinador, edición y baja lógica."""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import transaccion
from app.core.errores import ErrorValidacion, NoEncontrado
from app.models.carrera import AdminCarrera, Carrera
from app.models.tipos import EstadoRegistro
from app.schemas.carrera import CarreraCreate, CarreraUpdate
from app.services import cascadas
from app.services.alcance import Alcance, Principal
from app.services.autorizacion import Accion, Recurso, Solicitud, verificar
from app.services.consultas import exigir_activo, obtener_o_404

_CAMPOS_EDITABLES = ("nombre", "duracion", "modalidad", "anio_aprobacion")
_NO_NULOS = frozenset({"nombre", "estado"})


async def listar_carreras(
    db: AsyncSession, principal: Principal, alcance: Alcance
) -> list[tuple[Carrera, int | None]]:
    """Rector ve carreras activas y cerradas; Coordinador solo las activas de su alcance."""
    if alcance.irrestricto:
        estados = (EstadoRegistro.ACTIVO, EstadoRegistro.CERRADO)
    else:
        estados = (EstadoRegistro.ACTIVO,)
    q = (
        select(Carrera, AdminCarrera.id_administrador)
        .outerjoin(AdminCarrera, AdminCarrera.id_carrera == Carrera.id)
        .where(Carrera.estado.in_(estados), alcance.filtro(Carrera.id))
        .order_by(Carrera.nombre)
    )
    result = await db.execute(q)
    return [(carrera, id_coord) for carrera, id_coord in result.all()]


async def obtener_carrera(
    db: AsyncSession, principal: Principal, alcance: Alcance, id_carrera: int
) -> tuple[Carrera, int | None]:
    carrera = await obtener_o_404(db, Carrera, id_carrera, "Carrera no encontrada.")
    if carrera.estado == EstadoRegistro.INACTIVO:
        raise NoEncontrado("Carrera no encontrada.")
    verificar(principal, alcance, Solicitud(Accion.LEER, Recurso.CARRERA, id_carrera=carrera.id))
    return carrera, await cascadas.coordinador_de(db, carrera.id)


async def crear_carrera(
    db: AsyncSession, principal: Principal, alcance: Alcance, datos: CarreraCreate
) -> tuple[Carrera, int | None]:
    """Alta atómica de la carrera y su asignación de coordinador."""
    verificar(principal, alcance, Solicitud(Accion.CREAR, Recurso.CARRERA))
    async with transaccion(db):
        carrera = Carrera(
            nombre=datos.nombre,
            duracion=datos.duracion,
            modalidad=datos.modalidad,
            anio_aprobacion=datos.anio_aprobacion,
            estado=EstadoRegistro.ACTIVO,
        )
        db.add(carrera)
        await db.flush()
        await cascadas.reasignar_coordinador(db, carrera.id, datos.id_coordinador)
    return carrera, datos.id_coordinador


async def actualizar_carrera(
    db: AsyncSession,
    principal: Principal,
    alcance: Alcance,
    id_carrera: int,
    datos: CarreraUpdate,
) -> tuple[Carrera, int | None]:
    """Edición parcial. El cambio de estado y la reasignación comparten la transacción."""
    cambios = {
        k: v for k, v in datos.model_dump(exclude_unset=True).items()
        if not (k in _NO_NULOS and v is None)
    }
    carrera = await obtener_o_404(db, Carrera, id_carrera, "Carrera no encontrada.")
    permitidos = verificar(
        principal,
        alcance,
        Solicitud(
            Accion.ACTUALIZAR,
            Recurso.CARRERA,
            id_carrera=carrera.id,
            campos=frozenset(cambios),
            estado_actual=carrera.estado,
            estado_nuevo=cambios.get("estado"),
        ),
    )
    if permitidos is not None:
        cambios = {k: v for k, v in cambios.items() if k in permitidos}

    estado_final = cambios.get("estado", carrera.estado)
    if cambios.get("id_coordinador") is not None and estado_final != EstadoRegistro.ACTIVO:
        raise ErrorValidacion("Solo una carrera activa puede tener coordinador asignado.")

    async with transaccion(db):
        for campo in _CAMPOS_EDITABLES:
            if campo in cambios:
                setattr(carrera, campo, cambios[campo])
        if "id_coordinador" in cambios:
            await cascadas.reasignar_coordinador(db, carrera.id, cambios["id_coordinador"])
        if "estado" in cambios:
            await cascadas.cambiar_estado_carrera(db, carrera, cambios["estado"], principal.id)
        await db.flush()
    return carrera, await cascadas.coordinador_de(db, carrera.id)


async def eliminar_carrera(
    db: AsyncSession, principal: Principal, alcance: Alcance, id_carrera: int
) -> Carrera:
    """Baja lógica: quita la asignación pero no da de baja las materias."""
    verificar(
        principal, alcance, Solicitud(Accion.ELIMINAR, Recurso.CARRERA, id_carrera=id_carrera)
    )
    carrera = await obtener_o_404(db, Carrera, id_carrera, "Carrera no encontrada.")
    _exigir_no_inactiva(carrera)
    async with transaccion(db):
        await cascadas.dar_de_baja_carrera(db, carrera, principal.id)
    return carrera


def _exigir_no_inactiva(carrera: Carrera) -> None:
    """Una carrera cerrada todavía puede darse de baja; una inactiva no."""
    if carrera.estado != EstadoRegistro.CERRADO:
        exigir_activo(carrera, "La carrera ya estaba marcada como inactiva.")
