"""Efectos en cascada de bajas lógicas y reasignaciones.

Las funciones de este módulo no confirman ni revierten: siempre se ejecutan
dentro del `transaccion` de la operación que las dispara, de modo que un
fallo en cualquier paso revierte también la actualización principal.
"""
import logging

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errores import ReferenciaInexistente
from app.models.administrador import Administrador
from app.models.carrera import AdminCarrera, Carrera
from app.models.tipos import AuditoriaMixin, EstadoRegistro, Rol, ahora

logger = logging.getLogger(__name__)


def sellar_baja(
    entidad: AuditoriaMixin,
    id_administrador: int,
    estado: EstadoRegistro = EstadoRegistro.INACTIVO,
) -> None:
    """Marca la entidad con el estado de baja y completa la auditoría."""
    entidad.estado = estado
    entidad.fecha_eliminacion = ahora()
    entidad.id_administrador_eliminacion = id_administrador


def limpiar_auditoria(entidad: AuditoriaMixin) -> None:
    """Reactivación: vuelve a activo y borra los campos de auditoría."""
    entidad.estado = EstadoRegistro.ACTIVO
    entidad.fecha_eliminacion = None
    entidad.id_administrador_eliminacion = None


def aplicar_estado(
    entidad: AuditoriaMixin, nuevo: EstadoRegistro, id_administrador: int
) -> bool:
    """Aplica una transición de estado. Devuelve True si el estado cambió."""
    if entidad.estado == nuevo:
        return False
    if nuevo == EstadoRegistro.ACTIVO:
        limpiar_auditoria(entidad)
    else:
        sellar_baja(entidad, id_administrador, nuevo)
    return True


async def quitar_asignaciones_de_administrador(db: AsyncSession, id_administrador: int) -> int:
    """Borra físicamente las filas admin_carrera del administrador."""
    result = await db.execute(
        delete(AdminCarrera).where(AdminCarrera.id_administrador == id_administrador)
    )
    eliminadas = result.rowcount or 0
    logger.info(
        "Se quitaron %d asignaciones de carrera del administrador %d", eliminadas, id_administrador
    )
    return eliminadas


async def quitar_asignaciones_de_carrera(db: AsyncSession, id_carrera: int) -> int:
    result = await db.execute(delete(AdminCarrera).where(AdminCarrera.id_carrera == id_carrera))
    eliminadas = result.rowcount or 0
    logger.info("Se quitaron %d asignaciones de la carrera %d", eliminadas, id_carrera)
    return eliminadas


async def coordinador_de(db: AsyncSession, id_carrera: int) -> int | None:
    result = await db.execute(
        select(AdminCarrera.id_administrador).where(AdminCarrera.id_carrera == id_carrera)
    )
    return result.scalars().first()


async def reasignar_coordinador(
    db: AsyncSession, id_carrera: int, id_coordinador: int | None
) -> None:
    """Reemplazo: borra la asignación vigente y, si se indica, inserta exactamente una nueva."""
    if id_coordinador is not None:
        coordinador = await db.get(Administrador, id_coordinador)
        if (
            coordinador is None
            or coordinador.rol != Rol.COORDINADOR
            or coordinador.estado != EstadoRegistro.ACTIVO
        ):
            raise ReferenciaInexistente(
                f"El coordinador {id_coordinador} no existe o no es un Coordinador activo."
            )
    await quitar_asignaciones_de_carrera(db, id_carrera)
    if id_coordinador is not None:
        db.add(AdminCarrera(id_administrador=id_coordinador, id_carrera=id_carrera))
        await db.flush()
        logger.info("Carrera %d asignada al coordinador %d", id_carrera, id_coordinador)


async def dar_de_baja_administrador(
    db: AsyncSession, objetivo: Administrador, id_responsable: int
) -> None:
    """Baja lógica de un administrador; si es Coordinador pierde sus asignaciones."""
    if objetivo.rol == Rol.COORDINADOR:
        await quitar_asignaciones_de_administrador(db, objetivo.id)
    sellar_baja(objetivo, id_responsable)
    await db.flush()


async def cambiar_estado_administrador(
    db: AsyncSession,
    objetivo: Administrador,
    nuevo: EstadoRegistro,
    id_responsable: int,
) -> None:
    """Suspender o inactivar a un Coordinador también le quita sus asignaciones."""
    if not aplicar_estado(objetivo, nuevo, id_responsable):
        return
    if objetivo.rol == Rol.COORDINADOR and nuevo in (
        EstadoRegistro.SUSPENDIDO,
        EstadoRegistro.INACTIVO,
    ):
        await quitar_asignaciones_de_administrador(db, objetivo.id)


async def cambiar_estado_carrera(
    db: AsyncSession, carrera: Carrera, nuevo: EstadoRegistro, id_responsable: int
) -> None:
    """Cerrar o inactivar una carrera le quita la asignación. Sus materias no se tocan."""
    if not aplicar_estado(carrera, nuevo, id_responsable):
        return
    if nuevo in (EstadoRegistro.CERRADO, EstadoRegistro.INACTIVO):
        await quitar_asignaciones_de_carrera(db, carrera.id)


async def dar_de_baja_carrera(db: AsyncSession, carrera: Carrera, id_responsable: int) -> None:
    await quitar_asignaciones_de_carrera(db, carrera.id)
    sellar_baja(carrera, id_responsable)
    await db.flush()
