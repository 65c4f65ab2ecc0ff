"""Servicio de administradores: alta, edición con reglas por campo y baja lógica."""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import transaccion
from app.core.errores import ErrorValidacion
from app.core.security import hash_password, validar_politica_contrasena
from app.models.administrador import Administrador
from app.models.tipos import EstadoRegistro, Rol
from app.schemas.administrador import AdministradorCreate, AdministradorUpdate
from app.services import cascadas
from app.services.alcance import Alcance, Principal
from app.services.autorizacion import Accion, Recurso, Solicitud, verificar
from app.services.consultas import exigir_activo, obtener_o_404

_NO_NULOS = frozenset({"nombre", "password", "rol", "estado"})
_CAMPOS_PERSONALES = ("nombre", "email", "dni", "telefono")


def exigir_politica(password: str) -> None:
    motivo = validar_politica_contrasena(password)
    if motivo is not None:
        raise ErrorValidacion(motivo)


async def listar_administradores(
    db: AsyncSession, principal: Principal, alcance: Alcance
) -> list[Administrador]:
    verificar(principal, alcance, Solicitud(Accion.LEER, Recurso.ADMINISTRADOR))
    q = (
        select(Administrador)
        .where(Administrador.estado.in_((EstadoRegistro.ACTIVO, EstadoRegistro.SUSPENDIDO)))
        .order_by(Administrador.nombre)
    )
    result = await db.execute(q)
    return list(result.scalars().all())


async def listar_coordinadores(db: AsyncSession) -> list[Administrador]:
    """Coordinadores activos (para asignar a una carrera)."""
    q = (
        select(Administrador)
        .where(
            Administrador.rol == Rol.COORDINADOR,
            Administrador.estado == EstadoRegistro.ACTIVO,
        )
        .order_by(Administrador.nombre)
    )
    result = await db.execute(q)
    return list(result.scalars().all())


async def obtener_administrador(
    db: AsyncSession, principal: Principal, alcance: Alcance, id_administrador: int
) -> Administrador:
    """Lectura por id sin filtrar por estado."""
    verificar(
        principal,
        alcance,
        Solicitud(Accion.LEER, Recurso.ADMINISTRADOR, id_objetivo=id_administrador),
    )
    return await obtener_o_404(db, Administrador, id_administrador, "Administrador no encontrado.")


async def crear_administrador(
    db: AsyncSession, principal: Principal, alcance: Alcance, datos: AdministradorCreate
) -> Administrador:
    verificar(principal, alcance, Solicitud(Accion.CREAR, Recurso.ADMINISTRADOR))
    exigir_politica(datos.password)
    async with transaccion(db):
        administrador = Administrador(
            nombre=datos.nombre,
            email=datos.email,
            password_hash=hash_password(datos.password),
            dni=datos.dni,
            telefono=datos.telefono,
            rol=datos.rol,
            estado=EstadoRegistro.ACTIVO,
        )
        db.add(administrador)
        await db.flush()
    return administrador


async def actualizar_administrador(
    db: AsyncSession,
    principal: Principal,
    alcance: Alcance,
    id_administrador: int,
    datos: AdministradorUpdate,
) -> Administrador:
    """Un Coordinador que envía rol o estado sobre sí mismo recibe campo_restringido y no se aplica nada."""
    cambios = {
        k: v for k, v in datos.model_dump(exclude_unset=True).items()
        if not (k in _NO_NULOS and v is None)
    }
    objetivo = await obtener_o_404(
        db, Administrador, id_administrador, "Administrador no encontrado."
    )
    permitidos = verificar(
        principal,
        alcance,
        Solicitud(
            Accion.ACTUALIZAR,
            Recurso.ADMINISTRADOR,
            id_objetivo=objetivo.id,
            campos=frozenset(cambios),
            estado_actual=objetivo.estado,
            estado_nuevo=cambios.get("estado"),
            rol_actual=objetivo.rol,
            rol_nuevo=cambios.get("rol"),
        ),
    )
    if permitidos is not None:
        cambios = {k: v for k, v in cambios.items() if k in permitidos}
    if not cambios:
        raise ErrorValidacion("No se proporcionaron campos válidos para actualizar.")
    if "password" in cambios:
        exigir_politica(cambios["password"])

    async with transaccion(db):
        for campo in _CAMPOS_PERSONALES:
            if campo in cambios:
                setattr(objetivo, campo, cambios[campo])
        if "password" in cambios:
            objetivo.password_hash = hash_password(cambios["password"])
        if "rol" in cambios and cambios["rol"] != objetivo.rol:
            era_coordinador = objetivo.rol == Rol.COORDINADOR
            objetivo.rol = cambios["rol"]
            if era_coordinador:
                await cascadas.quitar_asignaciones_de_administrador(db, objetivo.id)
        if "estado" in cambios:
            await cascadas.cambiar_estado_administrador(
                db, objetivo, cambios["estado"], principal.id
            )
        await db.flush()
    return objetivo


async def eliminar_administrador(
    db: AsyncSession, principal: Principal, alcance: Alcance, id_administrador: int
) -> Administrador:
    verificar(
        principal,
        alcance,
        Solicitud(Accion.ELIMINAR, Recurso.ADMINISTRADOR, id_objetivo=id_administrador),
    )
    objetivo = await obtener_o_404(
        db, Administrador, id_administrador, "Administrador no encontrado."
    )
    _exigir_no_inactivo(objetivo)
    async with transaccion(db):
        await cascadas.dar_de_baja_administrador(db, objetivo, principal.id)
    return objetivo


def _exigir_no_inactivo(objetivo: Administrador) -> None:
    if objetivo.estado != EstadoRegistro.SUSPENDIDO:
        exigir_activo(objetivo, "Administrador no encontrado o ya estaba inactivo.")
