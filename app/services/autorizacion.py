"""Guardia de autorización: tabla de reglas por (recurso, acción).

Cada regla combina rol, alcance, identidad del objetivo y estado de la entidad
y devuelve una decisión: `Permitir`, `PermitirConRestriccion` (conjunto de
campos que puede modificar) o `Denegar` con un motivo verificable.
"""
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

from app.core.errores import MotivoDenegacion, Prohibido
from app.models.tipos import EstadoRegistro, Rol
from app.services.alcance import Alcance, Principal


class Accion(str, Enum):
    LEER = "leer"
    CREAR = "crear"
    ACTUALIZAR = "actualizar"
    ELIMINAR = "eliminar"


class Recurso(str, Enum):
    CARRERA = "carrera"
    MATERIA = "materia"
    HORARIO = "horario"
    CORRELATIVIDAD = "correlatividad"
    ADMINISTRADOR = "administrador"


# Campos que un Coordinador puede tocar en su propio registro o en una carrera asignada.
CAMPOS_PERSONALES = frozenset({"nombre", "email", "password", "dni", "telefono"})
CAMPOS_CARRERA_COORDINADOR = frozenset(
    {"nombre", "duracion", "modalidad", "anio_aprobacion", "estado"}
)
ESTADOS_DE_BAJA = frozenset({EstadoRegistro.SUSPENDIDO, EstadoRegistro.INACTIVO})


@dataclass(frozen=True)
class Solicitud:
    """Operación pedida. `id_carrera` es la carrera dueña, resuelta transitivamente."""

    accion: Accion
    recurso: Recurso
    id_carrera: int | None = None
    id_objetivo: int | None = None
    campos: frozenset[str] = field(default_factory=frozenset)
    estado_actual: EstadoRegistro | None = None
    estado_nuevo: EstadoRegistro | None = None
    rol_actual: Rol | None = None
    rol_nuevo: Rol | None = None


@dataclass(frozen=True)
class Permitir:
    pass


@dataclass(frozen=True)
class PermitirConRestriccion:
    campos: frozenset[str]


@dataclass(frozen=True)
class Denegar:
    motivo: MotivoDenegacion
    mensaje: str


Decision = Permitir | PermitirConRestriccion | Denegar
Regla = Callable[[Principal, Alcance, Solicitud], Decision]


def _rol_no_contemplado(rol: Rol) -> ValueError:
    return ValueError(f"Rol no contemplado en la tabla de autorización: {rol!r}")


def _solo_rector(principal: Principal, mensaje: str) -> Decision:
    if principal.rol is Rol.RECTOR:
        return Permitir()
    if principal.rol is Rol.COORDINADOR:
        return Denegar(MotivoDenegacion.ROL_INSUFICIENTE, mensaje)
    raise _rol_no_contemplado(principal.rol)


def _por_alcance(principal: Principal, alcance: Alcance, solicitud: Solicitud) -> Decision:
    """Rector sobre cualquier carrera; Coordinador solo si la carrera dueña está en su alcance."""
    if principal.rol is Rol.RECTOR:
        return Permitir()
    if principal.rol is Rol.COORDINADOR:
        if alcance.permite(solicitud.id_carrera):
            return Permitir()
        return Denegar(
            MotivoDenegacion.FUERA_DE_ALCANCE,
            "No coordina la carrera de este recurso.",
        )
    raise _rol_no_contemplado(principal.rol)


def _crear_carrera(principal: Principal, alcance: Alcance, solicitud: Solicitud) -> Decision:
    return _solo_rector(principal, "Solo el Rector puede crear carreras.")


def _eliminar_carrera(principal: Principal, alcance: Alcance, solicitud: Solicitud) -> Decision:
    return _solo_rector(principal, "Solo el Rector puede eliminar carreras.")


def _actualizar_carrera(principal: Principal, alcance: Alcance, solicitud: Solicitud) -> Decision:
    if principal.rol is Rol.RECTOR:
        return Permitir()
    if principal.rol is Rol.COORDINADOR:
        if not alcance.permite(solicitud.id_carrera):
            return Denegar(
                MotivoDenegacion.FUERA_DE_ALCANCE,
                "Solo puede actualizar carreras que le han sido asignadas.",
            )
        if (
            solicitud.estado_nuevo in (EstadoRegistro.CERRADO, EstadoRegistro.INACTIVO)
            and solicitud.estado_nuevo != solicitud.estado_actual
        ):
            return Denegar(
                MotivoDenegacion.ROL_INSUFICIENTE,
                "Solo el Rector puede cerrar o inactivar una carrera.",
            )
        restringidos = solicitud.campos - CAMPOS_CARRERA_COORDINADOR
        if restringidos:
            return Denegar(
                MotivoDenegacion.CAMPO_RESTRINGIDO,
                f"Un Coordinador no puede modificar: {', '.join(sorted(restringidos))}.",
            )
        return PermitirConRestriccion(CAMPOS_CARRERA_COORDINADOR)
    raise _rol_no_contemplado(principal.rol)


def _leer_administrador(principal: Principal, alcance: Alcance, solicitud: Solicitud) -> Decision:
    if principal.rol in (Rol.RECTOR, Rol.COORDINADOR):
        return Permitir()
    raise _rol_no_contemplado(principal.rol)


def _crear_administrador(principal: Principal, alcance: Alcance, solicitud: Solicitud) -> Decision:
    return _solo_rector(principal, "Solo el Rector puede crear administradores.")


def _actualizar_administrador(
    principal: Principal, alcance: Alcance, solicitud: Solicitud
) -> Decision:
    es_propio = solicitud.id_objetivo == principal.id
    # Autoprotección: vale para cualquier rol y se evalúa antes que el resto.
    if (
        es_propio
        and solicitud.estado_nuevo in ESTADOS_DE_BAJA
        and solicitud.estado_nuevo != solicitud.estado_actual
    ):
        return Denegar(
            MotivoDenegacion.AUTOPROTECCION,
            "Un administrador no puede suspender o inactivar su propia cuenta.",
        )
    if principal.rol is Rol.RECTOR:
        if es_propio and solicitud.rol_nuevo is not None and solicitud.rol_nuevo != solicitud.rol_actual:
            return Denegar(
                MotivoDenegacion.CAMPO_RESTRINGIDO,
                "Un administrador no puede cambiar su propio rol.",
            )
        return Permitir()
    if principal.rol is Rol.COORDINADOR:
        if not es_propio:
            return Denegar(
                MotivoDenegacion.FUERA_DE_ALCANCE,
                "Un Coordinador solo puede editar sus propios datos.",
            )
        restringidos = solicitud.campos - CAMPOS_PERSONALES
        if restringidos:
            return Denegar(
                MotivoDenegacion.CAMPO_RESTRINGIDO,
                f"Un Coordinador no puede modificar: {', '.join(sorted(restringidos))}.",
            )
        return PermitirConRestriccion(CAMPOS_PERSONALES)
    raise _rol_no_contemplado(principal.rol)


def _eliminar_administrador(
    principal: Principal, alcance: Alcance, solicitud: Solicitud
) -> Decision:
    if solicitud.id_objetivo == principal.id:
        return Denegar(
            MotivoDenegacion.AUTOPROTECCION,
            "Un administrador no puede eliminarse a sí mismo.",
        )
    return _solo_rector(principal, "Solo el Rector puede dar de baja administradores.")


REGLAS: dict[tuple[Recurso, Accion], Regla] = {
    (Recurso.CARRERA, Accion.LEER): _por_alcance,
    (Recurso.CARRERA, Accion.CREAR): _crear_carrera,
    (Recurso.CARRERA, Accion.ACTUALIZAR): _actualizar_carrera,
    (Recurso.CARRERA, Accion.ELIMINAR): _eliminar_carrera,
    (Recurso.ADMINISTRADOR, Accion.LEER): _leer_administrador,
    (Recurso.ADMINISTRADOR, Accion.CREAR): _crear_administrador,
    (Recurso.ADMINISTRADOR, Accion.ACTUALIZAR): _actualizar_administrador,
    (Recurso.ADMINISTRADOR, Accion.ELIMINAR): _eliminar_administrador,
}
for _recurso in (Recurso.MATERIA, Recurso.HORARIO, Recurso.CORRELATIVIDAD):
    for _accion in Accion:
        REGLAS[(_recurso, _accion)] = _por_alcance


def autorizar(principal: Principal, alcance: Alcance, solicitud: Solicitud) -> Decision:
    """Evalúa la regla de (recurso, acción). No consulta la base de datos."""
    regla = REGLAS[(solicitud.recurso, solicitud.accion)]
    return regla(principal, alcance, solicitud)


def exigir(decision: Decision) -> frozenset[str] | None:
    """Lanza `Prohibido` si la decisión es Denegar.

    Devuelve los campos permitidos para `PermitirConRestriccion` y None
    cuando no hay restricción de campos.
    """
    if isinstance(decision, Denegar):
        raise Prohibido(decision.mensaje, decision.motivo)
    if isinstance(decision, PermitirConRestriccion):
        return decision.campos
    return None


def verificar(principal: Principal, alcance: Alcance, solicitud: Solicitud) -> frozenset[str] | None:
    """Atajo de `exigir(autorizar(...))` usado por los servicios."""
    return exigir(autorizar(principal, alcance, solicitud))
