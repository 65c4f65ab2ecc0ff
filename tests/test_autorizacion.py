"""Tabla de reglas de la guardia de autorización (sin base de datos)."""
import pytest

from app.core.errores import MotivoDenegacion, Prohibido
from app.models.tipos import EstadoRegistro, Rol
from app.services.alcance import Alcance, Principal
from app.services.autorizacion import (
    CAMPOS_CARRERA_COORDINADOR,
    CAMPOS_PERSONALES,
    Accion,
    Denegar,
    Permitir,
    PermitirConRestriccion,
    Recurso,
    Solicitud,
    autorizar,
    exigir,
)

RECTOR = Principal(id=1, nombre="Rector", rol=Rol.RECTOR)
COORD = Principal(id=2, nombre="Coordinadora", rol=Rol.COORDINADOR)
TOTAL = Alcance.total()
CARRERA_10 = Alcance.restringido({10})
VACIO = Alcance.restringido([])


def _motivo(decision):
    assert isinstance(decision, Denegar), decision
    return decision.motivo


@pytest.mark.parametrize("recurso", [Recurso.MATERIA, Recurso.HORARIO, Recurso.CORRELATIVIDAD])
@pytest.mark.parametrize("accion", list(Accion))
def test_recursos_de_carrera_siguen_el_alcance(recurso, accion):
    dentro = Solicitud(accion, recurso, id_carrera=10)
    fuera = Solicitud(accion, recurso, id_carrera=11)

    assert autorizar(RECTOR, TOTAL, fuera) == Permitir()
    assert autorizar(COORD, CARRERA_10, dentro) == Permitir()
    assert _motivo(autorizar(COORD, CARRERA_10, fuera)) is MotivoDenegacion.FUERA_DE_ALCANCE
    assert _motivo(autorizar(COORD, VACIO, dentro)) is MotivoDenegacion.FUERA_DE_ALCANCE


def test_carrera_sin_dueno_resuelto_se_deniega_al_coordinador():
    solicitud = Solicitud(Accion.LEER, Recurso.MATERIA, id_carrera=None)
    assert _motivo(autorizar(COORD, CARRERA_10, solicitud)) is MotivoDenegacion.FUERA_DE_ALCANCE


@pytest.mark.parametrize("accion", [Accion.CREAR, Accion.ELIMINAR])
def test_crear_y_eliminar_carrera_es_solo_del_rector(accion):
    solicitud = Solicitud(accion, Recurso.CARRERA, id_carrera=10)
    assert autorizar(RECTOR, TOTAL, solicitud) == Permitir()
    assert _motivo(autorizar(COORD, CARRERA_10, solicitud)) is MotivoDenegacion.ROL_INSUFICIENTE


def test_coordinador_edita_su_carrera_con_campos_restringidos():
    solicitud = Solicitud(
        Accion.ACTUALIZAR, Recurso.CARRERA, id_carrera=10, campos=frozenset({"nombre", "modalidad"})
    )
    decision = autorizar(COORD, CARRERA_10, solicitud)
    assert decision == PermitirConRestriccion(CAMPOS_CARRERA_COORDINADOR)


def test_coordinador_no_edita_carrera_ajena():
    solicitud = Solicitud(Accion.ACTUALIZAR, Recurso.CARRERA, id_carrera=11, campos=frozenset({"nombre"}))
    assert _motivo(autorizar(COORD, CARRERA_10, solicitud)) is MotivoDenegacion.FUERA_DE_ALCANCE


@pytest.mark.parametrize("estado", [EstadoRegistro.CERRADO, EstadoRegistro.INACTIVO])
def test_coordinador_no_cierra_ni_inactiva_su_carrera(estado):
    solicitud = Solicitud(
        Accion.ACTUALIZAR,
        Recurso.CARRERA,
        id_carrera=10,
        campos=frozenset({"estado"}),
        estado_actual=EstadoRegistro.ACTIVO,
        estado_nuevo=estado,
    )
    assert _motivo(autorizar(COORD, CARRERA_10, solicitud)) is MotivoDenegacion.ROL_INSUFICIENTE
    assert autorizar(RECTOR, TOTAL, solicitud) == Permitir()


def test_coordinador_no_reasigna_coordinador():
    solicitud = Solicitud(
        Accion.ACTUALIZAR, Recurso.CARRERA, id_carrera=10, campos=frozenset({"id_coordinador"})
    )
    assert _motivo(autorizar(COORD, CARRERA_10, solicitud)) is MotivoDenegacion.CAMPO_RESTRINGIDO


def test_ambos_roles_leen_administradores():
    solicitud = Solicitud(Accion.LEER, Recurso.ADMINISTRADOR, id_objetivo=99)
    assert autorizar(RECTOR, TOTAL, solicitud) == Permitir()
    assert autorizar(COORD, VACIO, solicitud) == Permitir()


def test_coordinador_solo_edita_sus_datos_personales():
    propio = Solicitud(
        Accion.ACTUALIZAR, Recurso.ADMINISTRADOR, id_objetivo=COORD.id, campos=frozenset({"telefono"})
    )
    ajeno = Solicitud(
        Accion.ACTUALIZAR, Recurso.ADMINISTRADOR, id_objetivo=RECTOR.id, campos=frozenset({"telefono"})
    )
    assert autorizar(COORD, VACIO, propio) == PermitirConRestriccion(CAMPOS_PERSONALES)
    assert _motivo(autorizar(COORD, VACIO, ajeno)) is MotivoDenegacion.FUERA_DE_ALCANCE


@pytest.mark.parametrize("campo", ["rol", "estado"])
def test_coordinador_que_envia_rol_o_estado_propio_es_rechazado_entero(campo):
    solicitud = Solicitud(
        Accion.ACTUALIZAR,
        Recurso.ADMINISTRADOR,
        id_objetivo=COORD.id,
        campos=frozenset({"nombre", campo}),
        estado_actual=EstadoRegistro.ACTIVO,
        estado_nuevo=EstadoRegistro.ACTIVO if campo == "estado" else None,
        rol_actual=Rol.COORDINADOR,
        rol_nuevo=Rol.RECTOR if campo == "rol" else None,
    )
    assert _motivo(autorizar(COORD, VACIO, solicitud)) is MotivoDenegacion.CAMPO_RESTRINGIDO


@pytest.mark.parametrize("principal", [RECTOR, COORD])
@pytest.mark.parametrize("estado", [EstadoRegistro.SUSPENDIDO, EstadoRegistro.INACTIVO])
def test_nadie_se_suspende_ni_inactiva_a_si_mismo(principal, estado):
    solicitud = Solicitud(
        Accion.ACTUALIZAR,
        Recurso.ADMINISTRADOR,
        id_objetivo=principal.id,
        campos=frozenset({"estado"}),
        estado_actual=EstadoRegistro.ACTIVO,
        estado_nuevo=estado,
    )
    assert _motivo(autorizar(principal, TOTAL, solicitud)) is MotivoDenegacion.AUTOPROTECCION


def test_rector_no_cambia_su_propio_rol_pero_si_el_ajeno():
    propio = Solicitud(
        Accion.ACTUALIZAR,
        Recurso.ADMINISTRADOR,
        id_objetivo=RECTOR.id,
        campos=frozenset({"rol"}),
        rol_actual=Rol.RECTOR,
        rol_nuevo=Rol.COORDINADOR,
    )
    ajeno = Solicitud(
        Accion.ACTUALIZAR,
        Recurso.ADMINISTRADOR,
        id_objetivo=COORD.id,
        campos=frozenset({"rol"}),
        rol_actual=Rol.COORDINADOR,
        rol_nuevo=Rol.RECTOR,
    )
    assert _motivo(autorizar(RECTOR, TOTAL, propio)) is MotivoDenegacion.CAMPO_RESTRINGIDO
    assert autorizar(RECTOR, TOTAL, ajeno) == Permitir()


def test_eliminar_administrador():
    assert autorizar(RECTOR, TOTAL, Solicitud(Accion.ELIMINAR, Recurso.ADMINISTRADOR, id_objetivo=5)) == Permitir()
    assert (
        _motivo(autorizar(RECTOR, TOTAL, Solicitud(Accion.ELIMINAR, Recurso.ADMINISTRADOR, id_objetivo=RECTOR.id)))
        is MotivoDenegacion.AUTOPROTECCION
    )
    assert (
        _motivo(autorizar(COORD, VACIO, Solicitud(Accion.ELIMINAR, Recurso.ADMINISTRADOR, id_objetivo=5)))
        is MotivoDenegacion.ROL_INSUFICIENTE
    )


def test_rol_desconocido_no_cae_en_un_permiso_por_defecto():
    intruso = Principal(id=3, nombre="Decano", rol="Decano")
    with pytest.raises(ValueError):
        autorizar(intruso, TOTAL, Solicitud(Accion.LEER, Recurso.MATERIA, id_carrera=10))


def test_exigir_traduce_la_decision():
    assert exigir(Permitir()) is None
    assert exigir(PermitirConRestriccion(frozenset({"nombre"}))) == frozenset({"nombre"})

    with pytest.raises(Prohibido) as exc:
        exigir(Denegar(MotivoDenegacion.FUERA_DE_ALCANCE, "fuera"))
    assert exc.value.status_code == 403
    assert exc.value.a_respuesta() == {"detail": "fuera", "tipo": "prohibido", "motivo": "fuera_de_alcance"}

    with pytest.raises(Prohibido) as exc:
        exigir(Denegar(MotivoDenegacion.CAMPO_RESTRINGIDO, "campo"))
    assert exc.value.status_code == 422
