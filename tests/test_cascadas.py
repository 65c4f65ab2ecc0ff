"""Efectos en cascada de bajas y reasignaciones, incluida la atomicidad ante fallos."""
import pytest

from app.core.errores import ErrorValidacion, ReferenciaInexistente
from app.models import Administrador, Carrera, EstadoRegistro, Materia, Rol
from app.schemas.administrador import AdministradorUpdate
from app.schemas.carrera import CarreraCreate, CarreraUpdate
from app.services import administrador_service, carrera_service, cascadas
from app.services.alcance import Alcance
from conftest import principal_de


async def test_baja_de_coordinador_quita_sus_asignaciones(db, esc):
    rector = await esc.rector()
    coord = await esc.admin("Coordinador")
    c1 = await esc.carrera("Uno", coordinador=coord)
    c2 = await esc.carrera("Dos", coordinador=coord)

    await administrador_service.eliminar_administrador(
        db, principal_de(rector), Alcance.total(), coord.id
    )

    assert await esc.asignaciones() == set()
    baja = await esc.recargar(Administrador, coord.id)
    assert baja.estado == EstadoRegistro.INACTIVO
    assert baja.fecha_eliminacion is not None
    assert baja.id_administrador_eliminacion == rector.id
    # Las carreras quedan sin coordinador pero siguen activas.
    assert (await esc.recargar(Carrera, c1.id)).estado == EstadoRegistro.ACTIVO
    assert (await esc.recargar(Carrera, c2.id)).estado == EstadoRegistro.ACTIVO


async def test_fallo_a_mitad_de_la_baja_no_deja_cambios(db, esc, monkeypatch):
    rector = await esc.rector()
    coord = await esc.admin("Coordinador")
    carrera = await esc.carrera("Uno", coordinador=coord)

    def falla(*args, **kwargs):
        raise RuntimeError("fallo inyectado")

    monkeypatch.setattr(cascadas, "sellar_baja", falla)

    with pytest.raises(RuntimeError):
        await administrador_service.eliminar_administrador(
            db, principal_de(rector), Alcance.total(), coord.id
        )

    # El borrado de asignaciones ya se había ejecutado: el rollback lo revierte.
    assert await esc.asignaciones() == {(coord.id, carrera.id)}
    intacto = await esc.recargar(Administrador, coord.id)
    assert intacto.estado == EstadoRegistro.ACTIVO
    assert intacto.fecha_eliminacion is None


async def test_suspender_coordinador_quita_asignaciones(db, esc):
    rector = await esc.rector()
    coord = await esc.admin("Coordinador")
    await esc.carrera("Uno", coordinador=coord)

    await administrador_service.actualizar_administrador(
        db,
        principal_de(rector),
        Alcance.total(),
        coord.id,
        AdministradorUpdate(estado=EstadoRegistro.SUSPENDIDO),
    )

    assert await esc.asignaciones() == set()
    assert (await esc.recargar(Administrador, coord.id)).estado == EstadoRegistro.SUSPENDIDO


async def test_cambiar_rol_de_coordinador_quita_asignaciones(db, esc):
    rector = await esc.rector()
    coord = await esc.admin("Coordinador")
    await esc.carrera("Uno", coordinador=coord)

    await administrador_service.actualizar_administrador(
        db, principal_de(rector), Alcance.total(), coord.id, AdministradorUpdate(rol=Rol.RECTOR)
    )

    assert await esc.asignaciones() == set()
    assert (await esc.recargar(Administrador, coord.id)).rol == Rol.RECTOR


@pytest.mark.parametrize("estado", [EstadoRegistro.CERRADO, EstadoRegistro.INACTIVO])
async def test_cerrar_carrera_quita_asignacion_pero_no_toca_materias(db, esc, estado):
    rector = await esc.rector()
    coord = await esc.admin("Coordinador")
    carrera = await esc.carrera("Uno", coordinador=coord)
    materia = await esc.materia(carrera, "Materia")

    await carrera_service.actualizar_carrera(
        db, principal_de(rector), Alcance.total(), carrera.id, CarreraUpdate(estado=estado)
    )

    assert await esc.asignaciones() == set()
    cerrada = await esc.recargar(Carrera, carrera.id)
    assert cerrada.estado == estado
    assert cerrada.id_administrador_eliminacion == rector.id
    assert (await esc.recargar(Materia, materia.id)).estado == EstadoRegistro.ACTIVO


async def test_reactivar_carrera_limpia_auditoria(db, esc):
    rector = await esc.rector()
    carrera = await esc.carrera("Uno")
    await carrera_service.eliminar_carrera(db, principal_de(rector), Alcance.total(), carrera.id)
    assert (await esc.recargar(Carrera, carrera.id)).fecha_eliminacion is not None

    await carrera_service.actualizar_carrera(
        db,
        principal_de(rector),
        Alcance.total(),
        carrera.id,
        CarreraUpdate(estado=EstadoRegistro.ACTIVO),
    )

    reactivada = await esc.recargar(Carrera, carrera.id)
    assert reactivada.estado == EstadoRegistro.ACTIVO
    assert reactivada.fecha_eliminacion is None
    assert reactivada.id_administrador_eliminacion is None


async def test_reasignar_reemplaza_al_coordinador(db, esc):
    rector = await esc.rector()
    anterior = await esc.admin("Anterior")
    nuevo = await esc.admin("Nuevo")
    carrera = await esc.carrera("Uno", coordinador=anterior)

    _, id_coord = await carrera_service.actualizar_carrera(
        db, principal_de(rector), Alcance.total(), carrera.id, CarreraUpdate(id_coordinador=nuevo.id)
    )

    assert id_coord == nuevo.id
    assert await esc.asignaciones() == {(nuevo.id, carrera.id)}


async def test_reasignar_a_quien_no_es_coordinador_no_borra_la_asignacion(db, esc):
    rector = await esc.rector()
    coord = await esc.admin("Coordinador")
    carrera = await esc.carrera("Uno", coordinador=coord)

    with pytest.raises(ReferenciaInexistente):
        await carrera_service.actualizar_carrera(
            db,
            principal_de(rector),
            Alcance.total(),
            carrera.id,
            CarreraUpdate(id_coordinador=rector.id),
        )

    assert await esc.asignaciones() == {(coord.id, carrera.id)}


async def test_alta_de_carrera_con_coordinador_invalido_no_deja_la_carrera(db, esc):
    rector = await esc.rector()
    suspendido = await esc.admin("Suspendido", estado=EstadoRegistro.SUSPENDIDO)

    with pytest.raises(ReferenciaInexistente):
        await carrera_service.crear_carrera(
            db,
            principal_de(rector),
            Alcance.total(),
            CarreraCreate(nombre="Nueva", id_coordinador=suspendido.id),
        )

    assert await esc.contar(Carrera, Carrera.nombre == "Nueva") == 0


@pytest.mark.parametrize("con_estado", [False, True])
@pytest.mark.parametrize("estado", [EstadoRegistro.CERRADO, EstadoRegistro.INACTIVO])
async def test_no_se_asigna_coordinador_a_carrera_no_activa(db, esc, estado, con_estado):
    rector = await esc.rector()
    coord = await esc.admin("Coordinador")
    carrera = await esc.carrera("Uno", estado=estado)
    datos = {"id_coordinador": coord.id}
    if con_estado:
        datos["estado"] = estado

    with pytest.raises(ErrorValidacion):
        await carrera_service.actualizar_carrera(
            db, principal_de(rector), Alcance.total(), carrera.id, CarreraUpdate(**datos)
        )

    assert await esc.asignaciones() == set()


async def test_reactivar_carrera_con_coordinador(db, esc):
    rector = await esc.rector()
    coord = await esc.admin("Coordinador")
    carrera = await esc.carrera("Uno", estado=EstadoRegistro.CERRADO)

    _, id_coord = await carrera_service.actualizar_carrera(
        db,
        principal_de(rector),
        Alcance.total(),
        carrera.id,
        CarreraUpdate(estado=EstadoRegistro.ACTIVO, id_coordinador=coord.id),
    )

    assert id_coord == coord.id
    assert await esc.asignaciones() == {(coord.id, carrera.id)}
