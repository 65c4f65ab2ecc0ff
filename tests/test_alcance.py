import pytest
from sqlalchemy import select

from app.models import EstadoRegistro, Materia, Rol
from app.services.alcance import Alcance, Principal, carreras_asignadas, resolver_alcance
from app.services.materia_service import listar_materias
from conftest import principal_de


async def test_rector_tiene_alcance_irrestricto(db, esc):
    rector = await esc.rector()
    alcance = await resolver_alcance(db, principal_de(rector))
    assert alcance.irrestricto
    assert alcance.permite(12345)


async def test_coordinador_sin_asignaciones_tiene_alcance_vacio(db, esc):
    coord = await esc.admin("Sin carreras")
    carrera = await esc.carrera("Enfermería")
    await esc.materia(carrera, "Anatomía")

    alcance = await resolver_alcance(db, principal_de(coord))

    assert alcance.vacio
    assert not alcance.permite(carrera.id)
    assert not alcance.permite(None)
    # Un alcance vacío nunca se interpreta como "sin filtro".
    assert await listar_materias(db, alcance) == []


async def test_coordinador_ve_solo_sus_carreras_activas(db, esc):
    coord = await esc.admin("Coordinadora")
    activa = await esc.carrera("Informática", coordinador=coord)
    await esc.carrera("Cerrada", coordinador=coord, estado=EstadoRegistro.CERRADO)
    ajena = await esc.carrera("Turismo")
    propia = await esc.materia(activa, "Programación")
    await esc.materia(ajena, "Geografía")

    alcance = await resolver_alcance(db, principal_de(coord))

    assert alcance == Alcance.restringido({activa.id})
    assert await carreras_asignadas(db, coord.id) == [activa.id]
    assert [m.id for m in await listar_materias(db, alcance)] == [propia.id]


async def test_filtro_por_alcance_en_sql(db, esc):
    c1 = await esc.carrera("Uno")
    c2 = await esc.carrera("Dos")
    m1 = await esc.materia(c1, "A")
    await esc.materia(c2, "B")

    q = select(Materia.id).where(Alcance.restringido({c1.id}).filtro(Materia.id_carrera))
    assert list((await db.execute(q)).scalars()) == [m1.id]

    q = select(Materia.id).where(Alcance.restringido([]).filtro(Materia.id_carrera))
    assert list((await db.execute(q)).scalars()) == []

    q = select(Materia.id).where(Alcance.total().filtro(Materia.id_carrera))
    assert len(list((await db.execute(q)).scalars())) == 2


async def test_rol_desconocido_falla_en_vez_de_abrir_el_alcance(db):
    with pytest.raises(ValueError):
        await resolver_alcance(db, Principal(id=1, nombre="X", rol="Decano"))


async def test_el_alcance_se_recalcula_en_cada_resolucion(db, esc):
    coord = await esc.admin("Coordinador")
    carrera = await esc.carrera("Química")
    assert (await resolver_alcance(db, principal_de(coord))).vacio

    await esc.carrera("Física", coordinador=coord)
    alcance = await resolver_alcance(db, principal_de(coord))
    assert not alcance.vacio
    assert not alcance.permite(carrera.id)
    assert principal_de(coord).rol is Rol.COORDINADOR
