"""Catálogo público: visibilidad, correlativas en ambos sentidos, destacadas y PDF."""
from datetime import time

from app.models import DiaSemana, EstadoRegistro, EstadoRequisito, TipoCorrelatividad
from app.services import catalogo_service

API = "/api/v1"


async def test_solo_carreras_activas(client, esc):
    activa = await esc.carrera("Activa")
    await esc.carrera("Cerrada", estado=EstadoRegistro.CERRADO)
    await esc.carrera("Inactiva", estado=EstadoRegistro.INACTIVO)

    r = await client.get(f"{API}/carreras")

    assert r.json() == [{"id": activa.id, "nombre": "Activa"}]


async def test_detalle_de_carrera_con_coordinador_activo(client, esc):
    coord = await esc.admin("Ana", email="ana@instituto.edu", telefono="555-1234")
    carrera = await esc.carrera("Informática", coordinador=coord, duracion="3 años")
    sin_coord = await esc.carrera("Turismo")

    r = await client.get(f"{API}/carreras/{carrera.id}")
    assert r.json()["coordinador"] == {
        "nombre": "Ana", "email": "ana@instituto.edu", "telefono": "555-1234"
    }
    assert r.json()["duracion"] == "3 años"

    r = await client.get(f"{API}/carreras/{sin_coord.id}")
    assert r.json()["coordinador"] is None

    cerrada = await esc.carrera("Cerrada", estado=EstadoRegistro.CERRADO)
    r = await client.get(f"{API}/carreras/{cerrada.id}")
    assert r.status_code == 404


async def test_materias_requieren_carrera_activa(client, esc):
    activa = await esc.carrera("Activa")
    cerrada = await esc.carrera("Cerrada", estado=EstadoRegistro.CERRADO)
    visible = await esc.materia(activa, "Matemática", anio=1)
    await esc.materia(activa, "Matemática II", anio=2, estado=EstadoRegistro.INACTIVO)
    oculta = await esc.materia(cerrada, "Matemática Aplicada", anio=1)

    r = await client.get(f"{API}/materias/buscar", params={"nombre": "MATEM"})
    assert [m["id"] for m in r.json()] == [visible.id]

    r = await client.get(f"{API}/materias/anio/1")
    assert [m["id"] for m in r.json()] == [visible.id]

    r = await client.get(f"{API}/materias/{oculta.id}")
    assert r.status_code == 404

    r = await client.get(f"{API}/anios", params={"id_carrera": activa.id})
    assert r.json() == [1]


async def test_materias_de_carrera_filtradas_por_anio(client, esc):
    carrera = await esc.carrera("Carrera")
    m1 = await esc.materia(carrera, "Primera", anio=1)
    m2 = await esc.materia(carrera, "Segunda", anio=2)

    r = await client.get(f"{API}/materias", params={"id_carrera": carrera.id})
    assert [m["id"] for m in r.json()] == [m1.id, m2.id]

    r = await client.get(f"{API}/materias", params={"id_carrera": carrera.id, "anio": 2})
    assert [m["id"] for m in r.json()] == [m2.id]


async def test_correlativa_creada_aparece_en_ambos_sentidos(client, esc):
    rector = await esc.rector()
    carrera = await esc.carrera("Carrera")
    base = await esc.materia(carrera, "Programación I", anio=1)
    siguiente = await esc.materia(carrera, "Programación II", anio=2)

    r = await client.post(
        f"{API}/admin/correlatividades",
        headers=esc.headers(rector),
        json={
            "id_materia": siguiente.id,
            "id_materia_requisito": base.id,
            "tipo": "cursar",
            "estado_requisito": "regular",
        },
    )
    assert r.status_code == 201
    id_correlatividad = r.json()["id"]

    detalle = (await client.get(f"{API}/materias/{siguiente.id}")).json()
    assert detalle["requisitos_cursar_regular"] == [
        {"id": base.id, "nombre": "Programación I", "estado_requisito": "regular"}
    ]
    assert detalle["requisitos_cursar_aprobada"] == []
    assert detalle["requisitos_rendir"] == []

    dependientes = (await client.get(f"{API}/materias/{base.id}/dependientes")).json()
    assert dependientes == [{
        "id": siguiente.id,
        "nombre": "Programación II",
        "anio": 2,
        "tipo": "cursar",
        "estado_requisito": "regular",
    }]

    r = await client.delete(
        f"{API}/admin/correlatividades/{id_correlatividad}", headers=esc.headers(rector)
    )
    assert r.status_code == 200
    assert (await client.get(f"{API}/materias/{base.id}/dependientes")).json() == []
    assert (await client.get(f"{API}/materias/{siguiente.id}")).json()["requisitos_cursar_regular"] == []


async def test_detalle_separa_requisitos_por_tipo(client, esc):
    carrera = await esc.carrera("Carrera")
    a = await esc.materia(carrera, "A")
    b = await esc.materia(carrera, "B")
    c = await esc.materia(carrera, "C")
    objetivo = await esc.materia(carrera, "Objetivo", anio=2)
    await esc.correlatividad(objetivo, a, TipoCorrelatividad.CURSAR, EstadoRequisito.APROBADA)
    await esc.correlatividad(objetivo, b, TipoCorrelatividad.CURSAR, EstadoRequisito.REGULAR)
    await esc.correlatividad(objetivo, c, TipoCorrelatividad.RENDIR, EstadoRequisito.APROBADA)
    await esc.horario(objetivo, DiaSemana.JUEVES, time(18), time(20))
    await esc.horario(objetivo, DiaSemana.MARTES, time(18), time(20))

    detalle = (await client.get(f"{API}/materias/{objetivo.id}")).json()

    assert [x["id"] for x in detalle["requisitos_cursar_aprobada"]] == [a.id]
    assert [x["id"] for x in detalle["requisitos_cursar_regular"]] == [b.id]
    assert [x["id"] for x in detalle["requisitos_rendir"]] == [c.id]
    assert [h["dia_semana"] for h in detalle["horarios"]] == ["Martes", "Jueves"]


async def test_horarios_publicos_solo_activos(client, esc):
    carrera = await esc.carrera("Carrera")
    materia = await esc.materia(carrera, "Materia")
    await esc.horario(materia, DiaSemana.LUNES, time(8), time(10))
    await esc.horario(materia, DiaSemana.MARTES, time(8), time(10), estado=EstadoRegistro.INACTIVO)

    r = await client.get(f"{API}/horarios", params={"id_materia": materia.id})

    assert [h["dia_semana"] for h in r.json()] == ["Lunes"]


async def test_destacadas_ordenadas_por_vistas(client, esc):
    carrera = await esc.carrera("Carrera")
    poco = await esc.materia(carrera, "Poco vista")
    mucho = await esc.materia(carrera, "Muy vista")
    await esc.horario(mucho, DiaSemana.LUNES, time(8), time(10))

    for _ in range(3):
        r = await client.post(f"{API}/destacadas/{mucho.id}/vista")
        assert r.status_code == 200
    await client.post(f"{API}/destacadas/{poco.id}/vista")

    r = await client.get(f"{API}/destacadas")
    body = r.json()
    assert [m["id"] for m in body["materias"]] == [mucho.id, poco.id]
    assert body["horarios"] == [{
        "dia_semana": "Lunes",
        "hora_inicio": "08:00:00",
        "hora_fin": "10:00:00",
        "id_materia": mucho.id,
        "nombre_materia": "Muy vista",
    }]


async def test_vista_de_materia_no_visible_responde_404(client, esc):
    cerrada = await esc.carrera("Cerrada", estado=EstadoRegistro.CERRADO)
    materia = await esc.materia(cerrada, "Oculta")
    r = await client.post(f"{API}/destacadas/{materia.id}/vista")
    assert r.status_code == 404


async def test_plan_de_estudio_pdf(client, esc):
    carrera = await esc.carrera("Técnico en Informática", duracion="3 años", anio_aprobacion=2020)
    a = await esc.materia(carrera, "Programación I", anio=1, total_horas_anuales="128 hs")
    b = await esc.materia(carrera, "Programación II", anio=2, total_horas_anuales="96")
    await esc.correlatividad(b, a, TipoCorrelatividad.CURSAR, EstadoRequisito.APROBADA)

    r = await client.get(f"{API}/carreras/{carrera.id}/plan-estudio-pdf")

    assert r.status_code == 200
    assert r.headers["content-type"] == "application/pdf"
    assert r.headers["content-disposition"] == (
        'attachment; filename="Plan_Estudio_Tecnico_en_Informatica.pdf"'
    )
    assert r.content.startswith(b"%PDF")


async def test_plan_de_estudio_de_carrera_inactiva_responde_404(client, esc):
    carrera = await esc.carrera("Vieja", estado=EstadoRegistro.INACTIVO)
    r = await client.get(f"{API}/carreras/{carrera.id}/plan-estudio-pdf")
    assert r.status_code == 404
    assert r.json()["tipo"] == "no_encontrado"


async def test_plan_omite_requisitos_de_carreras_no_activas(db, esc):
    carrera = await esc.carrera("Enfermería")
    cerrada = await esc.carrera("Cerrada", estado=EstadoRegistro.CERRADO)
    base = await esc.materia(carrera, "Anatomía", anio=1)
    externa = await esc.materia(cerrada, "Biología", anio=1)
    objetivo = await esc.materia(carrera, "Fisiología", anio=2)
    await esc.correlatividad(objetivo, base, TipoCorrelatividad.CURSAR, EstadoRequisito.APROBADA)
    await esc.correlatividad(objetivo, externa, TipoCorrelatividad.CURSAR, EstadoRequisito.APROBADA)

    plan = await catalogo_service.obtener_plan_estudio(db, carrera.id)

    fila = plan.materias_por_anio[2][0]
    assert fila.cursar_aprobada == [base.id]
    requisitos = await catalogo_service.requisitos_de(db, objetivo.id)
    assert [m.id for m, _, _ in requisitos] == fila.cursar_aprobada
