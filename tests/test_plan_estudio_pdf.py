import pytest

from app.services.plan_estudio_pdf import (
    GAP_BEFORE_BLOCK,
    MARGIN,
    MIN_ROW_HEIGHT,
    TITLE_BLOCK_HEIGHT,
    USABLE_BOTTOM,
    FilaPlan,
    PlanEstudio,
    TipoFila,
    alto_fila,
    generar_plan_estudio_pdf,
    horas_a_entero,
    maquetar,
    nombre_archivo_plan,
    texto_anio,
)


def _plan(anios: int, por_anio: int, horas: str = "64") -> PlanEstudio:
    plan = PlanEstudio(nombre_carrera="Técnico en Informática")
    n = 1
    for anio in range(1, anios + 1):
        filas = []
        for _ in range(por_anio):
            filas.append(FilaPlan(id=n, nombre=f"Materia {n}", total_horas_anuales=horas))
            n += 1
        plan.materias_por_anio[anio] = filas
    return plan


@pytest.mark.parametrize(
    "valor, esperado",
    [("128 hs", 128), ("96", 96), (" 64 horas", 64), ("N/D", 0), ("", 0), (None, 0), (32, 32)],
)
def test_horas_a_entero(valor, esperado):
    assert horas_a_entero(valor) == esperado


def test_texto_anio():
    assert texto_anio(1) == "PRIMER AÑO"
    assert texto_anio(4) == "CUARTO AÑO"
    assert texto_anio(5) == "5° AÑO"


def test_alto_fila_tiene_piso_y_crece_con_el_texto():
    corta = FilaPlan(id=1, nombre="Inglés")
    assert alto_fila(corta) == MIN_ROW_HEIGHT

    nombre_largo = FilaPlan(id=2, nombre="Práctica Profesionalizante " * 6)
    assert alto_fila(nombre_largo) > MIN_ROW_HEIGHT

    muchas_correlativas = FilaPlan(id=3, nombre="Final", cursar_regular=list(range(100, 140)))
    assert alto_fila(muchas_correlativas) > MIN_ROW_HEIGHT


def test_plan_chico_entra_en_una_pagina():
    maquetacion = maquetar(_plan(anios=2, por_anio=2))

    assert len(maquetacion.paginas) == 1
    pagina = maquetacion.paginas[0]
    assert pagina.con_titulo
    assert pagina.filas[0].tipo is TipoFila.ENCABEZADO_ANIO
    assert pagina.filas[0].y == pytest.approx(MARGIN + TITLE_BLOCK_HEIGHT + GAP_BEFORE_BLOCK)
    assert pagina.filas[-1].tipo is TipoFila.TOTAL_CARRERA


def test_totales_de_horas():
    maquetacion = maquetar(_plan(anios=2, por_anio=3, horas="64 hs"))
    assert maquetacion.horas_por_anio == {1: 192, 2: 192}
    assert maquetacion.horas_carrera == 384


def test_un_bloque_anual_nunca_se_parte():
    maquetacion = maquetar(_plan(anios=3, por_anio=10))

    assert len(maquetacion.paginas) == 3
    for anio in (1, 2, 3):
        paginas_del_anio = {
            i for i, p in enumerate(maquetacion.paginas) for f in p.filas if f.anio == anio
        }
        assert len(paginas_del_anio) == 1
    for pagina in maquetacion.paginas:
        for fila in pagina.filas:
            assert fila.y + fila.alto <= USABLE_BOTTOM


def test_bloque_mas_alto_que_una_pagina_empieza_en_pagina_nueva():
    maquetacion = maquetar(_plan(anios=1, por_anio=40))

    # La primera página queda solo con el título.
    assert maquetacion.paginas[0].filas == []
    assert maquetacion.paginas[0].con_titulo
    segunda = maquetacion.paginas[1]
    assert segunda.filas[0].y == pytest.approx(MARGIN + GAP_BEFORE_BLOCK)
    assert sum(1 for f in segunda.filas if f.tipo is TipoFila.MATERIA) == 40
    assert all(p.filas or p.con_titulo for p in maquetacion.paginas)


def test_plan_sin_materias_solo_tiene_total_de_carrera():
    maquetacion = maquetar(PlanEstudio(nombre_carrera="Vacía"))
    assert len(maquetacion.paginas) == 1
    assert [f.tipo for f in maquetacion.paginas[0].filas] == [TipoFila.TOTAL_CARRERA]
    assert maquetacion.horas_carrera == 0


def test_nombre_de_archivo():
    assert nombre_archivo_plan("Técnico en Informática") == "Plan_Estudio_Tecnico_en_Informatica.pdf"
    assert nombre_archivo_plan("Diseño & Arte (2024)") == "Plan_Estudio_Diseno__Arte_2024.pdf"


def test_generar_pdf():
    plan = _plan(anios=3, por_anio=10)
    plan.materias_por_anio[2][0].cursar_aprobada = [1, 2]
    contenido, nombre = generar_plan_estudio_pdf(plan)

    assert contenido.startswith(b"%PDF")
    assert nombre == "Plan_Estudio_Tecnico_en_Informatica.pdf"
