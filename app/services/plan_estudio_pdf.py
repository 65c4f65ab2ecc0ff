"""Plan de estudio en PDF: maquetación paginada de las tablas por año y dibujo con reportlab.

`maquetar` es puro: mide el texto, calcula la altura de cada fila y decide los
saltos de página. `renderizar_pdf` solo dibuja lo que `maquetar` ya ubicó.
Las coordenadas `y` de la maquetación se miden desde el borde superior.
"""
import re
import unicodedata
from dataclasses import dataclass, field
from enum import Enum
from io import BytesIO

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen import canvas as rl_canvas

# ── Página y grilla ───────────────────────────────────────────────────
PAGE_WIDTH, PAGE_HEIGHT = landscape(A4)
MARGIN = 30
COL_WIDTHS = (30, 50, 160, 60, 60, 50, 60, 80, 80, 70, 90)
TABLE_WIDTH = sum(COL_WIDTHS)
TABLE_X = (PAGE_WIDTH - TABLE_WIDTH) / 2
USABLE_BOTTOM = PAGE_HEIGHT - MARGIN

# ── Medidas de filas ──────────────────────────────────────────────────
FONT = "Helvetica"
FONT_BOLD = "Helvetica-Bold"
FONT_SIZE = 7
LEADING = 8.4
CELL_PADDING = 3
MIN_ROW_HEIGHT = 18
YEAR_HEADER_HEIGHT = 20
COLUMN_HEADER_HEIGHT = 30
TOTAL_ROW_HEIGHT = 25
GAP_BEFORE_BLOCK = 2.2
GAP_AFTER_BLOCK = 15
GRAND_TOTAL_RESERVE = 10
TITLE_BLOCK_HEIGHT = 62

# Columnas unidas en las filas de totales (N° a HORAS SEMANAL).
MERGED_TOTAL_COLS = 6
COL_NOMBRE = 2
COLS_CORRELATIVAS = (8, 9, 10)

# ── Colores ───────────────────────────────────────────────────────────
TITLE_COLOR = colors.HexColor("#007BFF")
SUBTITLE_COLOR = colors.HexColor("#343A40")
YEAR_FILL = colors.HexColor("#B0B0B0")
HEADER_FILL = colors.HexColor("#CCCCCC")
TOTAL_FILL = colors.HexColor("#F0F0F0")
GRAND_TOTAL_FILL = colors.HexColor("#C0C0C0")

ENCABEZADOS = (
    "N°",
    "CAMPO DE FORMACIÓN",
    "UNIDAD CURRICULAR",
    "FORMATO",
    "MODALIDAD",
    "HORAS SEMANAL",
    "HORAS ANUAL",
    "ACREDITACIÓN",
    "REG. CORREL. CURS.(APROBADA)",
    "REG. CORREL. CURS.(REGULAR)",
    "REG. CORREL. RENDIR/PROMOC.(APROBADA)",
)
SIN_DATO = "N/D"
_NOMBRES_ANIO = {1: "PRIMER AÑO", 2: "SEGUNDO AÑO", 3: "TERCER AÑO", 4: "CUARTO AÑO"}
_ENTERO_INICIAL = re.compile(r"^\s*([+-]?\d+)")


@dataclass
class FilaPlan:
    """Materia tal como aparece en el plan; correlativas como IDs de materias requeridas."""

    id: int
    nombre: str
    campo_formacion: str | None = None
    formato: str | None = None
    modalidad: str | None = None
    horas_semanales: str | None = None
    total_horas_anuales: str | None = None
    acreditacion: str | None = None
    cursar_aprobada: list[int] = field(default_factory=list)
    cursar_regular: list[int] = field(default_factory=list)
    rendir_aprobada: list[int] = field(default_factory=list)


@dataclass
class PlanEstudio:
    nombre_carrera: str
    duracion: str | None = None
    modalidad: str | None = None
    anio_aprobacion: int | None = None
    materias_por_anio: dict[int, list[FilaPlan]] = field(default_factory=dict)


class TipoFila(str, Enum):
    ENCABEZADO_ANIO = "encabezado_anio"
    CABECERA = "cabecera"
    MATERIA = "materia"
    TOTAL_ANIO = "total_anio"
    TOTAL_CARRERA = "total_carrera"


@dataclass
class FilaUbicada:
    tipo: TipoFila
    y: float
    alto: float
    celdas: tuple[str, ...]
    anio: int | None = None


@dataclass
class Pagina:
    filas: list[FilaUbicada] = field(default_factory=list)
    con_titulo: bool = False


@dataclass
class Maquetacion:
    paginas: list[Pagina]
    horas_por_anio: dict[int, int]
    horas_carrera: int


def horas_a_entero(valor) -> int:
    """Entero inicial del valor ("128 hs" -> 128); nulo o no numérico cuenta como 0."""
    if valor is None:
        return 0
    if isinstance(valor, int):
        return valor
    m = _ENTERO_INICIAL.match(str(valor))
    return int(m.group(1)) if m else 0


def texto_anio(anio: int) -> str:
    return _NOMBRES_ANIO.get(anio, f"{anio}° AÑO")


def texto_correlativas(ids: list[int]) -> str:
    return ", ".join(str(i) for i in ids)


def _lineas(texto: str, ancho_columna: float, fuente: str = FONT) -> list[str]:
    if not texto:
        return []
    return simpleSplit(texto, fuente, FONT_SIZE, ancho_columna - 2 * CELL_PADDING)


def alto_texto(texto: str, ancho_columna: float) -> float:
    """Altura del texto ajustado al ancho útil de la columna."""
    return len(_lineas(texto, ancho_columna)) * LEADING


def alto_fila(fila: FilaPlan) -> float:
    """Máximo entre el nombre y las tres celdas de correlativas, más relleno, con piso mínimo."""
    medidas = [alto_texto(fila.nombre, COL_WIDTHS[COL_NOMBRE])]
    listas = (fila.cursar_aprobada, fila.cursar_regular, fila.rendir_aprobada)
    for col, ids in zip(COLS_CORRELATIVAS, listas):
        medidas.append(alto_texto(texto_correlativas(ids), COL_WIDTHS[col]))
    return max(MIN_ROW_HEIGHT, max(medidas) + 2 * CELL_PADDING)


def alto_bloque(alturas_filas: list[float]) -> float:
    """Espacio vertical total de un año, incluidos los márgenes antes y después."""
    return (
        GAP_BEFORE_BLOCK
        + YEAR_HEADER_HEIGHT
        + COLUMN_HEADER_HEIGHT
        + sum(alturas_filas)
        + TOTAL_ROW_HEIGHT
        + GAP_AFTER_BLOCK
    )


def _celdas_materia(fila: FilaPlan) -> tuple[str, ...]:
    return (
        str(fila.id),
        fila.campo_formacion or SIN_DATO,
        fila.nombre,
        fila.formato or SIN_DATO,
        fila.modalidad or SIN_DATO,
        fila.horas_semanales or SIN_DATO,
        fila.total_horas_anuales or SIN_DATO,
        fila.acreditacion or SIN_DATO,
        texto_correlativas(fila.cursar_aprobada),
        texto_correlativas(fila.cursar_regular),
        texto_correlativas(fila.rendir_aprobada),
    )


def _celdas_total(etiqueta: str, total: int) -> tuple[str, ...]:
    return (etiqueta, str(total), "", "", "", "")


def maquetar(plan: PlanEstudio) -> Maquetacion:
    """Ubica cada fila en su página. Un bloque anual nunca se parte entre páginas."""
    paginas = [Pagina(con_titulo=True)]
    y = MARGIN + TITLE_BLOCK_HEIGHT
    horas_por_anio: dict[int, int] = {}

    def nueva_pagina_si_no_cabe(necesario: float) -> None:
        nonlocal y
        # En una página recién empezada no se salta: no hay páginas vacías.
        if y + necesario > USABLE_BOTTOM and y > MARGIN:
            paginas.append(Pagina())
            y = MARGIN

    def ubicar(tipo: TipoFila, alto: float, celdas: tuple[str, ...], anio: int | None = None) -> None:
        nonlocal y
        paginas[-1].filas.append(FilaUbicada(tipo, y, alto, celdas, anio))
        y += alto

    for anio in sorted(plan.materias_por_anio):
        materias = plan.materias_por_anio[anio]
        alturas = [alto_fila(m) for m in materias]
        nueva_pagina_si_no_cabe(alto_bloque(alturas))

        y += GAP_BEFORE_BLOCK
        ubicar(TipoFila.ENCABEZADO_ANIO, YEAR_HEADER_HEIGHT, (texto_anio(anio),), anio)
        ubicar(TipoFila.CABECERA, COLUMN_HEADER_HEIGHT, ENCABEZADOS, anio)
        for materia, alto in zip(materias, alturas):
            ubicar(TipoFila.MATERIA, alto, _celdas_materia(materia), anio)
        total = sum(horas_a_entero(m.total_horas_anuales) for m in materias)
        horas_por_anio[anio] = total
        ubicar(
            TipoFila.TOTAL_ANIO,
            TOTAL_ROW_HEIGHT,
            _celdas_total(f"TOTAL HORAS {texto_anio(anio)}", total),
            anio,
        )
        y += GAP_AFTER_BLOCK

    horas_carrera = sum(horas_por_anio.values())
    nueva_pagina_si_no_cabe(TOTAL_ROW_HEIGHT + GRAND_TOTAL_RESERVE)
    ubicar(
        TipoFila.TOTAL_CARRERA,
        TOTAL_ROW_HEIGHT,
        _celdas_total("TOTAL HORAS DE LA CARRERA", horas_carrera),
    )
    return Maquetacion(paginas=paginas, horas_por_anio=horas_por_anio, horas_carrera=horas_carrera)


# ── Dibujo ────────────────────────────────────────────────────────────

def _celda(
    c: rl_canvas.Canvas,
    x: float,
    y_sup: float,
    ancho: float,
    alto: float,
    texto: str,
    *,
    fuente: str = FONT,
    relleno=None,
    alinear: str = "center",
    centrar_vertical: bool = False,
) -> None:
    """Dibuja una celda con borde; `y_sup` es el borde superior medido desde arriba."""
    y_inf = PAGE_HEIGHT - y_sup - alto
    if relleno is not None:
        c.setFillColor(relleno)
        c.rect(x, y_inf, ancho, alto, stroke=0, fill=1)
    c.setStrokeColor(colors.black)
    c.setLineWidth(0.5)
    c.rect(x, y_inf, ancho, alto, stroke=1, fill=0)

    lineas = _lineas(texto, ancho, fuente)
    if not lineas:
        return
    c.setFillColor(colors.black)
    c.setFont(fuente, FONT_SIZE)
    if centrar_vertical:
        primera = y_sup + (alto - len(lineas) * LEADING) / 2 + FONT_SIZE
    else:
        primera = y_sup + CELL_PADDING + FONT_SIZE
    for i, linea in enumerate(lineas):
        base = PAGE_HEIGHT - (primera + i * LEADING)
        if alinear == "left":
            c.drawString(x + CELL_PADDING, base, linea)
        else:
            c.drawCentredString(x + ancho / 2, base, linea)


def _dibujar_titulo(c: rl_canvas.Canvas, plan: PlanEstudio) -> None:
    centro = PAGE_WIDTH / 2
    c.setFillColor(TITLE_COLOR)
    c.setFont(FONT_BOLD, 13)
    c.drawCentredString(centro, PAGE_HEIGHT - MARGIN - 13, "PLAN DE ESTUDIO")
    c.setFillColor(SUBTITLE_COLOR)
    c.setFont(FONT_BOLD, 11)
    c.drawCentredString(centro, PAGE_HEIGHT - MARGIN - 32, plan.nombre_carrera)
    c.setFillColor(colors.black)
    c.setFont(FONT, 10)
    meta = (
        f"Duración: {plan.duracion or SIN_DATO} | "
        f"Modalidad General: {plan.modalidad or SIN_DATO} | "
        f"Aprobación: {plan.anio_aprobacion or SIN_DATO}"
    )
    c.drawCentredString(centro, PAGE_HEIGHT - MARGIN - 50, meta)


def _dibujar_fila(c: rl_canvas.Canvas, fila: FilaUbicada) -> None:
    if fila.tipo is TipoFila.ENCABEZADO_ANIO:
        _celda(
            c, TABLE_X, fila.y, TABLE_WIDTH, fila.alto, fila.celdas[0],
            fuente=FONT_BOLD, relleno=YEAR_FILL, centrar_vertical=True,
        )
        return

    if fila.tipo in (TipoFila.TOTAL_ANIO, TipoFila.TOTAL_CARRERA):
        relleno = GRAND_TOTAL_FILL if fila.tipo is TipoFila.TOTAL_CARRERA else TOTAL_FILL
        unido = sum(COL_WIDTHS[:MERGED_TOTAL_COLS])
        _celda(
            c, TABLE_X, fila.y, unido, fila.alto, fila.celdas[0],
            fuente=FONT_BOLD, relleno=relleno, centrar_vertical=True,
        )
        x = TABLE_X + unido
        for ancho, texto in zip(COL_WIDTHS[MERGED_TOTAL_COLS:], fila.celdas[1:]):
            _celda(
                c, x, fila.y, ancho, fila.alto, texto,
                fuente=FONT_BOLD, relleno=relleno, centrar_vertical=True,
            )
            x += ancho
        return

    es_cabecera = fila.tipo is TipoFila.CABECERA
    x = TABLE_X
    for col, (ancho, texto) in enumerate(zip(COL_WIDTHS, fila.celdas)):
        _celda(
            c, x, fila.y, ancho, fila.alto, texto,
            fuente=FONT_BOLD if es_cabecera else FONT,
            relleno=HEADER_FILL if es_cabecera else None,
            alinear="left" if col == COL_NOMBRE and not es_cabecera else "center",
        )
        x += ancho


def renderizar_pdf(plan: PlanEstudio, maquetacion: Maquetacion) -> bytes:
    buffer = BytesIO()
    c = rl_canvas.Canvas(buffer, pagesize=(PAGE_WIDTH, PAGE_HEIGHT))
    c.setTitle(f"Plan de Estudio {plan.nombre_carrera}")
    for numero, pagina in enumerate(maquetacion.paginas):
        if numero:
            c.showPage()
        if pagina.con_titulo:
            _dibujar_titulo(c, plan)
        for fila in pagina.filas:
            _dibujar_fila(c, fila)
    c.showPage()
    c.save()
    return buffer.getvalue()


def nombre_archivo_plan(nombre_carrera: str) -> str:
    """Plan_Estudio_<nombre>.pdf: sin acentos, espacios a '_', sin otros símbolos."""
    sin_acentos = "".join(
        ch for ch in unicodedata.normalize("NFKD", nombre_carrera) if not unicodedata.combining(ch)
    )
    base = re.sub(r"[^A-Za-z0-9_]", "", re.sub(r"\s", "_", sin_acentos))
    return f"Plan_Estudio_{base}.pdf"


def generar_plan_estudio_pdf(plan: PlanEstudio) -> tuple[bytes, str]:
    """Documento completo y nombre sugerido para Content-Disposition."""
    return renderizar_pdf(plan, maquetar(plan)), nombre_archivo_plan(plan.nombre_carrera)
