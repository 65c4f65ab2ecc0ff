"""Respuestas en markdown para el asistente conversacional.

Usa las mismas lecturas filtradas del catálogo público: lo que no es visible
allí tampoco aparece aquí. La falta de datos produce un mensaje, no un error.
"""
from enum import Enum

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errores import NoEncontrado
from app.models.tipos import TipoCorrelatividad
from app.services import catalogo_service


class AccionChatbot(str, Enum):
    DETALLE_CARRERA = "detalle_carrera"
    COORDINADOR = "coordinador"
    DETALLE_MATERIA = "detalle_materia"
    HORARIOS = "horarios"
    CORRELATIVAS = "correlativas"


_TIPOS = {TipoCorrelatividad.CURSAR: "para cursar", TipoCorrelatividad.RENDIR: "para rendir"}


def _valor(v) -> str:
    return str(v) if v not in (None, "") else "No especificado"


async def _detalle_carrera(db: AsyncSession, id_: int) -> str:
    try:
        c = await catalogo_service.obtener_carrera_activa(db, id_)
    except NoEncontrado:
        return "No se encontraron detalles para esta carrera (puede haber sido desactivada)."
    return (
        f"**Detalles de {c.nombre}**:\n"
        f"* Duración: {_valor(c.duracion)}\n"
        f"* Modalidad: {_valor(c.modalidad)}\n"
        f"* Año de aprobación del plan: {_valor(c.anio_aprobacion)}"
    )


async def _coordinador(db: AsyncSession, id_: int) -> str:
    try:
        await catalogo_service.obtener_carrera_activa(db, id_)
    except NoEncontrado:
        return "No se encontró la carrera o no está activa."
    a = await catalogo_service.coordinador_activo(db, id_)
    if a is None:
        return (
            "No se encontró un coordinador asignado a esta carrera. "
            "Contacta con la secretaría."
        )
    return (
        "**Información del Coordinador/a**:\n"
        f"* Nombre: {a.nombre}\n"
        f"* Email: {_valor(a.email)}\n"
        f"* Teléfono: {_valor(a.telefono)}"
    )


async def _detalle_materia(db: AsyncSession, id_: int) -> str:
    try:
        m = await catalogo_service.obtener_materia_visible(db, id_)
    except NoEncontrado:
        return "No se encontraron detalles para esta materia (puede haber sido desactivada)."
    return (
        f"**Detalles de {m.nombre}**:\n"
        f"* Año de cursado: {m.anio}\n"
        f"* Campo de formación: {_valor(m.campo_formacion)}\n"
        f"* Modalidad: {_valor(m.modalidad)}\n"
        f"* Formato: {_valor(m.formato)}\n"
        f"* Horas semanales: {_valor(m.horas_semanales)}\n"
        f"* Horas anuales: {_valor(m.total_horas_anuales)}\n"
        f"* Acreditación: {_valor(m.acreditacion)}"
    )


async def _horarios(db: AsyncSession, id_: int) -> str:
    horarios = await catalogo_service.horarios_de_materia(db, id_)
    if not horarios:
        return "No hay horarios de cursado activos registrados para esta materia."
    lineas = ["**Horarios de cursado**:"]
    for h in horarios:
        lineas.append(
            f"* {h.dia_semana.value}: {h.hora_inicio:%H:%M} a {h.hora_fin:%H:%M}"
        )
    return "\n".join(lineas)


async def _correlativas(db: AsyncSession, id_: int) -> str:
    try:
        materia = await catalogo_service.obtener_materia_visible(db, id_)
    except NoEncontrado:
        return "No se encontró la materia para el ID proporcionado o no está activa."
    requisitos = await catalogo_service.requisitos_de(db, id_)
    dependientes = await catalogo_service.dependientes_de(db, id_)
    if not requisitos and not dependientes:
        return (
            f"La materia **{materia.nombre}** no tiene correlativas activas registradas "
            "(ni requisitos, ni materias dependientes)."
        )
    lineas = [f"**Correlativas de {materia.nombre}**:"]
    if requisitos:
        lineas.append("")
        lineas.append("**Requisitos (lo que esta materia necesita):**")
        for m, tipo, estado in requisitos:
            lineas.append(f"* Requiere **{m.nombre}** ({estado.value}, {_TIPOS[tipo]})")
    if dependientes:
        lineas.append("")
        lineas.append("**Dependientes (materias que necesitan a esta):**")
        for m, tipo, estado in dependientes:
            lineas.append(f"* Es requisito de **{m.nombre}** ({estado.value}, {_TIPOS[tipo]})")
    return "\n".join(lineas)


_ACCIONES = {
    AccionChatbot.DETALLE_CARRERA: _detalle_carrera,
    AccionChatbot.COORDINADOR: _coordinador,
    AccionChatbot.DETALLE_MATERIA: _detalle_materia,
    AccionChatbot.HORARIOS: _horarios,
    AccionChatbot.CORRELATIVAS: _correlativas,
}


async def responder(db: AsyncSession, accion: AccionChatbot, id_: int) -> str:
    return (await _ACCIONES[accion](db, id_)).strip()
