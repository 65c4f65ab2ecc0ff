"""Taxonomía de errores de la aplicación.

Los servicios lanzan estas excepciones; el handler registrado en `app.main`
las convierte en respuestas JSON con `detail`, `tipo` y `motivo`.
"""
from enum import Enum

from fastapi import status
from sqlalchemy.exc import IntegrityError


class MotivoDenegacion(str, Enum):
    """Sub-motivo de una denegación de autorización."""

    ROL_INSUFICIENTE = "rol_insuficiente"
    FUERA_DE_ALCANCE = "fuera_de_alcance"
    AUTOPROTECCION = "autoproteccion"
    CAMPO_RESTRINGIDO = "campo_restringido"


class MotivoNoEncontrado(str, Enum):
    """Distingue una fila inexistente de una que ya fue dada de baja."""

    INEXISTENTE = "inexistente"
    YA_INACTIVO = "ya_inactivo"


class ErrorAplicacion(Exception):
    """Excepción base: todo fallo de una operación de entidad termina en una subclase."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    tipo: str = "interno"

    def __init__(self, mensaje: str, motivo: str | None = None):
        super().__init__(mensaje)
        self.mensaje = mensaje
        self.motivo = motivo

    def a_respuesta(self) -> dict:
        contenido = {"detail": self.mensaje, "tipo": self.tipo}
        if self.motivo is not None:
            contenido["motivo"] = self.motivo
        return contenido


class ErrorValidacion(ErrorAplicacion):
    """Campo faltante o mal formado (incluye la política de contraseñas)."""

    status_code = status.HTTP_400_BAD_REQUEST
    tipo = "validacion"


class NoEncontrado(ErrorAplicacion):
    """Entidad inexistente o ya dada de baja."""

    status_code = status.HTTP_404_NOT_FOUND
    tipo = "no_encontrado"

    def __init__(self, mensaje: str, motivo: MotivoNoEncontrado = MotivoNoEncontrado.INEXISTENTE):
        super().__init__(mensaje, motivo.value)
        self.ya_inactivo = motivo is MotivoNoEncontrado.YA_INACTIVO


class Prohibido(ErrorAplicacion):
    """Denegación por rol, alcance, autoprotección o campo restringido."""

    status_code = status.HTTP_403_FORBIDDEN
    tipo = "prohibido"

    def __init__(self, mensaje: str, motivo: MotivoDenegacion):
        super().__init__(mensaje, motivo.value)
        self.motivo_denegacion = motivo
        if motivo is MotivoDenegacion.CAMPO_RESTRINGIDO:
            self.status_code = status.HTTP_422_UNPROCESSABLE_ENTITY


class Conflicto(ErrorAplicacion):
    """Valor único duplicado o correlatividad inválida (autorreferencia o repetida)."""

    status_code = status.HTTP_409_CONFLICT
    tipo = "conflicto"


class ReferenciaInexistente(ErrorAplicacion):
    """La entidad referenciada (carrera, materia, coordinador) no existe."""

    status_code = status.HTTP_400_BAD_REQUEST
    tipo = "referencia_inexistente"


class ErrorInterno(ErrorAplicacion):
    """Fallo inesperado del almacenamiento o de un servicio externo."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    tipo = "interno"


def traducir_integridad(exc: IntegrityError) -> ErrorAplicacion:
    """Traduce una violación de restricción del motor a la taxonomía."""
    texto = str(exc.orig).lower() if exc.orig is not None else str(exc).lower()
    if "foreign key" in texto or "foreignkey" in texto:
        return ReferenciaInexistente("La entidad referenciada no existe.")
    if "unique" in texto or "duplicate" in texto:
        return Conflicto("Ya existe un registro con ese valor único.")
    if "check" in texto:
        return Conflicto("Los datos violan una restricción de consistencia.")
    return ErrorInterno("Error de integridad en el almacenamiento.")
