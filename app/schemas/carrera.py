"""Esquemas para carreras."""
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.tipos import ESTADOS_CARRERA, EstadoRegistro


class CarreraCreate(BaseModel):
    """Body para crear una carrera. El coordinador inicial es obligatorio."""

    nombre: str = Field(min_length=1, description="Nombre de la carrera (único)")
    duracion: str | None = Field(default=None, examples=["4 años"])
    modalidad: str | None = Field(default=None, examples=["Presencial"])
    anio_aprobacion: int | None = Field(default=None, ge=1900, le=2100)
    id_coordinador: int = Field(description="ID del administrador Coordinador a asignar")


class CarreraUpdate(BaseModel):
    """Body parcial. `id_coordinador` reemplaza la asignación; `null` deja la carrera sin coordinador."""

    nombre: str | None = Field(default=None, min_length=1)
    duracion: str | None = None
    modalidad: str | None = None
    anio_aprobacion: int | None = Field(default=None, ge=1900, le=2100)
    estado: EstadoRegistro | None = None
    id_coordinador: int | None = None

    @field_validator("estado")
    @classmethod
    def estado_valido(cls, v: EstadoRegistro | None) -> EstadoRegistro | None:
        if v is not None and v not in ESTADOS_CARRERA:
            raise ValueError("estado debe ser 'activo', 'cerrado' o 'inactivo'")
        return v


class CarreraItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    nombre: str
    duracion: str | None = None
    modalidad: str | None = None
    anio_aprobacion: int | None = None
    estado: EstadoRegistro
    fecha_eliminacion: datetime | None = None
    id_coordinador: int | None = Field(default=None, description="Coordinador asignado, si lo hay")
