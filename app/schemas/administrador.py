"""Esquemas para la gestión de administradores."""
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from app.models.tipos import ESTADOS_ADMINISTRADOR, EstadoRegistro, Rol


class AdministradorCreate(BaseModel):
    """Body para crear un administrador (solo Rector)."""

    nombre: str = Field(description="Nombre de administrador (único)", min_length=1)
    email: EmailStr | None = Field(default=None, description="Correo electrónico (único)")
    password: str = Field(description="Contraseña en texto", min_length=1)
    dni: str | None = Field(default=None, description="DNI (único)")
    telefono: str | None = None
    rol: Rol = Field(description="Rector o Coordinador")


class AdministradorUpdate(BaseModel):
    """Body para actualizar un administrador. Todos opcionales; lo no enviado no se modifica."""

    nombre: str | None = Field(default=None, min_length=1)
    email: EmailStr | None = None
    password: str | None = Field(
        default=None, min_length=1, description="Nueva contraseña (cumple la política)"
    )
    dni: str | None = None
    telefono: str | None = None
    rol: Rol | None = Field(default=None, description="Solo Rector, nunca sobre sí mismo")
    estado: EstadoRegistro | None = Field(
        default=None, description="activo, suspendido o inactivo. Solo Rector"
    )

    @field_validator("estado")
    @classmethod
    def estado_valido(cls, v: EstadoRegistro | None) -> EstadoRegistro | None:
        if v is not None and v not in ESTADOS_ADMINISTRADOR:
            raise ValueError("estado debe ser 'activo', 'suspendido' o 'inactivo'")
        return v


class AdministradorItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    nombre: str
    email: str | None = None
    dni: str | None = None
    telefono: str | None = None
    rol: Rol
    estado: EstadoRegistro
    fecha_creacion: datetime | None = None
    fecha_eliminacion: datetime | None = None


class CoordinadorItem(BaseModel):
    """Coordinador activo, para formularios de asignación."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    nombre: str
    email: str | None = None
