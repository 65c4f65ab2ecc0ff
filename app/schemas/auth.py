"""Esquemas para autenticación, registro inicial y restablecimiento de contraseña."""
from pydantic import BaseModel, EmailStr, Field

from app.models.tipos import EstadoRegistro, Rol


class LoginRequest(BaseModel):
    """Body del endpoint de login. `identificador` acepta el nombre o el email."""

    identificador: str = Field(
        description="Nombre de administrador o correo electrónico",
        min_length=1,
        examples=["rector"],
    )
    password: str = Field(description="Contraseña en texto plano", min_length=1)


class TokenResponse(BaseModel):
    """Respuesta con access_token JWT y datos del administrador."""

    access_token: str = Field(description="Token JWT para enviar en header Authorization: Bearer <token>")
    token_type: str = Field(default="bearer", description="Tipo de token (siempre 'bearer')")
    id: int
    nombre: str
    rol: Rol


class RegistroRequest(BaseModel):
    """Alta del primer administrador (queda como Rector)."""

    nombre: str = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=1)
    dni: str | None = None
    telefono: str | None = None


class OlvideContrasenaRequest(BaseModel):
    email: EmailStr


class RestablecerContrasenaRequest(BaseModel):
    token: str = Field(min_length=1, description="Token recibido en el enlace por correo")
    password: str = Field(min_length=1, description="Nueva contraseña")


class MensajeResponse(BaseModel):
    message: str


class PerfilResponse(BaseModel):
    """Datos del administrador autenticado (GET /me)."""

    id: int
    nombre: str
    rol: Rol
    estado: EstadoRegistro
    carreras: list[int] = Field(
        default_factory=list, description="IDs de carreras asignadas (solo Coordinador)"
    )
