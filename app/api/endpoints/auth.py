"""Endpoints de autenticación y dependencias para proteger rutas."""
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import get_db
from app.core.security import ServicioTokens
from app.models import Administrador, EstadoRegistro
from app.schemas.auth import (
    LoginRequest,
    MensajeResponse,
    OlvideContrasenaRequest,
    RegistroRequest,
    RestablecerContrasenaRequest,
    TokenResponse,
)
from app.services import cuenta_service
from app.services.alcance import Alcance, Principal, resolver_alcance
from app.services.correo import ServicioCorreo

router = APIRouter(prefix="/auth", tags=["auth"])
security = HTTPBearer(auto_error=False)


def get_servicio_tokens() -> ServicioTokens:
    """Servicio de JWT construido con la configuración de la aplicación."""
    return ServicioTokens(settings)


def get_servicio_correo() -> ServicioCorreo:
    return ServicioCorreo(settings)


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Iniciar sesión",
    response_description="Token JWT para usar en el header Authorization",
    responses={
        200: {"description": "Login correcto, se devuelve el access_token"},
        401: {"description": "Credenciales inválidas o cuenta no activa"},
    },
)
async def login(
    data: LoginRequest,
    db: AsyncSession = Depends(get_db),
    tokens: ServicioTokens = Depends(get_servicio_tokens),
):
    """
    Autenticación con **nombre de administrador o correo** y **contraseña**.
    Una cuenta suspendida o inactiva recibe el mismo 401 que una contraseña incorrecta.
    """
    administrador = await cuenta_service.autenticar(db, data.identificador, data.password)
    if administrador is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Credenciales inválidas",
        )
    token = tokens.crear_token_acceso(
        subject=administrador.id, extra={"rol": administrador.rol.value}
    )
    return TokenResponse(
        access_token=token,
        id=administrador.id,
        nombre=administrador.nombre,
        rol=administrador.rol,
    )


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    response_model=MensajeResponse,
    summary="Registrar el primer administrador",
    responses={403: {"description": "Ya existe al menos un administrador"}},
)
async def registrar(data: RegistroRequest, db: AsyncSession = Depends(get_db)):
    """Solo funciona con la base vacía: el primer administrador queda como Rector."""
    administrador = await cuenta_service.registrar_inicial(db, data)
    return MensajeResponse(message=f"Administrador {administrador.nombre} registrado como Rector.")


@router.post(
    "/forgot-password",
    response_model=MensajeResponse,
    summary="Solicitar enlace de restablecimiento",
)
async def olvide_contrasena(
    data: OlvideContrasenaRequest,
    db: AsyncSession = Depends(get_db),
    tokens: ServicioTokens = Depends(get_servicio_tokens),
    correo: ServicioCorreo = Depends(get_servicio_correo),
):
    """Responde siempre lo mismo para no revelar qué correos están registrados."""
    mensaje = await cuenta_service.solicitar_restablecimiento(db, data.email, tokens, correo)
    return MensajeResponse(message=mensaje)


@router.post(
    "/reset-password",
    response_model=MensajeResponse,
    summary="Restablecer contraseña con el token recibido",
    responses={401: {"description": "Token inválido o expirado"}},
)
async def restablecer_contrasena(
    data: RestablecerContrasenaRequest,
    db: AsyncSession = Depends(get_db),
    tokens: ServicioTokens = Depends(get_servicio_tokens),
):
    administrador = await cuenta_service.restablecer_contrasena(
        db, data.token, data.password, tokens
    )
    if administrador is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token inválido o expirado",
        )
    return MensajeResponse(message="Contraseña actualizada correctamente.")


async def get_current_admin(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: AsyncSession = Depends(get_db),
    tokens: ServicioTokens = Depends(get_servicio_tokens),
) -> Principal:
    """Dependencia: exige un JWT válido de un administrador activo y devuelve el Principal."""
    if not credentials or credentials.scheme.lower() != "bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token de autenticación no proporcionado o inválido",
            headers={"WWW-Authenticate": "Bearer"},
        )
    payload = tokens.decodificar_token_acceso(credentials.credentials)
    if not payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token inválido o expirado",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        administrador = await db.get(Administrador, int(payload["sub"]))
    except ValueError:
        administrador = None
    if administrador is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Administrador no encontrado",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if administrador.estado != EstadoRegistro.ACTIVO:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Cuenta no activa. Contacte al Rector.",
        )
    return Principal(
        id=administrador.id,
        nombre=administrador.nombre,
        rol=administrador.rol,
        estado=administrador.estado,
    )


async def get_alcance(
    principal: Principal = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
) -> Alcance:
    """Alcance del administrador, calculado una vez por request."""
    return await resolver_alcance(db, principal)
