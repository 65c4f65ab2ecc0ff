"""Login, registro inicial y restablecimiento de contraseña."""
import logging

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import transaccion
from app.core.errores import MotivoDenegacion, Prohibido
from app.core.security import ServicioTokens, hash_password, verify_password
from app.models.administrador import Administrador
from app.models.tipos import EstadoRegistro, Rol
from app.schemas.auth import RegistroRequest
from app.services.administrador_service import exigir_politica
from app.services.correo import ServicioCorreo

logger = logging.getLogger(__name__)

MENSAJE_OLVIDE = (
    "Si el correo está registrado, recibirás un enlace para restablecer tu contraseña."
)


async def autenticar(db: AsyncSession, identificador: str, password: str) -> Administrador | None:
    """Busca por nombre o email. Devuelve None ante credenciales inválidas o cuenta no activa."""
    q = select(Administrador).where(
        or_(Administrador.nombre == identificador, Administrador.email == identificador)
    )
    administrador = (await db.execute(q)).scalars().first()
    if administrador is None or not verify_password(password, administrador.password_hash):
        return None
    if administrador.estado != EstadoRegistro.ACTIVO:
        return None
    return administrador


async def registrar_inicial(db: AsyncSession, datos: RegistroRequest) -> Administrador:
    """Crea el primer administrador como Rector; luego el alta pasa por /admin/usuarios."""
    existentes = (await db.execute(select(func.count(Administrador.id)))).scalar_one()
    if existentes:
        raise Prohibido(
            "El registro abierto solo está disponible para el primer administrador.",
            MotivoDenegacion.ROL_INSUFICIENTE,
        )
    exigir_politica(datos.password)
    async with transaccion(db):
        administrador = Administrador(
            nombre=datos.nombre,
            email=datos.email,
            password_hash=hash_password(datos.password),
            dni=datos.dni,
            telefono=datos.telefono,
            rol=Rol.RECTOR,
            estado=EstadoRegistro.ACTIVO,
        )
        db.add(administrador)
        await db.flush()
    logger.info("Administrador inicial creado: %s", administrador.nombre)
    return administrador


async def solicitar_restablecimiento(
    db: AsyncSession, email: str, tokens: ServicioTokens, correo: ServicioCorreo
) -> str:
    """Siempre devuelve el mismo mensaje, exista o no el correo."""
    q = select(Administrador).where(
        Administrador.email == email, Administrador.estado == EstadoRegistro.ACTIVO
    )
    administrador = (await db.execute(q)).scalars().first()
    if administrador is not None:
        token = tokens.crear_token_restablecimiento(administrador.id)
        try:
            await correo.enviar_restablecimiento(email, token)
        except Exception:
            logger.warning("No se pudo enviar el correo de restablecimiento", exc_info=True)
    return MENSAJE_OLVIDE


async def restablecer_contrasena(
    db: AsyncSession, token: str, password: str, tokens: ServicioTokens
) -> Administrador | None:
    """Devuelve None si el token es inválido, expiró o la cuenta no está activa."""
    id_administrador = tokens.decodificar_token_restablecimiento(token)
    if id_administrador is None:
        return None
    administrador = await db.get(Administrador, id_administrador)
    if administrador is None or administrador.estado != EstadoRegistro.ACTIVO:
        return None
    exigir_politica(password)
    async with transaccion(db):
        administrador.password_hash = hash_password(password)
        await db.flush()
    return administrador
