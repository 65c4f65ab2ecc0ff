"""Utilidades de seguridad: contraseñas, política de contraseñas y JWT."""
import re
from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
import jwt

from app.core.config import Settings

_TIPO_ACCESO = "acceso"
_TIPO_RESTABLECIMIENTO = "restablecimiento"


def hash_password(plain_password: str) -> str:
    """Genera el hash bcrypt de la contraseña en texto."""
    salt = bcrypt.gensalt()
    return bcrypt.hashpw(plain_password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Comprueba si la contraseña en texto coincide con el hash."""
    if not hashed_password:
        return False
    try:
        return bcrypt.checkpw(
            plain_password.encode("utf-8"),
            hashed_password.encode("utf-8"),
        )
    except ValueError:
        return False


def validar_politica_contrasena(password: str) -> str | None:
    """Devuelve el motivo por el que la contraseña no cumple la política, o None si es válida."""
    if len(password) < 8:
        return "La contraseña debe tener al menos 8 caracteres."
    if not re.search(r"[A-Z]", password):
        return "La contraseña debe contener al menos una letra mayúscula."
    if not re.search(r"[a-z]", password):
        return "La contraseña debe contener al menos una letra minúscula."
    if not re.search(r"[0-9]", password):
        return "La contraseña debe contener al menos un número."
    if not re.search(r"[^a-zA-Z0-9\s]", password):
        return "La contraseña debe contener al menos un carácter especial (ej: !@#$)."
    return None


class ServicioTokens:
    """Emisión y verificación de JWT con la configuración inyectada."""

    def __init__(self, config: Settings):
        self._config = config

    def _firmar(self, payload: dict[str, Any], secreto: str, minutos: int) -> str:
        now = datetime.now(timezone.utc)
        payload = {**payload, "iat": now, "exp": now + timedelta(minutes=minutos)}
        return jwt.encode(payload, secreto, algorithm=self._config.jwt_algorithm)

    def _verificar(self, token: str, secreto: str, tipo: str) -> dict[str, Any] | None:
        try:
            payload = jwt.decode(token, secreto, algorithms=[self._config.jwt_algorithm])
        except jwt.PyJWTError:
            return None
        if payload.get("tipo") != tipo or "sub" not in payload:
            return None
        return payload

    def crear_token_acceso(self, subject: str | int, extra: dict[str, Any] | None = None) -> str:
        """Genera un JWT de sesión con sub=subject y datos extra (ej. rol)."""
        payload = {"sub": str(subject), "tipo": _TIPO_ACCESO}
        if extra:
            payload.update(extra)
        return self._firmar(payload, self._config.jwt_secret_key, self._config.jwt_expire_minutes)

    def decodificar_token_acceso(self, token: str) -> dict[str, Any] | None:
        """Decodifica y valida el JWT de sesión; devuelve el payload o None si es inválido."""
        return self._verificar(token, self._config.jwt_secret_key, _TIPO_ACCESO)

    def crear_token_restablecimiento(self, administrador_id: int) -> str:
        return self._firmar(
            {"sub": str(administrador_id), "tipo": _TIPO_RESTABLECIMIENTO},
            self._config.reset_secret_key,
            self._config.reset_expire_minutes,
        )

    def decodificar_token_restablecimiento(self, token: str) -> int | None:
        payload = self._verificar(token, self._config.reset_secret_key, _TIPO_RESTABLECIMIENTO)
        if payload is None:
            return None
        try:
            return int(payload["sub"])
        except (TypeError, ValueError):
            return None
