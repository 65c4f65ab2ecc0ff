"""Envío del correo de restablecimiento de contraseña por SMTP."""
import asyncio
import logging
import smtplib
from email.message import EmailMessage

from app.core.config import Settings

logger = logging.getLogger(__name__)


class ServicioCorreo:
    """Sin `smtp_host` configurado el enlace solo se registra en el log."""

    def __init__(self, config: Settings):
        self._config = config

    def enlace_restablecimiento(self, token: str) -> str:
        return f"{self._config.client_url}?token={token}"

    def _mensaje(self, destinatario: str, enlace: str) -> EmailMessage:
        msg = EmailMessage()
        msg["Subject"] = "Restablecimiento de contraseña"
        msg["From"] = self._config.email_from
        msg["To"] = destinatario
        msg.set_content(
            "Recibimos una solicitud para restablecer tu contraseña.\n\n"
            f"Enlace (válido por {self._config.reset_expire_minutes} minutos):\n{enlace}\n\n"
            "Si no solicitaste esto, ignora este correo."
        )
        return msg

    def _enviar(self, msg: EmailMessage) -> None:
        cfg = self._config
        with smtplib.SMTP(cfg.smtp_host, cfg.smtp_port, timeout=15) as server:
            if cfg.smtp_use_tls:
                server.starttls()
            if cfg.smtp_user and cfg.smtp_password:
                server.login(cfg.smtp_user, cfg.smtp_password)
            server.send_message(msg)

    async def enviar_restablecimiento(self, destinatario: str, token: str) -> None:
        enlace = self.enlace_restablecimiento(token)
        if not self._config.smtp_host:
            logger.info("SMTP no configurado; enlace de restablecimiento para %s: %s", destinatario, enlace)
            return
        await asyncio.to_thread(self._enviar, self._mensaje(destinatario, enlace))
        logger.info("Correo de restablecimiento enviado a %s", destinatario)
