"""Esquemas del asistente conversacional."""
from pydantic import BaseModel, Field


class ChatbotRespuesta(BaseModel):
    message: str = Field(description="Respuesta en markdown")


class OpcionChatbot(BaseModel):
    """Opción seleccionable en el menú del asistente."""

    id: int
    nombre: str
