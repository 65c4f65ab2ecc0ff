"""Endpoints del asistente conversacional (público)."""
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.schemas.chatbot import ChatbotRespuesta, OpcionChatbot
from app.services import catalogo_service, chatbot_service
from app.services.chatbot_service import AccionChatbot

router = APIRouter(prefix="/chatbot", tags=["chatbot"])


@router.get("/carreras", response_model=list[OpcionChatbot], summary="Carreras para el menú del asistente")
async def carreras(db: AsyncSession = Depends(get_db)):
    return [
        OpcionChatbot(id=c.id, nombre=c.nombre)
        for c in await catalogo_service.listar_carreras_activas(db)
    ]


@router.get(
    "/materias/{id_carrera}",
    response_model=list[OpcionChatbot],
    summary="Materias de una carrera para el menú del asistente",
)
async def materias(id_carrera: int, db: AsyncSession = Depends(get_db)):
    return [
        OpcionChatbot(id=m.id, nombre=m.nombre)
        for m in await catalogo_service.materias_de_carrera(db, id_carrera)
    ]


@router.get(
    "/info",
    response_model=ChatbotRespuesta,
    summary="Respuesta del asistente",
    description="`accion` define qué se consulta; `id` es una carrera o una materia según la acción.",
)
async def info(
    accion: Annotated[AccionChatbot, Query(description="Consulta a responder")],
    id: Annotated[int, Query(description="ID de carrera o materia")],
    db: AsyncSession = Depends(get_db),
):
    return ChatbotRespuesta(message=await chatbot_service.responder(db, accion, id))
