"""Endpoints de administración de administradores (Rector y Coordinadores)."""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.endpoints.auth import get_alcance, get_current_admin
from app.core.database import get_db
from app.schemas.administrador import (
    AdministradorCreate,
    AdministradorItem,
    AdministradorUpdate,
    CoordinadorItem,
)
from app.schemas.auth import MensajeResponse
from app.services import administrador_service
from app.services.alcance import Alcance, Principal

router = APIRouter(tags=["admin: usuarios"])


@router.get(
    "/coordinadores",
    response_model=list[CoordinadorItem],
    summary="Coordinadores activos",
    description="Para formularios de asignación de carrera.",
)
async def listar_coordinadores(
    db: AsyncSession = Depends(get_db),
    _: Principal = Depends(get_current_admin),
):
    return await administrador_service.listar_coordinadores(db)


@router.get(
    "/usuarios",
    response_model=list[AdministradorItem],
    summary="Listar administradores",
    description="Administradores activos y suspendidos, ordenados por nombre.",
)
async def listar_administradores(
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_admin),
    alcance: Alcance = Depends(get_alcance),
):
    return await administrador_service.listar_administradores(db, principal, alcance)


@router.get(
    "/usuarios/{id_administrador}",
    response_model=AdministradorItem,
    summary="Detalle de administrador (cualquier estado)",
)
async def obtener_administrador(
    id_administrador: int,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_admin),
    alcance: Alcance = Depends(get_alcance),
):
    return await administrador_service.obtener_administrador(db, principal, alcance, id_administrador)


@router.post(
    "/usuarios",
    response_model=AdministradorItem,
    status_code=status.HTTP_201_CREATED,
    summary="Crear administrador (solo Rector)",
    responses={
        400: {"description": "La contraseña no cumple la política"},
        409: {"description": "Nombre, email o DNI ya registrado"},
    },
)
async def crear_administrador(
    body: AdministradorCreate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_admin),
    alcance: Alcance = Depends(get_alcance),
):
    return await administrador_service.crear_administrador(db, principal, alcance, body)


@router.put(
    "/usuarios/{id_administrador}",
    response_model=AdministradorItem,
    summary="Actualizar administrador",
    description=(
        "Un Coordinador solo edita sus propios datos personales; enviar `rol` o `estado` responde 422 "
        "(`campo_restringido`). Nadie puede suspender o inactivar su propia cuenta (403 `autoproteccion`)."
    ),
)
async def actualizar_administrador(
    id_administrador: int,
    body: AdministradorUpdate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_admin),
    alcance: Alcance = Depends(get_alcance),
):
    return await administrador_service.actualizar_administrador(
        db, principal, alcance, id_administrador, body
    )


@router.delete(
    "/usuarios/{id_administrador}",
    response_model=MensajeResponse,
    summary="Baja lógica de administrador (solo Rector, nunca a sí mismo)",
)
async def eliminar_administrador(
    id_administrador: int,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_admin),
    alcance: Alcance = Depends(get_alcance),
):
    """Si el administrador era Coordinador, también pierde sus asignaciones de carrera."""
    administrador = await administrador_service.eliminar_administrador(
        db, principal, alcance, id_administrador
    )
    return MensajeResponse(message=f"Administrador {administrador.nombre} dado de baja.")
