"""Endpoints de administración de materias, horarios y correlatividades."""
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.endpoints.auth import get_alcance, get_current_admin
from app.core.database import get_db
from app.schemas.auth import MensajeResponse
from app.schemas.materia import (
    CorrelatividadCreate,
    CorrelatividadItem,
    CorrelatividadUpdate,
    HorarioCreate,
    HorarioItem,
    HorarioUpdate,
    MateriaCreate,
    MateriaItem,
    MateriaUpdate,
)
from app.services import correlatividad_service, horario_service, materia_service
from app.services.alcance import Alcance, Principal

router = APIRouter()
materias = APIRouter(prefix="/materias", tags=["admin: materias"])
horarios = APIRouter(prefix="/horarios", tags=["admin: horarios"])
correlatividades = APIRouter(prefix="/correlatividades", tags=["admin: correlatividades"])


# ── Materias ──────────────────────────────────────────────────────────

@materias.get(
    "",
    response_model=list[MateriaItem],
    summary="Listar materias",
    description="Materias activas de carreras activas dentro del alcance. Opcional: filtrar por carrera.",
)
async def listar_materias(
    db: AsyncSession = Depends(get_db),
    alcance: Alcance = Depends(get_alcance),
    id_carrera: Annotated[int | None, Query(description="Filtrar por ID de carrera")] = None,
):
    return await materia_service.listar_materias(db, alcance, id_carrera)


@materias.get("/{id_materia}", response_model=MateriaItem, summary="Detalle de materia")
async def obtener_materia(
    id_materia: int,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_admin),
    alcance: Alcance = Depends(get_alcance),
):
    return await materia_service.obtener_materia(db, principal, alcance, id_materia)


@materias.post(
    "",
    response_model=MateriaItem,
    status_code=status.HTTP_201_CREATED,
    summary="Crear materia",
    responses={400: {"description": "La carrera indicada no existe"}},
)
async def crear_materia(
    body: MateriaCreate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_admin),
    alcance: Alcance = Depends(get_alcance),
):
    return await materia_service.crear_materia(db, principal, alcance, body)


@materias.put("/{id_materia}", response_model=MateriaItem, summary="Actualizar materia")
async def actualizar_materia(
    id_materia: int,
    body: MateriaUpdate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_admin),
    alcance: Alcance = Depends(get_alcance),
):
    return await materia_service.actualizar_materia(db, principal, alcance, id_materia, body)


@materias.delete("/{id_materia}", response_model=MensajeResponse, summary="Baja lógica de materia")
async def eliminar_materia(
    id_materia: int,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_admin),
    alcance: Alcance = Depends(get_alcance),
):
    await materia_service.eliminar_materia(db, principal, alcance, id_materia)
    return MensajeResponse(message="Materia dada de baja.")


# ── Horarios ──────────────────────────────────────────────────────────

@horarios.get(
    "",
    response_model=list[HorarioItem],
    summary="Horarios de una materia",
    description="Ordenados de Lunes a Domingo y por hora de inicio. Sin `id_materia` devuelve una lista vacía.",
)
async def listar_horarios(
    db: AsyncSession = Depends(get_db),
    alcance: Alcance = Depends(get_alcance),
    id_materia: Annotated[int | None, Query(description="ID de la materia")] = None,
):
    return await horario_service.listar_horarios(db, alcance, id_materia)


@horarios.get("/{id_horario}", response_model=HorarioItem, summary="Detalle de horario")
async def obtener_horario(
    id_horario: int,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_admin),
    alcance: Alcance = Depends(get_alcance),
):
    return await horario_service.obtener_horario(db, principal, alcance, id_horario)


@horarios.post(
    "",
    response_model=HorarioItem,
    status_code=status.HTTP_201_CREATED,
    summary="Crear horario",
)
async def crear_horario(
    body: HorarioCreate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_admin),
    alcance: Alcance = Depends(get_alcance),
):
    return await horario_service.crear_horario(db, principal, alcance, body)


@horarios.put("/{id_horario}", response_model=HorarioItem, summary="Actualizar horario")
async def actualizar_horario(
    id_horario: int,
    body: HorarioUpdate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_admin),
    alcance: Alcance = Depends(get_alcance),
):
    return await horario_service.actualizar_horario(db, principal, alcance, id_horario, body)


@horarios.delete("/{id_horario}", response_model=MensajeResponse, summary="Baja lógica de horario")
async def eliminar_horario(
    id_horario: int,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_admin),
    alcance: Alcance = Depends(get_alcance),
):
    await horario_service.eliminar_horario(db, principal, alcance, id_horario)
    return MensajeResponse(message="Horario dado de baja.")


# ── Correlatividades ──────────────────────────────────────────────────

@correlatividades.get(
    "",
    response_model=list[CorrelatividadItem],
    summary="Correlatividades de una materia principal",
)
async def listar_correlatividades(
    db: AsyncSession = Depends(get_db),
    alcance: Alcance = Depends(get_alcance),
    id_materia: Annotated[int | None, Query(description="ID de la materia principal")] = None,
):
    return await correlatividad_service.listar_correlatividades(db, alcance, id_materia)


@correlatividades.get(
    "/{id_correlatividad}", response_model=CorrelatividadItem, summary="Detalle de correlatividad"
)
async def obtener_correlatividad(
    id_correlatividad: int,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_admin),
    alcance: Alcance = Depends(get_alcance),
):
    return await correlatividad_service.obtener_correlatividad(
        db, principal, alcance, id_correlatividad
    )


@correlatividades.post(
    "",
    response_model=CorrelatividadItem,
    status_code=status.HTTP_201_CREATED,
    summary="Crear correlatividad",
    responses={409: {"description": "Autorreferencia o correlatividad duplicada"}},
)
async def crear_correlatividad(
    body: CorrelatividadCreate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_admin),
    alcance: Alcance = Depends(get_alcance),
):
    return await correlatividad_service.crear_correlatividad(db, principal, alcance, body)


@correlatividades.put(
    "/{id_correlatividad}", response_model=CorrelatividadItem, summary="Actualizar correlatividad"
)
async def actualizar_correlatividad(
    id_correlatividad: int,
    body: CorrelatividadUpdate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_admin),
    alcance: Alcance = Depends(get_alcance),
):
    return await correlatividad_service.actualizar_correlatividad(
        db, principal, alcance, id_correlatividad, body
    )


@correlatividades.delete(
    "/{id_correlatividad}",
    response_model=MensajeResponse,
    summary="Baja lógica de correlatividad",
)
async def eliminar_correlatividad(
    id_correlatividad: int,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_admin),
    alcance: Alcance = Depends(get_alcance),
):
    await correlatividad_service.eliminar_correlatividad(db, principal, alcance, id_correlatividad)
    return MensajeResponse(message="Correlatividad dada de baja.")


router.include_router(materias)
router.include_router(horarios)
router.include_router(correlatividades)
