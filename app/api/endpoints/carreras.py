"""Endpoints de administración de carreras."""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.endpoints.auth import get_alcance, get_current_admin
from app.core.database import get_db
from app.models import Carrera
from app.schemas.auth import MensajeResponse
from app.schemas.carrera import CarreraCreate, CarreraItem, CarreraUpdate
from app.services import carrera_service
from app.services.alcance import Alcance, Principal

router = APIRouter(prefix="/carreras", tags=["admin: carreras"])


def _item(carrera: Carrera, id_coordinador: int | None) -> CarreraItem:
    return CarreraItem.model_validate(carrera).model_copy(update={"id_coordinador": id_coordinador})


@router.get(
    "",
    response_model=list[CarreraItem],
    summary="Listar carreras",
    description="Rector: carreras activas y cerradas. Coordinador: solo las activas que coordina (vacío si no tiene asignaciones).",
)
async def listar_carreras(
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_admin),
    alcance: Alcance = Depends(get_alcance),
):
    filas = await carrera_service.listar_carreras(db, principal, alcance)
    return [_item(c, id_coord) for c, id_coord in filas]


@router.get("/{id_carrera}", response_model=CarreraItem, summary="Detalle de carrera")
async def obtener_carrera(
    id_carrera: int,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_admin),
    alcance: Alcance = Depends(get_alcance),
):
    carrera, id_coord = await carrera_service.obtener_carrera(db, principal, alcance, id_carrera)
    return _item(carrera, id_coord)


@router.post(
    "",
    response_model=CarreraItem,
    status_code=status.HTTP_201_CREATED,
    summary="Crear carrera (solo Rector)",
    responses={
        400: {"description": "El coordinador indicado no existe o no es Coordinador activo"},
        403: {"description": "Solo el Rector puede crear carreras"},
        409: {"description": "Ya existe una carrera con ese nombre"},
    },
)
async def crear_carrera(
    body: CarreraCreate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_admin),
    alcance: Alcance = Depends(get_alcance),
):
    """Crea la carrera y su asignación de coordinador en una sola transacción."""
    carrera, id_coord = await carrera_service.crear_carrera(db, principal, alcance, body)
    return _item(carrera, id_coord)


@router.put(
    "/{id_carrera}",
    response_model=CarreraItem,
    summary="Actualizar carrera",
    description=(
        "Actualización parcial. Cerrar o inactivar, y cambiar el coordinador, son acciones del Rector. "
        "Cerrar o inactivar quita la asignación del coordinador; reactivar limpia la auditoría."
    ),
)
async def actualizar_carrera(
    id_carrera: int,
    body: CarreraUpdate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_admin),
    alcance: Alcance = Depends(get_alcance),
):
    carrera, id_coord = await carrera_service.actualizar_carrera(
        db, principal, alcance, id_carrera, body
    )
    return _item(carrera, id_coord)


@router.delete(
    "/{id_carrera}",
    response_model=MensajeResponse,
    summary="Baja lógica de carrera (solo Rector)",
    responses={404: {"description": "Carrera inexistente o ya inactiva (ver `motivo`)"}},
)
async def eliminar_carrera(
    id_carrera: int,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_admin),
    alcance: Alcance = Depends(get_alcance),
):
    carrera = await carrera_service.eliminar_carrera(db, principal, alcance, id_carrera)
    return MensajeResponse(message=f"Carrera {carrera.nombre} dada de baja.")
