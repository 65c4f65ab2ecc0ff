"""Catálogo público: carreras, materias, horarios y plan de estudio. No requiere token."""
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import get_db
from app.schemas.auth import MensajeResponse
from app.schemas.catalogo import (
    CarreraDetalle,
    CarreraResumen,
    CoordinadorContacto,
    Dependiente,
    DestacadasResponse,
    FranjaHoraria,
    HorarioDestacado,
    MateriaDetalle,
    MateriaResumen,
)
from app.services import catalogo_service
from app.services.plan_estudio_pdf import generar_plan_estudio_pdf

logger = logging.getLogger(__name__)

router = APIRouter(tags=["catalogo"])


# ---- Carreras ----

@router.get("/carreras", response_model=list[CarreraResumen], summary="Carreras activas")
async def listar_carreras(db: AsyncSession = Depends(get_db)):
    return await catalogo_service.listar_carreras_activas(db)


@router.get(
    "/carreras/{id_carrera}",
    response_model=CarreraDetalle,
    summary="Detalle de carrera con su coordinador",
    responses={404: {"description": "Carrera inexistente o no activa"}},
)
async def obtener_carrera(id_carrera: int, db: AsyncSession = Depends(get_db)):
    carrera = await catalogo_service.obtener_carrera_activa(db, id_carrera)
    coordinador = await catalogo_service.coordinador_activo(db, id_carrera)
    detalle = CarreraDetalle.model_validate(carrera)
    if coordinador is not None:
        detalle.coordinador = CoordinadorContacto(
            nombre=coordinador.nombre, email=coordinador.email, telefono=coordinador.telefono
        )
    return detalle


@router.get(
    "/carreras/{id_carrera}/plan-estudio-pdf",
    summary="Plan de estudio en PDF",
    description=(
        "Tabla del plan por año con correlativas y totales de horas. "
        "El nombre del archivo es `Plan_Estudio_<carrera>.pdf`."
    ),
    response_class=Response,
    responses={
        200: {"content": {"application/pdf": {}}, "description": "Documento PDF"},
        404: {"description": "Carrera inexistente o no activa"},
    },
)
async def plan_estudio_pdf(id_carrera: int, db: AsyncSession = Depends(get_db)):
    plan = await catalogo_service.obtener_plan_estudio(db, id_carrera)
    pdf_bytes, filename = generar_plan_estudio_pdf(plan)
    logger.info("Plan de estudio generado: carrera=%s bytes=%d", id_carrera, len(pdf_bytes))
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


# ---- Años y materias ----

@router.get("/anios", response_model=list[int], summary="Años con materias activas")
async def listar_anios(
    id_carrera: Annotated[int, Query(description="ID de la carrera")],
    db: AsyncSession = Depends(get_db),
):
    return await catalogo_service.anios_de_carrera(db, id_carrera)


@router.get("/materias", response_model=list[MateriaResumen], summary="Materias de una carrera")
async def listar_materias(
    id_carrera: Annotated[int, Query(description="ID de la carrera")],
    db: AsyncSession = Depends(get_db),
    anio: Annotated[int | None, Query(description="Año de cursado", ge=1)] = None,
):
    return await catalogo_service.materias_de_carrera(db, id_carrera, anio)


@router.get(
    "/materias/anio/{anio}",
    response_model=list[MateriaResumen],
    summary="Materias de un año en todas las carreras activas",
)
async def materias_de_anio(anio: int, db: AsyncSession = Depends(get_db)):
    return await catalogo_service.materias_por_anio(db, anio)


@router.get("/materias/buscar", response_model=list[MateriaResumen], summary="Buscar materias por nombre")
async def buscar_materias(
    nombre: Annotated[str, Query(min_length=1, description="Texto a buscar (sin distinguir mayúsculas)")],
    db: AsyncSession = Depends(get_db),
):
    return await catalogo_service.buscar_materias(db, nombre)


@router.get(
    "/materias/{id_materia}",
    response_model=MateriaDetalle,
    summary="Detalle de materia",
    description="Incluye correlativas para cursar (aprobada / regular), para rendir, y los horarios ordenados.",
)
async def detalle_materia(id_materia: int, db: AsyncSession = Depends(get_db)):
    detalle = await catalogo_service.detalle_materia(db, id_materia)
    materia = detalle.pop("materia")
    horarios = [FranjaHoraria.model_validate(h) for h in detalle.pop("horarios")]
    base = MateriaDetalle.model_validate(materia).model_dump(exclude=set(detalle) | {"horarios"})
    return MateriaDetalle(**base, **detalle, horarios=horarios)


@router.get(
    "/materias/{id_materia}/dependientes",
    response_model=list[Dependiente],
    summary="Materias que requieren a esta",
)
async def dependientes(id_materia: int, db: AsyncSession = Depends(get_db)):
    await catalogo_service.obtener_materia_visible(db, id_materia)
    filas = await catalogo_service.dependientes_de(db, id_materia)
    return [
        Dependiente(id=m.id, nombre=m.nombre, anio=m.anio, tipo=tipo, estado_requisito=estado)
        for m, tipo, estado in filas
    ]


@router.get("/horarios", response_model=list[FranjaHoraria], summary="Horarios activos de una materia")
async def listar_horarios(
    id_materia: Annotated[int, Query(description="ID de la materia")],
    db: AsyncSession = Depends(get_db),
):
    return await catalogo_service.horarios_de_materia(db, id_materia)


# ---- Destacadas ----

@router.post(
    "/destacadas/{id_materia}/vista",
    response_model=MensajeResponse,
    summary="Registrar una vista de materia",
)
async def registrar_vista(id_materia: int, db: AsyncSession = Depends(get_db)):
    await catalogo_service.registrar_vista(db, id_materia)
    return MensajeResponse(message="Vista registrada.")


@router.get("/destacadas", response_model=DestacadasResponse, summary="Materias más vistas y sus horarios")
async def destacadas(db: AsyncSession = Depends(get_db)):
    materias, horarios = await catalogo_service.destacadas(db, settings.destacadas_limite)
    return DestacadasResponse(
        materias=[MateriaResumen.model_validate(m) for m in materias],
        horarios=[
            HorarioDestacado(
                dia_semana=h.dia_semana,
                hora_inicio=h.hora_inicio,
                hora_fin=h.hora_fin,
                id_materia=m.id,
                nombre_materia=m.nombre,
            )
            for h, m in horarios
        ],
    )
