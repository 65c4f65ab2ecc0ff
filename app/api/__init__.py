"""Routers de la API."""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.endpoints import auth, carreras, catalogo, chatbot, materias, usuarios
from app.api.endpoints.auth import get_current_admin
from app.core.database import get_db
from app.schemas.auth import PerfilResponse
from app.services.alcance import Principal, carreras_asignadas

admin = APIRouter(prefix="/admin")
admin.include_router(carreras.router)
admin.include_router(materias.router)
admin.include_router(usuarios.router)

router = APIRouter()
router.include_router(auth.router)
router.include_router(admin)
router.include_router(catalogo.router)
router.include_router(chatbot.router)


@router.get(
    "/me",
    tags=["api"],
    response_model=PerfilResponse,
    summary="Administrador actual (protegido)",
    responses={
        200: {"description": "Perfil obtenido correctamente"},
        401: {"description": "Token no enviado, inválido o expirado"},
        403: {"description": "Cuenta no activa"},
    },
)
async def get_me(
    principal: Principal = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    """
    Devuelve el administrador autenticado y los IDs de las carreras activas que coordina.
    **Requiere:** header `Authorization: Bearer <access_token>`.
    """
    return PerfilResponse(
        id=principal.id,
        nombre=principal.nombre,
        rol=principal.rol,
        estado=principal.estado,
        carreras=sorted(await carreras_asignadas(db, principal.id)),
    )


@router.get(
    "/",
    tags=["api"],
    summary="Raíz de la API v1",
    response_description="Mensaje de bienvenida y enlace a la documentación",
)
async def api_root():
    """Información básica de la API y enlace a la documentación Swagger."""
    return {"message": "Catálogo Académico API v1", "docs": "/docs", "redoc": "/redoc"}
